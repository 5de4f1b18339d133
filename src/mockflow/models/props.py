"""Per-type element props.

Props are stored as an open map so documents stay compatible with any
element palette. These variants validate the keys each element type is
known to read; they are applied when props enter through the mutation API,
not throughout the hierarchy engine.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr
from pydantic.alias_generators import to_camel

from .types import ElementType


class ElementProps(BaseModel):
    """Base props variant; unknown keys pass through."""

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, alias_generator=to_camel
    )


class TextProps(ElementProps):
    text: StrictStr | None = None


class ButtonProps(ElementProps):
    text: StrictStr | None = None
    icon: StrictStr | None = None
    left_icon: StrictStr | None = None
    right_icon: StrictStr | None = None


class IconStyle(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)

    color: StrictStr | None = None
    size: float | None = None
    stroke_width: float | None = None
    absolute_stroke_width: StrictBool | None = None


class IconProps(ElementProps):
    icon_name: StrictStr | None = None
    icon_style: IconStyle | None = None


class MediaProps(ElementProps):
    src: StrictStr | None = None
    alt: StrictStr | None = None
    asset_id: StrictStr | None = None


class VideoProps(MediaProps):
    autoplay: StrictBool | None = None
    loop: StrictBool | None = None
    muted: StrictBool | None = None


class FieldProps(ElementProps):
    placeholder: StrictStr | None = None
    value: StrictStr | None = None


class ChoiceProps(ElementProps):
    label: StrictStr | None = None
    checked: StrictBool | None = None


class HeadingProps(ElementProps):
    title: StrictStr | None = None
    subtitle: StrictStr | None = None


PROPS_BY_TYPE: dict[str, type[ElementProps]] = {
    ElementType.GROUP.value: ElementProps,
    ElementType.CONTAINER.value: ElementProps,
    ElementType.CIRCLE.value: ElementProps,
    ElementType.TEXT.value: TextProps,
    ElementType.BUTTON.value: ButtonProps,
    ElementType.ICON.value: IconProps,
    ElementType.IMAGE.value: MediaProps,
    ElementType.VIDEO.value: VideoProps,
    ElementType.INPUT.value: FieldProps,
    ElementType.TEXTAREA.value: FieldProps,
    ElementType.CHECKBOX.value: ChoiceProps,
    ElementType.RADIO.value: ChoiceProps,
    ElementType.TOGGLE.value: ChoiceProps,
    ElementType.NAVBAR.value: HeadingProps,
    ElementType.CARD.value: HeadingProps,
}


def props_model(element_type: str) -> type[ElementProps]:
    """Props variant for an element type."""
    key = element_type.value if isinstance(element_type, ElementType) else element_type
    return PROPS_BY_TYPE.get(key, ElementProps)


def validate_props(element_type: str, props: dict[str, Any]) -> dict[str, Any]:
    """
    Check props against the element type's variant.

    Args:
        element_type: Element type value
        props: Props map (possibly a partial patch)

    Returns:
        The props unchanged

    Raises:
        pydantic.ValidationError: If a known key has the wrong type
    """
    props_model(element_type).model_validate(props)
    return props
