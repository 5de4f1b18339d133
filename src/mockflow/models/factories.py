"""Constructors for new document entities with palette defaults."""

import time
from typing import Any

from ..core.config import Settings, get_settings
from ..core.id import (
    new_asset_id,
    new_element_id,
    new_interaction_id,
    new_project_id,
    new_screen_group_id,
    new_screen_id,
)
from .entities import (
    Asset,
    CanvasElement,
    ElementStyle,
    GridConfig,
    Interaction,
    Project,
    Screen,
    ScreenGroup,
)
from .types import Action, AssetType, ElementType, ProjectType, Trigger

HOME_SCREEN_NAME = "Home"

# Drawing tools that map onto an element type with preset geometry/style.
# tool -> (type, name, width, height, style, props)
TOOL_PRESETS: dict[str, tuple[ElementType, str, float, float, dict[str, Any], dict[str, Any]]] = {
    "text": (
        ElementType.TEXT, "Text", 150, 40,
        {"fontSize": 16, "color": "#000000", "backgroundColor": "transparent"},
        {"text": "Type something..."},
    ),
    "rectangle": (
        ElementType.CONTAINER, "Rectangle", 100, 100,
        {"backgroundColor": "#cbd5e1", "borderRadius": 0}, {},
    ),
    "rounded": (
        ElementType.CONTAINER, "Rounded Rect", 100, 100,
        {"backgroundColor": "#cbd5e1", "borderRadius": 16}, {},
    ),
    "ellipse": (
        ElementType.CIRCLE, "Ellipse", 100, 100,
        {"backgroundColor": "#cbd5e1", "borderRadius": 50}, {},
    ),
    "line": (
        ElementType.CONTAINER, "Line", 200, 2,
        {"backgroundColor": "#000000", "borderRadius": 0}, {},
    ),
    "arrow": (
        ElementType.ICON, "Arrow", 50, 50,
        {"backgroundColor": "transparent", "color": "#000000"},
        {"iconName": "MoveRight"},
    ),
    "polygon": (
        ElementType.ICON, "Polygon", 100, 100,
        {"backgroundColor": "transparent", "color": "#cbd5e1"},
        {"iconName": "Triangle"},
    ),
}


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def default_grid(settings: Settings | None = None) -> GridConfig:
    settings = settings or get_settings()
    return GridConfig(
        visible=settings.grid_visible,
        size=settings.grid_size,
        color=settings.grid_color,
        snap_to_grid=settings.snap_to_grid,
    )


def new_screen(
    name: str,
    *,
    background_color: str = "#ffffff",
    group_id: str | None = None,
    elements: list[CanvasElement] | None = None,
) -> Screen:
    return Screen(
        id=new_screen_id(),
        name=name,
        background_color=background_color,
        group_id=group_id,
        elements=elements or [],
    )


def home_screen() -> Screen:
    """Empty screen synthesized when a project would otherwise have none."""
    return new_screen(HOME_SCREEN_NAME)


def new_project(
    name: str = "New Project",
    *,
    description: str = "",
    project_type: ProjectType | None = ProjectType.MOBILE,
    viewport_width: int | None = None,
    viewport_height: int | None = None,
    settings: Settings | None = None,
) -> Project:
    """
    Create a project with a single empty home screen.

    Viewport and grid default to the configured settings.
    """
    settings = settings or get_settings()
    screen = new_screen(HOME_SCREEN_NAME, background_color=settings.default_background_color)
    timestamp = now_ms()

    return Project(
        id=new_project_id(),
        name=name,
        description=description,
        project_type=project_type,
        viewport_width=viewport_width or settings.default_viewport_width,
        viewport_height=viewport_height or settings.default_viewport_height,
        grid_config=default_grid(settings),
        created_at=timestamp,
        last_modified=timestamp,
        screens=[screen],
        active_screen_id=screen.id,
    )


def new_screen_group(name: str = "New Group", parent_id: str | None = None) -> ScreenGroup:
    return ScreenGroup(id=new_screen_group_id(), name=name, parent_id=parent_id)


def new_element(
    tool: str,
    screen: Screen,
    viewport_width: int,
    viewport_height: int,
) -> CanvasElement | None:
    """
    Create an element for a drawing tool or element type.

    The element is centered on the viewport and stacked above everything
    already on the screen.

    Args:
        tool: Drawing tool name (see TOOL_PRESETS) or an ElementType value
        screen: Screen the element will be placed on
        viewport_width: Viewport width used for centering
        viewport_height: Viewport height used for centering

    Returns:
        New element, or None for an unknown tool
    """
    if tool in TOOL_PRESETS:
        element_type, name, width, height, style, props = TOOL_PRESETS[tool]
    elif tool in {t.value for t in ElementType}:
        element_type, name, width, height = ElementType(tool), tool.capitalize(), 100, 100
        style, props = {"backgroundColor": "#e2e8f0"}, {}
    else:
        return None

    return CanvasElement(
        id=new_element_id(),
        type=element_type,
        name=name,
        x=viewport_width / 2 - 50,
        y=viewport_height / 2 - 50,
        width=width,
        height=height,
        z_index=len(screen.elements) + 1,
        props=dict(props),
        style=ElementStyle.model_validate(style),
    )


def new_group_element(
    x: float,
    y: float,
    width: float,
    height: float,
    *,
    z_index: int,
    parent_id: str | None = None,
    name: str = "Group",
) -> CanvasElement:
    return CanvasElement(
        id=new_element_id(),
        type=ElementType.GROUP,
        name=name,
        x=x,
        y=y,
        width=width,
        height=height,
        z_index=z_index,
        parent_id=parent_id,
        style=ElementStyle(background_color="transparent"),
    )


def new_interaction(
    action: Action = Action.NAVIGATE,
    payload: str | None = None,
    trigger: Trigger = Trigger.ON_CLICK,
) -> Interaction:
    return Interaction(id=new_interaction_id(), trigger=trigger, action=action, payload=payload)


def new_asset(name: str, asset_type: AssetType, src: str) -> Asset:
    return Asset(id=new_asset_id(), name=name, type=asset_type, src=src)
