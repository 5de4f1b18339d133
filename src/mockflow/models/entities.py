"""
Document Data Models.

Immutable pydantic models for a prototype project. Python attributes are
snake_case; the stored document uses camelCase through the alias generator.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel

from .types import Action, AssetType, CONTAINER_TYPES, ElementType, ProjectType, Trigger


class DocumentModel(BaseModel):
    """Base for document entities."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=True,
        validate_default=True,
        extra="ignore",
    )


class GridConfig(DocumentModel):
    """Canvas grid settings."""

    visible: bool = True
    size: int = Field(default=20, gt=0)
    color: str = "#cbd5e1"
    snap_to_grid: bool = True


class ElementStyle(DocumentModel):
    """Visual style of an element. Unknown style keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    # Color
    background_color: str | None = None
    color: str | None = None
    opacity: float | None = Field(default=None, ge=0.0, le=1.0)

    # Typography
    font_family: str | None = None
    font_size: float | None = None
    font_weight: str | int | None = None
    font_style: str | None = None
    text_align: str | None = None
    text_transform: str | None = None
    text_decoration: str | None = None
    letter_spacing: float | None = None
    line_height: float | None = None

    # Border
    border_width: float | None = None
    border_color: str | None = None
    border_style: str | None = None
    border_radius: float | None = None

    # Box
    padding: float | None = None
    shadow: bool | None = None

    @model_serializer(mode="wrap")
    def _keep_extras(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # Unknown keys stored as null are kept even under exclude_none
        data = handler(self)
        for key, value in (self.model_extra or {}).items():
            data.setdefault(key, value)
        return data


class Interaction(DocumentModel):
    """One trigger -> action binding on an element."""

    id: str
    trigger: Trigger = Trigger.ON_CLICK
    action: Action = Action.NAVIGATE
    payload: str | None = None


class CanvasElement(DocumentModel):
    """An object placed on a screen."""

    id: str
    type: ElementType
    name: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=100.0, ge=0.0)
    height: float = Field(default=100.0, ge=0.0)
    z_index: int = 0
    parent_id: str | None = None
    locked: bool = False
    hidden: bool = False
    collapsed: bool = False
    props: dict[str, Any] = Field(default_factory=dict)
    style: ElementStyle = Field(default_factory=ElementStyle)
    interactions: list[Interaction] = Field(default_factory=list)

    @property
    def is_container(self) -> bool:
        """Whether the element acts as a folder in the layer tree."""
        return self.type in CONTAINER_TYPES

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def interaction_for(self, trigger: str) -> Interaction | None:
        return next((i for i in self.interactions if i.trigger == trigger), None)


class Screen(DocumentModel):
    """A single canvas page."""

    id: str
    name: str
    background_color: str = "#ffffff"
    # Unset viewport/grid fields inherit the project defaults
    viewport_width: int | None = Field(default=None, gt=0)
    viewport_height: int | None = Field(default=None, gt=0)
    grid_config: GridConfig | None = None
    group_id: str | None = None
    locked: bool = False
    hidden: bool = False
    elements: list[CanvasElement] = Field(default_factory=list)

    def element(self, element_id: str) -> CanvasElement | None:
        return next((e for e in self.elements if e.id == element_id), None)

    def children(self, parent_id: str | None) -> list[CanvasElement]:
        """Direct children of an element (None = root level), in list order."""
        return [e for e in self.elements if e.parent_id == parent_id]

    @property
    def max_z_index(self) -> int:
        return max((e.z_index for e in self.elements), default=0)

    def with_elements(self, elements: list[CanvasElement]) -> "Screen":
        return self.model_copy(update={"elements": elements})


class ScreenGroup(DocumentModel):
    """A folder of screens and nested groups."""

    id: str
    name: str
    parent_id: str | None = None
    hidden: bool = False
    locked: bool = False
    collapsed: bool = False


class Asset(DocumentModel):
    """Uploaded media embedded in the project."""

    id: str
    name: str
    type: AssetType
    src: str


class Project(DocumentModel):
    """Root aggregate of a prototype."""

    id: str
    name: str
    description: str = ""
    project_type: ProjectType | None = None
    tags: list[str] = Field(default_factory=list)
    icon: str | None = None
    viewport_width: int = Field(default=375, gt=0)
    viewport_height: int = Field(default=812, gt=0)
    grid_config: GridConfig = Field(default_factory=GridConfig)
    created_at: int = 0
    last_modified: int = 0
    screens: list[Screen] = Field(default_factory=list)
    screen_groups: list[ScreenGroup] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)
    active_screen_id: str = ""

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def screen_ids(self) -> list[str]:
        return [s.id for s in self.screens]

    @property
    def active_screen(self) -> Screen | None:
        return self.screen(self.active_screen_id)

    def screen(self, screen_id: str | None) -> Screen | None:
        return next((s for s in self.screens if s.id == screen_id), None)

    def screen_group(self, group_id: str | None) -> ScreenGroup | None:
        return next((g for g in self.screen_groups if g.id == group_id), None)

    def asset(self, asset_id: str) -> Asset | None:
        return next((a for a in self.assets if a.id == asset_id), None)

    def locate_element(self, element_id: str) -> tuple[Screen, CanvasElement] | None:
        """Find an element on any screen."""
        for screen in self.screens:
            element = screen.element(element_id)
            if element is not None:
                return screen, element
        return None

    def locate_interaction(
        self, interaction_id: str
    ) -> tuple[Screen, CanvasElement, Interaction] | None:
        for screen in self.screens:
            for element in screen.elements:
                for interaction in element.interactions:
                    if interaction.id == interaction_id:
                        return screen, element, interaction
        return None

    # ------------------------------------------------------------------
    # Copy helpers
    # ------------------------------------------------------------------

    def with_screen(self, screen: Screen) -> "Project":
        """Replace the screen with the same id."""
        screens = [screen if s.id == screen.id else s for s in self.screens]
        return self.model_copy(update={"screens": screens})


class ProjectSummary(DocumentModel):
    """Index entry used for listing projects without loading them."""

    id: str
    name: str
    last_modified: int
