"""Closed vocabularies of the document model."""

from enum import Enum


class ElementType(str, Enum):
    """Kinds of canvas elements."""

    GROUP = "group"
    CONTAINER = "container"
    BUTTON = "button"
    TEXT = "text"
    INPUT = "input"
    TEXTAREA = "textarea"
    IMAGE = "image"
    VIDEO = "video"
    NAVBAR = "navbar"
    CARD = "card"
    ICON = "icon"
    CIRCLE = "circle"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    TOGGLE = "toggle"


# Element types that act as folders in the layer tree
CONTAINER_TYPES = (ElementType.GROUP, ElementType.CONTAINER)


class Trigger(str, Enum):
    """Interaction triggers."""

    ON_CLICK = "onClick"


class Action(str, Enum):
    """Interaction actions."""

    NAVIGATE = "navigate"
    BACK = "back"
    ALERT = "alert"
    URL = "url"
    NONE = "none"


class AssetType(str, Enum):
    """Uploaded media kinds."""

    IMAGE = "image"
    VIDEO = "video"


class ProjectType(str, Enum):
    """Target device class."""

    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class NodeKind(str, Enum):
    """Kinds of nodes in the containment hierarchy."""

    ELEMENT = "element"
    SCREEN = "screen"
    SCREEN_GROUP = "screen_group"


class NavigationContext(str, Enum):
    """Which left-sidebar panel currently has focus."""

    SCREENS = "screens"
    LAYERS = "layers"
    CANVAS = "canvas"
    PROJECT = "project"
    SETTINGS = "settings"
