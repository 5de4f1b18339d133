"""
Document model: projects, screens, groups, elements, interactions, assets.
"""

from .entities import (
    Asset,
    CanvasElement,
    DocumentModel,
    ElementStyle,
    GridConfig,
    Interaction,
    Project,
    ProjectSummary,
    Screen,
    ScreenGroup,
)
from .errors import (
    ConfirmationRequired,
    DuplicateTrigger,
    EmptyProjectGuard,
    HierarchyViolation,
    InvalidImport,
    InvalidInteraction,
    LockedEntity,
    MockflowError,
)
from .types import (
    Action,
    AssetType,
    CONTAINER_TYPES,
    ElementType,
    NavigationContext,
    NodeKind,
    ProjectType,
    Trigger,
)
from .props import validate_props, props_model

__all__ = [
    # Entities
    "Asset",
    "CanvasElement",
    "DocumentModel",
    "ElementStyle",
    "GridConfig",
    "Interaction",
    "Project",
    "ProjectSummary",
    "Screen",
    "ScreenGroup",
    # Errors
    "ConfirmationRequired",
    "DuplicateTrigger",
    "EmptyProjectGuard",
    "HierarchyViolation",
    "InvalidImport",
    "InvalidInteraction",
    "LockedEntity",
    "MockflowError",
    # Vocabularies
    "Action",
    "AssetType",
    "CONTAINER_TYPES",
    "ElementType",
    "NavigationContext",
    "NodeKind",
    "ProjectType",
    "Trigger",
    # Props
    "validate_props",
    "props_model",
]
