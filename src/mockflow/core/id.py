"""ID Generation System.

Centralized ULID-based ID management for document entities.

Features:
- ULIDs: Lexicographically sortable, timestamp-based
- Type-safe: NewType wrappers for different entity kinds
- Prefixed: Type-specific prefixes for debugging (scr_*, el_*, etc.)

Ids read from imported documents are treated as opaque strings; only ids
minted here are guaranteed to carry a prefix.
"""

from typing import NewType
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

ProjectID = NewType("ProjectID", str)
"""Project document identifier"""

ScreenID = NewType("ScreenID", str)
"""Screen (canvas page) identifier"""

ScreenGroupID = NewType("ScreenGroupID", str)
"""Screen group (folder) identifier"""

ElementID = NewType("ElementID", str)
"""Canvas element identifier"""

InteractionID = NewType("InteractionID", str)
"""Interaction binding identifier"""

AssetID = NewType("AssetID", str)
"""Uploaded asset identifier"""

# ============================================================================
# ID Prefixes (for debugging and type identification)
# ============================================================================


class Prefix:
    """ID prefix constants."""

    PROJECT = "prj"
    SCREEN = "scr"
    SCREEN_GROUP = "sgr"
    ELEMENT = "el"
    INTERACTION = "int"
    ASSET = "ast"


# ============================================================================
# ULID Generator
# ============================================================================


class Generator:
    """ULID generator with optional type prefix."""

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"


# Singleton instance
_generator = Generator()

# ============================================================================
# Typed ID Generators
# ============================================================================


def new_project_id() -> ProjectID:
    """Generate new project ID."""
    return ProjectID(_generator.generate_with_prefix(Prefix.PROJECT))


def new_screen_id() -> ScreenID:
    """Generate new screen ID."""
    return ScreenID(_generator.generate_with_prefix(Prefix.SCREEN))


def new_screen_group_id() -> ScreenGroupID:
    """Generate new screen group ID."""
    return ScreenGroupID(_generator.generate_with_prefix(Prefix.SCREEN_GROUP))


def new_element_id() -> ElementID:
    """Generate new element ID."""
    return ElementID(_generator.generate_with_prefix(Prefix.ELEMENT))


def new_interaction_id() -> InteractionID:
    """Generate new interaction ID."""
    return InteractionID(_generator.generate_with_prefix(Prefix.INTERACTION))


def new_asset_id() -> AssetID:
    """Generate new asset ID."""
    return AssetID(_generator.generate_with_prefix(Prefix.ASSET))


def generate_raw() -> str:
    """Generate ULID without prefix (for internal use)."""
    return _generator.generate()
