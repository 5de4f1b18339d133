"""Pytest configuration and fixtures."""

import os

import pytest

from mockflow.core import create_container, get_settings
from mockflow.models import (
    CanvasElement,
    Interaction,
    Project,
    Screen,
    ScreenGroup,
)
from mockflow.storage import ProjectStore


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["MOCKFLOW_LOG_LEVEL"] = "DEBUG"
    os.environ["MOCKFLOW_JSON_LOGS"] = "false"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def store(tmp_path):
    """Project store in a temporary directory."""
    return ProjectStore(tmp_path / "projects", cache_size=4)


@pytest.fixture
def di_container(tmp_path):
    """Dependency injection container for testing."""
    from mockflow.core.config import Settings

    return create_container(Settings(storage_dir=tmp_path / "di"))


# ============================================================================
# Document Fixtures
# ============================================================================

def make_element(element_id: str, **kwargs) -> CanvasElement:
    """Element with small defaults; keyword arguments override."""
    fields = {"type": "container", "name": element_id, "width": 10.0, "height": 10.0}
    fields.update(kwargs)
    return CanvasElement(id=element_id, **fields)


@pytest.fixture
def element_factory():
    """The make_element helper, for tests that build their own screens."""
    return make_element


@pytest.fixture
def sample_project() -> Project:
    """
    Three screens, two nested groups, a small layer tree on screen A.

        sgr_root
        └── sgr_child
            └── scr_c
        scr_a
        ├── el_frame (container)
        │   ├── el_title
        │   └── el_button  (onClick -> navigate scr_b)
        └── el_free
        scr_b
        └── el_back       (onClick -> back)
    """
    screen_a = Screen(
        id="scr_a",
        name="A",
        elements=[
            make_element("el_frame", x=0, y=0, width=200, height=200, z_index=1),
            make_element(
                "el_title", type="text", x=10, y=10, width=100, height=20,
                z_index=2, parent_id="el_frame", props={"text": "Hello"},
            ),
            make_element(
                "el_button", type="button", x=20, y=50, width=80, height=30,
                z_index=3, parent_id="el_frame",
                interactions=[Interaction(id="int_go", action="navigate", payload="scr_b")],
            ),
            make_element("el_free", type="text", x=300, y=300, width=50, height=50, z_index=4),
        ],
    )
    screen_b = Screen(
        id="scr_b",
        name="B",
        elements=[
            make_element(
                "el_back", type="button", z_index=1,
                interactions=[Interaction(id="int_back", action="back")],
            ),
        ],
    )
    screen_c = Screen(id="scr_c", name="C", group_id="sgr_child")

    return Project(
        id="prj_sample",
        name="Sample",
        created_at=1_000,
        last_modified=1_000,
        screens=[screen_a, screen_b, screen_c],
        screen_groups=[
            ScreenGroup(id="sgr_root", name="Root"),
            ScreenGroup(id="sgr_child", name="Child", parent_id="sgr_root"),
        ],
        active_screen_id="scr_a",
    )
