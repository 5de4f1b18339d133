"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from .config import Settings, get_settings
from .logging_config import configure_logging
from ..api.editor import Editor
from ..models import Project
from ..storage import ProjectStore


class EditorFactory:
    """Opens autosaving editor sessions backed by the shared store."""

    def __init__(self, store: ProjectStore) -> None:
        self.store = store

    def __call__(self, project: Project) -> Editor:
        return Editor(project, store=self.store, autosave=True)

    def open_latest(self) -> Editor | None:
        project = self.store.load_latest()
        return self(project) if project is not None else None


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings singleton."""
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_store(self, settings: Settings) -> ProjectStore:
        """Provide project store rooted at the configured directory."""
        return ProjectStore(settings.storage_dir, settings.store_cache_size, settings)

    @singleton
    @provider
    def provide_editor_factory(self, store: ProjectStore) -> EditorFactory:
        """Provide editor factory with the shared store."""
        return EditorFactory(store)


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    injector = Injector([CoreModule(settings)])
    resolved = injector.get(Settings)
    configure_logging(resolved.log_level, resolved.json_logs)
    return injector
