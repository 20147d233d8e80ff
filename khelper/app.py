"""Main application class for the khelper TUI."""

from __future__ import annotations

import logging

from textual.app import App
from textual.binding import Binding

from khelper.constants import APP_TITLE
from khelper.constants.values import APP_SUBTITLE
from khelper.controllers.base import ResourceClient
from khelper.controllers.kubectl import KubectlClient
from khelper.errors import ClientConfigError
from khelper.keyboard.app import APP_BINDINGS
from khelper.models.session import WizardOutcome
from khelper.models.state.app_settings import AppSettings, ConfigLoadError, ConfigSaveError
from khelper.models.state.config_manager import ConfigManager
from khelper.models.state.preferences import SettingsPreferenceStore
from khelper.presentation.renderer import WizardRenderer
from khelper.presentation.theme import get_theme
from khelper.screens.wizard import WizardPresenter, WizardScreen
from khelper.wizard.controller import WizardController

logger = logging.getLogger(__name__)


class KHelperApp(App[WizardOutcome]):
    """Main TUI application for khelper.

    ``run()`` returns the ``WizardOutcome`` the wizard ended with.
    """

    TITLE = APP_TITLE
    SUB_TITLE = APP_SUBTITLE
    CSS_PATH = "css/app.tcss"
    BINDINGS: list[Binding] = APP_BINDINGS

    def __init__(
        self,
        *,
        kubeconfig: str | None = None,
        namespace: str | None = None,
        deployment: str | None = None,
        pod: str | None = None,
        theme_name: str | None = None,
        client_class: type[ResourceClient] = KubectlClient,
        settings: AppSettings | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.kubeconfig = kubeconfig
        self.namespace = namespace
        self.deployment = deployment
        self.pod = pod
        self.theme_name = theme_name
        self.client_class = client_class

        # Load settings on startup
        if settings is None:
            self._load_settings()
        else:
            self.settings = settings
        self.store = SettingsPreferenceStore(self.settings)

    def _load_settings(self) -> None:
        """Load application settings from persistent storage."""
        try:
            self.settings = ConfigManager.load()
        except ConfigLoadError as exc:
            # Use defaults if loading fails
            logger.warning("Using default settings: %s", exc)
            self.settings = AppSettings()

    def _connect_initial(self) -> tuple[ResourceClient | None, Exception | None]:
        """Client for the CLI kubeconfig, else the stored one, else the default."""
        if self.kubeconfig:
            candidates: list[str | None] = [self.kubeconfig]
        elif self.settings.kubeconfig:
            candidates = [self.settings.kubeconfig, None]
        else:
            candidates = [None]
        error: Exception | None = None
        for path in candidates:
            try:
                return self.client_class.from_kubeconfig(path), None
            except ClientConfigError as exc:
                logger.warning("No usable kubeconfig at startup: %s", exc)
                error = exc
        return None, error

    def build_screen(self) -> WizardScreen:
        client, startup_error = self._connect_initial()
        if client is not None:
            self.store.set_last_context_path(client.context_path)
        controller = WizardController(
            self.store,
            has_client=client is not None,
            context_path=client.context_path if client is not None else "",
            namespace=self.namespace or "",
            resource=self.deployment or "",
            instance=self.pod or "",
            startup_error=startup_error,
            log_tail_lines=self.settings.log_tail_lines,
            stream_tail_lines=self.settings.stream_tail_lines,
        )
        presenter = WizardPresenter(client, self.client_class)
        renderer = WizardRenderer(get_theme(self.theme_name or self.settings.theme))
        return WizardScreen(controller, presenter, renderer)

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen(self.build_screen())

    def action_quit(self) -> None:  # type: ignore[override]
        """Quit through the wizard so the outcome is reported."""
        screen = self.screen
        if isinstance(screen, WizardScreen):
            screen.request_quit()
        else:
            self.exit()

    def on_unmount(self) -> None:
        """Save settings when app exits."""
        try:
            self.store.save()
        except ConfigSaveError as exc:
            logger.error("Failed to save settings: %s", exc)


__all__ = ["KHelperApp"]
