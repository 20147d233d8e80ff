"""The wizard screen.

Keys are normalized and handed to ``WizardController``; the effects it
returns are executed as workers. Workers report back by posting a
``WizardEvent`` to this screen, which applies it on the UI thread.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from textual import events
from textual.app import ComposeResult
from textual.css.query import NoMatches
from textual.message import Message
from textual.screen import Screen

from khelper.keyboard.wizard import KEY_QUIT, normalize_key
from khelper.models.session import WizardOutcome
from khelper.presentation.renderer import WizardRenderer
from khelper.screens.mixins.worker_mixin import WorkerMixin
from khelper.screens.wizard.presenter import WizardPresenter
from khelper.widgets import WizardPanel
from khelper.wizard import effects as fx
from khelper.wizard import messages as msg
from khelper.wizard.controller import WizardController

logger = logging.getLogger(__name__)

LOG_STREAM_GROUP = "log-stream"
EFFECT_GROUP = "wizard-effects"


class WizardEvent(Message):
    """A background completion to apply to the wizard."""

    def __init__(self, payload: msg.WizardMessage) -> None:
        super().__init__()
        self.payload = payload


class WizardScreen(WorkerMixin, Screen[WizardOutcome]):
    """Hosts the wizard and runs its effects."""

    def __init__(
        self,
        controller: WizardController,
        presenter: WizardPresenter,
        renderer: WizardRenderer,
    ) -> None:
        super().__init__()
        self.controller = controller
        self.presenter = presenter
        self.renderer = renderer

    def compose(self) -> ComposeResult:
        yield WizardPanel(id="wizard-panel")

    def on_mount(self) -> None:
        self.controller.set_viewport(self.size.width, self.size.height)
        self._run_effects(self.controller.start())
        self._refresh_view()

    def on_resize(self, event: events.Resize) -> None:
        self.controller.set_viewport(event.size.width, event.size.height)
        self._refresh_view()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self._apply_key(normalize_key(event.key, event.character))

    def request_quit(self) -> None:
        """Quit the way ``ctrl+c`` does inside the wizard."""
        self._apply_key(KEY_QUIT)

    def _apply_key(self, key: str) -> None:
        self._run_effects(self.controller.handle_key(key))
        self._refresh_view()

    def on_wizard_event(self, event: WizardEvent) -> None:
        payload = event.payload
        self._run_effects(self.controller.dispatch(payload))
        if (
            isinstance(payload, msg.ContextConnected)
            and payload.client is not None
            and self.controller.has_client
            and self.controller.context_path == payload.path
        ):
            self.presenter.client = payload.client
        self._refresh_view()

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def _post(self, payload: msg.WizardMessage) -> None:
        self.post_message(WizardEvent(payload))

    def _run_effects(self, effects: list[fx.Effect]) -> None:
        for effect in effects:
            if isinstance(effect, fx.Exit):
                self._exit(effect.outcome)
            elif isinstance(effect, fx.CancelLogStream):
                logger.debug("Cancelling log stream generation %d", effect.generation)
                self.cancel_group(LOG_STREAM_GROUP)
            elif isinstance(effect, fx.StartLogStream):
                self.start_worker(
                    self._stream_worker(effect),
                    group=LOG_STREAM_GROUP,
                    exclusive=True,
                    name=f"log-stream-{effect.generation}",
                )
            else:
                self.start_worker(
                    self._effect_worker(effect),
                    group=EFFECT_GROUP,
                    name=type(effect).__name__,
                )

    async def _effect_worker(self, effect: fx.Effect) -> None:
        self._post(await self.presenter.run(effect))

    async def _stream_worker(self, effect: fx.StartLogStream) -> None:
        await self.presenter.stream(effect, self._post)

    def _exit(self, outcome: WizardOutcome) -> None:
        self.cancel_workers()
        self.app.exit(outcome)

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def _refresh_view(self) -> None:
        with suppress(NoMatches):
            self.query_one("#wizard-panel", WizardPanel).show(self.renderer.render(self.controller))


__all__ = ["EFFECT_GROUP", "LOG_STREAM_GROUP", "WizardEvent", "WizardScreen"]
