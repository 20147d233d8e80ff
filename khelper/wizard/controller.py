"""Wizard state machine.

``WizardController`` owns one ``FuzzySelector`` per selection step, the
free-form value prompt and the current ``LogViewer``. It is driven by two
entry points, ``handle_key`` and ``dispatch``; both return the effects the
host must run. The controller is synchronous and never talks to a cluster.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from os.path import expanduser
from typing import Any

from khelper.constants.defaults import LOG_TAIL_LINES_DEFAULT, STREAM_TAIL_LINES_DEFAULT
from khelper.constants.enums import ContextKind, LogMode, Requirement
from khelper.constants.limits import (
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    INPUT_CHAR_LIMIT,
)
from khelper.constants.values import (
    KUBECONFIG_PATH_PROMPT,
    MSG_NO_KUBECONFIG,
    NEW_KUBECONFIG_OPTION,
    TITLE_ACTION,
    TITLE_ASSET_FOLDER,
    TITLE_CONTAINER,
    TITLE_DEPLOYMENT,
    TITLE_KUBECONFIG,
    TITLE_NAMESPACE,
    TITLE_POD,
)
from khelper.errors import FatalStartupError, InvalidInputError
from khelper.keyboard.wizard import (
    CONFIRM_KEYS,
    KEY_BACKSPACE,
    KEY_CHANGE_CONFIG,
    KEY_CHANGE_NAMESPACE,
    KEY_ESCAPE,
    KEY_QUIT,
)
from khelper.models.actions import ActionDescriptor, action_labels, parse_action_label
from khelper.models.session import Target, WizardOutcome
from khelper.models.state.preferences import (
    RECENT_ACTIONS,
    RECENT_CONTEXTS,
    RECENT_INSTANCES,
    RECENT_LOG_SEARCHES,
    RECENT_RESOURCES,
    PreferenceStore,
)
from khelper.wizard import effects as fx
from khelper.wizard import messages as msg
from khelper.wizard.log_viewer import LogViewer
from khelper.wizard.query import TextQuery
from khelper.wizard.selector import FuzzySelector
from khelper.wizard.states import (
    AWAIT_INPUT,
    EXECUTING,
    SELECT_ACTION,
    SELECT_ASSET_FOLDER,
    SELECT_CONFIG,
    SELECT_CONTAINER,
    SELECT_NAMESPACE,
    SELECT_POD,
    SELECT_RESOURCE,
    SHOW_RESULT,
    VIEW_LOGS,
    WizardState,
)

logger = logging.getLogger(__name__)

_TITLES: dict[WizardState, str] = {
    SELECT_CONFIG: TITLE_KUBECONFIG,
    SELECT_NAMESPACE: TITLE_NAMESPACE,
    SELECT_RESOURCE: TITLE_DEPLOYMENT,
    SELECT_ACTION: TITLE_ACTION,
    SELECT_POD: TITLE_POD,
    SELECT_CONTAINER: TITLE_CONTAINER,
    SELECT_ASSET_FOLDER: TITLE_ASSET_FOLDER,
}

# States that depend on a chosen resource; restoring one after the cluster
# context changed lands on resource selection instead.
_RESOURCE_DEPENDENT = frozenset({
    SELECT_ACTION,
    SELECT_POD,
    SELECT_CONTAINER,
    SELECT_ASSET_FOLDER,
    AWAIT_INPUT,
    SHOW_RESULT,
})

_QUIT_ON_Q = frozenset({EXECUTING, SHOW_RESULT})

# Steps in the order their choices are made.
_CHOICE_ORDER = (
    SELECT_RESOURCE,
    SELECT_ACTION,
    SELECT_POD,
    SELECT_CONTAINER,
    SELECT_ASSET_FOLDER,
    AWAIT_INPUT,
)


def next_requirement(
    action: ActionDescriptor, target: Target, value: str | None
) -> Requirement:
    """First piece of information still missing before ``action`` can run."""
    if action.requires_instance and not target.instance:
        return Requirement.INSTANCE
    if action.requires_subresource and not target.subresource:
        return Requirement.SUBRESOURCE
    if action.folder_base_path and not target.folder:
        return Requirement.FOLDER
    if action.requires_input and value is None:
        return Requirement.INPUT
    return Requirement.EXECUTE


class WizardController:
    """Drives the selection flow from kubeconfig to action result."""

    def __init__(
        self,
        store: PreferenceStore,
        *,
        has_client: bool = False,
        context_path: str = "",
        namespace: str = "",
        resource: str = "",
        instance: str = "",
        startup_error: Exception | None = None,
        log_tail_lines: int = LOG_TAIL_LINES_DEFAULT,
        stream_tail_lines: int = STREAM_TAIL_LINES_DEFAULT,
    ) -> None:
        self._store = store
        self._selectors = {state: FuzzySelector(title) for state, title in _TITLES.items()}
        self.value_input = TextQuery(INPUT_CHAR_LIMIT)
        self.input_prompt = ""
        self.state: WizardState = SELECT_CONFIG
        self._stack: list[WizardState] = []

        self.has_client = has_client
        self.context_path = context_path
        self.pending_context: str | None = None
        self._entering_config_path = False
        self._startup_error = startup_error

        self.target = Target(namespace=namespace or store.last_namespace(), resource=resource)
        self._preset_resource = resource
        self._preset_instance = instance
        if self._preset_applies():
            self.target = self.target.with_values(instance=instance)
        self.action: ActionDescriptor | None = None
        self.value: str | None = None

        self.result: str | None = None
        self.error: Exception | None = None
        self.notice: str | None = None
        self.viewer: LogViewer | None = None
        self._generation = 0
        self._viewport = (DEFAULT_VIEWPORT_WIDTH, DEFAULT_VIEWPORT_HEIGHT)
        self._log_tail_lines = log_tail_lines
        self._stream_tail_lines = stream_tail_lines
        self.outcome: WizardOutcome | None = None

        self._confirm_handlers: dict[WizardState, Callable[[str], list[fx.Effect]]] = {
            SELECT_CONFIG: self._confirm_config,
            SELECT_NAMESPACE: self._confirm_namespace,
            SELECT_RESOURCE: self._confirm_resource,
            SELECT_ACTION: self._confirm_action,
            SELECT_POD: self._confirm_pod,
            SELECT_CONTAINER: self._confirm_container,
            SELECT_ASSET_FOLDER: self._confirm_folder,
        }
        self._message_handlers: dict[type, Callable[[Any], list[fx.Effect]]] = {
            msg.ContextsLoaded: self._on_contexts_loaded,
            msg.NamespacesLoaded: self._on_namespaces_loaded,
            msg.ResourcesLoaded: self._on_resources_loaded,
            msg.InstancesLoaded: self._on_instances_loaded,
            msg.SubresourcesLoaded: self._on_subresources_loaded,
            msg.FoldersLoaded: self._on_folders_loaded,
            msg.ContextConnected: self._on_context_connected,
            msg.ExecutionFinished: self._on_execution_finished,
            msg.LogsFetched: self._on_logs_fetched,
            msg.LogLineReceived: self._on_log_line,
            msg.LogStreamEnded: self._on_stream_ended,
        }

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def stack(self) -> tuple[WizardState, ...]:
        return tuple(self._stack)

    @property
    def in_detour(self) -> bool:
        return bool(self._stack) and (
            self.state.is_context or (self.state == AWAIT_INPUT and self._entering_config_path)
        )

    @property
    def entering_config_path(self) -> bool:
        return self._entering_config_path

    @property
    def generation(self) -> int:
        return self._generation

    def selector(self, state: WizardState) -> FuzzySelector:
        return self._selectors[state]

    @property
    def active_selector(self) -> FuzzySelector | None:
        return self._selectors.get(self.state)

    def _active_query(self) -> TextQuery | None:
        if self.state == AWAIT_INPUT:
            return self.value_input
        selector = self.active_selector
        return selector.query if selector is not None else None

    def set_viewport(self, width: int, height: int) -> None:
        self._viewport = (width, height)
        if self.viewer is not None:
            self.viewer.set_size(width, height)

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def start(self) -> list[fx.Effect]:
        """Enter the first state and return its loads."""
        if not self.has_client:
            self.notice = MSG_NO_KUBECONFIG
            if self._startup_error is not None:
                self.notice = f"{MSG_NO_KUBECONFIG} ({self._startup_error})"
            return self._enter(SELECT_CONFIG)
        if self.target.namespace and self.target.resource:
            return self._enter(SELECT_ACTION)
        if self.target.namespace:
            return self._enter(SELECT_RESOURCE)
        return self._enter(SELECT_NAMESPACE)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> list[fx.Effect]:
        if self.outcome is not None:
            return []
        if key == KEY_QUIT:
            return self._quit()
        if self.state == VIEW_LOGS:
            return self._handle_log_key(key)
        if key == KEY_CHANGE_CONFIG:
            return self._start_detour(ContextKind.CONFIG)
        if key == KEY_CHANGE_NAMESPACE:
            return self._start_detour(ContextKind.NAMESPACE)
        query = self._active_query()
        if key == KEY_ESCAPE:
            if query:
                query.clear()
                self._refilter()
                return []
            return self.go_back()
        if key == KEY_BACKSPACE and not query:
            return self.go_back()
        if key in CONFIRM_KEYS:
            return self._confirm()
        if key == "q" and self.state in _QUIT_ON_Q:
            return self._quit()
        if self.state == AWAIT_INPUT:
            self.value_input.handle_key(key)
        elif self.active_selector is not None:
            self.active_selector.handle_key(key)
        return []

    def _refilter(self) -> None:
        if self.active_selector is not None:
            self.active_selector.filter()

    def _handle_log_key(self, key: str) -> list[fx.Effect]:
        assert self.viewer is not None
        if key == KEY_ESCAPE or (key == "q" and not self.viewer.search_focused):
            return self._leave_logs()
        self.viewer.handle_key(key)
        return []

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def dispatch(self, message: msg.WizardMessage) -> list[fx.Effect]:
        """Apply a background completion. Stale completions are ignored."""
        if self.outcome is not None:
            return []
        handler = self._message_handlers.get(type(message))
        if handler is None:
            raise TypeError(f"unsupported wizard message: {type(message).__name__}")
        return handler(message)

    def _apply_items(self, state: WizardState, loaded: msg.ItemsLoaded, recent: list[str]) -> bool:
        selector = self._selectors[state]
        if loaded.error is not None:
            logger.warning("Loading %s failed: %s", state, loaded.error)
            selector.set_error(loaded.error)
            return False
        selector.set_recent(recent)
        selector.set_candidates(loaded.items)
        return True

    def _on_contexts_loaded(self, loaded: msg.ContextsLoaded) -> list[fx.Effect]:
        if self.state != SELECT_CONFIG:
            return []
        items = msg.ContextsLoaded((NEW_KUBECONFIG_OPTION, *loaded.items), loaded.error)
        self._apply_items(SELECT_CONFIG, items, self._store.recent_for(RECENT_CONTEXTS))
        return []

    def _on_namespaces_loaded(self, loaded: msg.NamespacesLoaded) -> list[fx.Effect]:
        if self.state == SELECT_NAMESPACE:
            self._apply_items(SELECT_NAMESPACE, loaded, [])
        return []

    def _on_resources_loaded(self, loaded: msg.ResourcesLoaded) -> list[fx.Effect]:
        if self.state == SELECT_RESOURCE and loaded.namespace == self.target.namespace:
            recent = self._store.recent_for(RECENT_RESOURCES, loaded.namespace)
            self._apply_items(SELECT_RESOURCE, loaded, recent)
        return []

    def _on_instances_loaded(self, loaded: msg.InstancesLoaded) -> list[fx.Effect]:
        if self.state == SELECT_POD and loaded.resource == self.target.resource:
            recent = self._store.recent_for(RECENT_INSTANCES, loaded.resource)
            self._apply_items(SELECT_POD, loaded, recent)
        return []

    def _on_subresources_loaded(self, loaded: msg.SubresourcesLoaded) -> list[fx.Effect]:
        if self.state != SELECT_CONTAINER:
            return []
        if self.target.instance and loaded.instance and loaded.instance != self.target.instance:
            return []
        if not self._apply_items(SELECT_CONTAINER, loaded, []):
            return []
        if not self.target.instance:
            self.target = self.target.with_values(instance=loaded.instance)
        if len(loaded.items) == 1:
            self.target = self.target.with_values(subresource=loaded.items[0])
            return self._advance()
        return []

    def _on_folders_loaded(self, loaded: msg.FoldersLoaded) -> list[fx.Effect]:
        if self.state == SELECT_ASSET_FOLDER:
            self._apply_items(SELECT_ASSET_FOLDER, loaded, [])
        return []

    def _on_context_connected(self, connected: msg.ContextConnected) -> list[fx.Effect]:
        if connected.path != self.pending_context:
            return []
        if self.state != SELECT_CONFIG and not self._entering_config_path:
            self.pending_context = None
            return []
        self.pending_context = None
        if connected.error is not None:
            logger.warning("Kubeconfig %s rejected: %s", connected.path, connected.error)
            self.notice = f"Failed to load kubeconfig {connected.path}: {connected.error}"
            if self.state == AWAIT_INPUT:
                self._entering_config_path = False
                return self._restore(SELECT_CONFIG)
            return []
        changed = connected.path != self.context_path
        self.has_client = True
        self.context_path = connected.path
        self.notice = None
        self._entering_config_path = False
        self._store.set_last_context_path(connected.path)
        if self._stack:
            if changed:
                self._stack = [self._clamp(state) for state in self._stack]
            return self._pop_detour(changed)
        return self._enter(SELECT_NAMESPACE)

    def _on_execution_finished(self, finished: msg.ExecutionFinished) -> list[fx.Effect]:
        if self.state != EXECUTING:
            return []
        if finished.error is not None:
            return self._show_result(error=finished.error)
        if finished.result is None:
            outcome = WizardOutcome(
                action=self.action,
                target=self.target,
                value=self.value,
                handoff=self.action is not None and self.action.handoff,
            )
            self.outcome = outcome
            return [fx.Exit(outcome)]
        return self._show_result(result=finished.result)

    def _on_logs_fetched(self, fetched: msg.LogsFetched) -> list[fx.Effect]:
        if self.state != EXECUTING or self.action is None or self.action.log_mode is not LogMode.FETCH:
            return []
        if fetched.error is not None:
            return self._show_result(error=fetched.error)
        viewer = self._open_viewer(streaming=False)
        viewer.set_static_content(fetched.text)
        return []

    def _on_log_line(self, line: msg.LogLineReceived) -> list[fx.Effect]:
        if self.state == VIEW_LOGS and self.viewer is not None and line.generation == self._generation:
            self.viewer.append_line(line.line)
        return []

    def _on_stream_ended(self, ended: msg.LogStreamEnded) -> list[fx.Effect]:
        if self.viewer is None or ended.generation != self._generation:
            return []
        self.viewer.set_streaming(False)
        if ended.error is not None:
            logger.warning("Log stream ended: %s", ended.error)
            self.viewer.note = f"Stream ended: {ended.error}"
        else:
            self.viewer.note = "Stream closed"
        return []

    # ------------------------------------------------------------------
    # Forward transitions
    # ------------------------------------------------------------------

    def _confirm(self) -> list[fx.Effect]:
        if self.state == AWAIT_INPUT:
            return self._confirm_input()
        if self.state == SHOW_RESULT:
            return self._leave_result()
        handler = self._confirm_handlers.get(self.state)
        if handler is None:
            return []
        choice = self._selectors[self.state].current_selection()
        if not choice:
            return []
        return handler(choice)

    def _confirm_config(self, choice: str) -> list[fx.Effect]:
        if choice == NEW_KUBECONFIG_OPTION:
            self._entering_config_path = True
            self.state = AWAIT_INPUT
            self.value_input.clear()
            self.input_prompt = KUBECONFIG_PATH_PROMPT
            return []
        return self._connect(choice)

    def _connect(self, path: str) -> list[fx.Effect]:
        path = expanduser(path)
        self.pending_context = path
        return [fx.ConnectContext(path)]

    def _confirm_namespace(self, choice: str) -> list[fx.Effect]:
        changed = choice != self.target.namespace
        self.target = self.target.with_values(namespace=choice)
        self._store.set_last_namespace(choice)
        if self._stack:
            return self._pop_detour(changed)
        return self._enter(SELECT_RESOURCE)

    def _confirm_resource(self, choice: str) -> list[fx.Effect]:
        self._store.record_recent(RECENT_RESOURCES, self.target.namespace, choice)
        self.target = self.target.with_values(resource=choice)
        return self._enter(SELECT_ACTION)

    def _confirm_action(self, choice: str) -> list[fx.Effect]:
        action = parse_action_label(choice)
        if action is None:
            return []
        self._store.record_recent(RECENT_ACTIONS, "", choice)
        self.action = action
        return self._advance()

    def _confirm_pod(self, choice: str) -> list[fx.Effect]:
        self._store.record_recent(RECENT_INSTANCES, self.target.resource, choice)
        self.target = self.target.with_values(instance=choice)
        return self._advance()

    def _confirm_container(self, choice: str) -> list[fx.Effect]:
        self.target = self.target.with_values(subresource=choice)
        return self._advance()

    def _confirm_folder(self, choice: str) -> list[fx.Effect]:
        self.target = self.target.with_values(folder=choice)
        return self._advance()

    def _confirm_input(self) -> list[fx.Effect]:
        value = self.value_input.value.strip()
        if not value:
            return []
        if self._entering_config_path:
            return self._connect(value)
        self.value = value
        return self._advance()

    def _advance(self) -> list[fx.Effect]:
        assert self.action is not None
        requirement = next_requirement(self.action, self.target, self.value)
        if requirement is Requirement.INSTANCE:
            return self._enter(SELECT_POD)
        if requirement is Requirement.SUBRESOURCE:
            return self._enter(SELECT_CONTAINER)
        if requirement is Requirement.FOLDER:
            return self._enter(SELECT_ASSET_FOLDER)
        if requirement is Requirement.INPUT:
            self.state = AWAIT_INPUT
            self.value_input.clear()
            self.input_prompt = self.action.input_prompt
            return []
        return self._execute()

    def _execute(self) -> list[fx.Effect]:
        action = self.action
        assert action is not None
        try:
            action.validate(self.value)
        except InvalidInputError as exc:
            return self._show_result(error=exc)
        if action.log_mode is LogMode.FOLLOW:
            self._open_viewer(streaming=True)
            self._generation += 1
            return [fx.StartLogStream(self.target, self._stream_tail_lines, self._generation)]
        self.state = EXECUTING
        if action.log_mode is LogMode.FETCH:
            return [fx.FetchLog(self.target, self._log_tail_lines)]
        return [fx.InvokeAction(action.name, self.target, self.value)]

    def _show_result(
        self, *, result: str | None = None, error: Exception | None = None
    ) -> list[fx.Effect]:
        self.state = SHOW_RESULT
        self.result = result
        self.error = error
        return []

    def _open_viewer(self, *, streaming: bool) -> LogViewer:
        title = f"{self.target.pod_name}/{self.target.subresource}"
        viewer = LogViewer(title)
        viewer.set_size(*self._viewport)
        viewer.set_recent_searches(self._store.recent_for(RECENT_LOG_SEARCHES))
        viewer.set_streaming(streaming)
        self.viewer = viewer
        self.state = VIEW_LOGS
        return viewer

    # ------------------------------------------------------------------
    # Entering and restoring states
    # ------------------------------------------------------------------

    def _preset_applies(self) -> bool:
        if not self._preset_instance:
            return False
        return not self._preset_resource or self.target.resource == self._preset_resource

    def _truncate(self, state: WizardState) -> None:
        """Forget every choice made at or after ``state``."""
        if state not in _CHOICE_ORDER:
            return
        cleared = _CHOICE_ORDER[_CHOICE_ORDER.index(state):]
        if SELECT_RESOURCE in cleared:
            self.target = self.target.with_values(resource="")
        if SELECT_ACTION in cleared:
            self.action = None
        if SELECT_POD in cleared:
            instance = self._preset_instance if self._preset_applies() else ""
            self.target = self.target.with_values(instance=instance)
        if SELECT_CONTAINER in cleared:
            self.target = self.target.with_values(subresource="")
        if SELECT_ASSET_FOLDER in cleared:
            self.target = self.target.with_values(folder="")
        if AWAIT_INPUT in cleared:
            self.value = None

    def _load_for(self, state: WizardState) -> fx.Effect | None:
        if state == SELECT_CONFIG:
            return fx.LoadContexts()
        if state == SELECT_NAMESPACE:
            return fx.LoadNamespaces()
        if state == SELECT_RESOURCE:
            return fx.LoadResources(self.target.namespace)
        if state == SELECT_POD:
            return fx.LoadInstances(self.target)
        if state == SELECT_CONTAINER:
            return fx.LoadSubresources(self.target)
        if state == SELECT_ASSET_FOLDER and self.action and self.action.folder_base_path:
            return fx.LoadFolders(self.target, self.action.folder_base_path)
        return None

    def _populate_actions(self) -> None:
        selector = self._selectors[SELECT_ACTION]
        selector.set_recent(self._store.recent_for(RECENT_ACTIONS))
        selector.set_candidates(action_labels())

    def _enter(self, state: WizardState, *, truncate: bool = True) -> list[fx.Effect]:
        """Enter ``state`` with a fresh selector and issue its load."""
        if truncate:
            self._truncate(state)
        self.state = state
        selector = self._selectors.get(state)
        if selector is None:
            return []
        selector.reset()
        if state == SELECT_ACTION:
            self._populate_actions()
            return []
        load = self._load_for(state)
        if load is None:
            return []
        selector.set_loading(True)
        return [load]

    def _restore(self, state: WizardState, *, reset: bool = True) -> list[fx.Effect]:
        """Return to ``state`` keeping its loaded items."""
        self._truncate(state)
        self.state = state
        selector = self._selectors.get(state)
        if state == SELECT_ACTION:
            self._populate_actions()
        if selector is not None and reset:
            selector.reset()
        return []

    # ------------------------------------------------------------------
    # Back navigation
    # ------------------------------------------------------------------

    def go_back(self) -> list[fx.Effect]:
        state = self.state
        if state.is_context:
            self.pending_context = None
            if self._stack:
                return self._restore(self._stack.pop(), reset=False)
            return []
        if state == AWAIT_INPUT and self._entering_config_path:
            self._entering_config_path = False
            self.pending_context = None
            return self._restore(SELECT_CONFIG)
        if state == SELECT_ACTION:
            return self._enter(SELECT_RESOURCE)
        if state == SELECT_POD:
            return self._restore(SELECT_ACTION)
        if state == SELECT_CONTAINER:
            return self._restore(self._container_predecessor())
        if state == SELECT_ASSET_FOLDER:
            return self._restore(SELECT_CONTAINER)
        if state == AWAIT_INPUT:
            return self._restore(self._input_predecessor())
        if state == SHOW_RESULT:
            return self._leave_result()
        return []

    def _container_predecessor(self) -> WizardState:
        assert self.action is not None
        if self.action.requires_instance and not self._preset_applies():
            return SELECT_POD
        return SELECT_ACTION

    def _input_predecessor(self) -> WizardState:
        assert self.action is not None
        if self.action.folder_base_path:
            return SELECT_ASSET_FOLDER
        if self.action.requires_subresource:
            return SELECT_CONTAINER
        if self.action.requires_instance and not self._preset_applies():
            return SELECT_POD
        return SELECT_ACTION

    def _leave_result(self) -> list[fx.Effect]:
        self.result = None
        self.error = None
        return self._enter(SELECT_ACTION)

    # ------------------------------------------------------------------
    # Detours
    # ------------------------------------------------------------------

    def _start_detour(self, kind: ContextKind) -> list[fx.Effect]:
        destination = SELECT_CONFIG if kind is ContextKind.CONFIG else SELECT_NAMESPACE
        if self.state in (EXECUTING, VIEW_LOGS) or self.state == destination:
            return []
        if self.state == AWAIT_INPUT and self._entering_config_path:
            return []
        if kind is ContextKind.NAMESPACE and not self.has_client:
            return []
        self._stack.append(self.state)
        return self._enter(destination, truncate=False)

    def _clamp(self, state: WizardState) -> WizardState:
        if state in _RESOURCE_DEPENDENT or state == SELECT_RESOURCE:
            return SELECT_RESOURCE if self.target.namespace else SELECT_NAMESPACE
        return state

    def _pop_detour(self, changed: bool) -> list[fx.Effect]:
        previous = self._stack.pop()
        if changed:
            previous = self._clamp(previous)
            return self._enter(previous)
        if previous.is_selection:
            return self._enter(previous, truncate=False)
        self.state = previous
        return []

    # ------------------------------------------------------------------
    # Leaving
    # ------------------------------------------------------------------

    def _stop_stream(self) -> list[fx.Effect]:
        if self.viewer is None or not self.viewer.streaming:
            return []
        self.viewer.set_streaming(False)
        return [fx.CancelLogStream(self._generation)]

    def _leave_logs(self) -> list[fx.Effect]:
        effects = self._stop_stream()
        if self.viewer is not None:
            query = self.viewer.search_query().strip()
            if query:
                self._store.record_recent(RECENT_LOG_SEARCHES, "", query)
        self.viewer = None
        return effects + self._enter(SELECT_ACTION)

    def _quit(self) -> list[fx.Effect]:
        effects = self._stop_stream()
        error = None
        if not self.has_client:
            reason = self._startup_error or "no kubeconfig selected"
            error = FatalStartupError(f"no usable kubeconfig: {reason}")
        outcome = WizardOutcome(
            action=self.action,
            target=self.target,
            value=self.value,
            error=error,
        )
        self.outcome = outcome
        return [*effects, fx.Exit(outcome)]


__all__ = ["WizardController", "next_requirement"]
