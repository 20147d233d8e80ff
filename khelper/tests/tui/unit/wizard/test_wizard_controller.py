"""Tests for the wizard state machine.

This module tests:
- Startup states and their loads
- Forward flows for input, pod, container, folder and log actions
- Back navigation and query clearing
- Kubeconfig and namespace detours
- Stale completions and log stream generations
- Quit and hand-off outcomes
"""

from __future__ import annotations

import pytest

from khelper.constants.enums import Requirement
from khelper.constants.values import MSG_NO_KUBECONFIG, NEW_KUBECONFIG_OPTION
from khelper.errors import FatalStartupError, InvalidInputError, LoadError, StreamError, TransportError
from khelper.keyboard.wizard import (
    KEY_BACKSPACE,
    KEY_CHANGE_CONFIG,
    KEY_CHANGE_NAMESPACE,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_QUIT,
)
from khelper.models.actions import find_action
from khelper.models.session import Target
from khelper.models.state.app_settings import AppSettings
from khelper.models.state.preferences import (
    RECENT_ACTIONS,
    RECENT_INSTANCES,
    RECENT_RESOURCES,
    SettingsPreferenceStore,
)
from khelper.wizard import effects as fx
from khelper.wizard import messages as msg
from khelper.wizard.controller import WizardController, next_requirement
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
)

# =============================================================================
# Helpers
# =============================================================================

CONTEXT = "/home/dev/.kube/config"


def _store() -> SettingsPreferenceStore:
    return SettingsPreferenceStore(AppSettings(), autosave=False)


def _controller(store: SettingsPreferenceStore | None = None, **kwargs) -> WizardController:
    kwargs.setdefault("has_client", True)
    kwargs.setdefault("context_path", CONTEXT)
    return WizardController(store or _store(), **kwargs)


def _type(controller: WizardController, text: str) -> None:
    for key in text:
        controller.handle_key(key)


def _pick(controller: WizardController, text: str) -> list[fx.Effect]:
    _type(controller, text)
    return controller.handle_key(KEY_ENTER)


def _at_actions(**kwargs) -> WizardController:
    """Controller sitting on action selection for default/web."""
    controller = _controller(namespace="default", resource="web", **kwargs)
    controller.start()
    assert controller.state == SELECT_ACTION
    return controller


def _to_container(controller: WizardController, action: str) -> None:
    """Choose ``action`` and the first pod, landing on container selection."""
    effects = _pick(controller, action)
    assert controller.state == SELECT_POD
    assert effects == [fx.LoadInstances(controller.target)]
    controller.dispatch(msg.InstancesLoaded(("web-1 (Running)", "web-2 (Pending)"), resource="web"))
    effects = _pick(controller, "web-1")
    assert controller.state == SELECT_CONTAINER
    assert effects == [fx.LoadSubresources(controller.target)]


# =============================================================================
# Startup
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestStartup:
    """Tests for the first state."""

    def test_without_client_asks_for_kubeconfig(self) -> None:
        controller = _controller(has_client=False, context_path="")
        effects = controller.start()
        assert controller.state == SELECT_CONFIG
        assert effects == [fx.LoadContexts()]
        assert controller.notice == MSG_NO_KUBECONFIG

    def test_startup_error_shown_in_notice(self) -> None:
        controller = _controller(
            has_client=False, context_path="", startup_error=TransportError("kubeconfig not found")
        )
        controller.start()
        assert "kubeconfig not found" in (controller.notice or "")

    def test_with_client_asks_for_namespace(self) -> None:
        controller = _controller()
        assert controller.start() == [fx.LoadNamespaces()]
        assert controller.state == SELECT_NAMESPACE

    def test_remembered_namespace_skips_to_resources(self) -> None:
        store = _store()
        store.set_last_namespace("payments")
        controller = _controller(store)
        assert controller.start() == [fx.LoadResources("payments")]
        assert controller.state == SELECT_RESOURCE

    def test_preset_deployment_skips_to_actions(self) -> None:
        controller = _controller(namespace="default", resource="web")
        assert controller.start() == []
        assert controller.state == SELECT_ACTION
        assert controller.selector(SELECT_ACTION).total > 0
        assert controller.selector(SELECT_ACTION).loading is False


# =============================================================================
# Forward flows
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestForwardFlows:
    """Tests for the path from namespace to result."""

    def test_scale_flow(self) -> None:
        store = _store()
        controller = _controller(store)
        controller.start()
        controller.dispatch(msg.NamespacesLoaded(("default", "prod")))
        assert _pick(controller, "default") == [fx.LoadResources("default")]
        assert store.last_namespace() == "default"

        controller.dispatch(msg.ResourcesLoaded(("api", "web"), namespace="default"))
        assert _pick(controller, "web") == []
        assert controller.state == SELECT_ACTION
        assert store.recent_for(RECENT_RESOURCES, "default") == ["web"]

        _pick(controller, "scale")
        assert controller.state == AWAIT_INPUT
        assert controller.input_prompt == "Enter replica count:"

        effects = _pick(controller, "3")
        assert controller.state == EXECUTING
        assert effects == [fx.InvokeAction("scale", Target("default", "web"), "3")]

        controller.dispatch(msg.ExecutionFinished(result="Scaled web to 3 replicas"))
        assert controller.state == SHOW_RESULT
        assert controller.result == "Scaled web to 3 replicas"

        controller.handle_key(KEY_ENTER)
        assert controller.state == SELECT_ACTION
        assert controller.result is None
        assert store.recent_for(RECENT_ACTIONS)[0].startswith("scale")

    def test_empty_input_is_ignored(self) -> None:
        controller = _at_actions()
        _pick(controller, "scale")
        assert controller.handle_key(KEY_ENTER) == []
        assert controller.state == AWAIT_INPUT

    def test_invalid_input_shows_error(self) -> None:
        controller = _at_actions()
        _pick(controller, "scale")
        assert _pick(controller, "abc") == []
        assert controller.state == SHOW_RESULT
        assert isinstance(controller.error, InvalidInputError)

    def test_execution_error_shows_error(self) -> None:
        controller = _at_actions()
        _pick(controller, "describe")
        assert controller.state == EXECUTING
        controller.dispatch(msg.ExecutionFinished(error=TransportError("connection refused")))
        assert controller.state == SHOW_RESULT
        assert str(controller.error) == "connection refused"

    def test_no_input_action_executes_immediately(self) -> None:
        controller = _at_actions()
        assert _pick(controller, "list-pods") == [
            fx.InvokeAction("list-pods", Target("default", "web"), None)
        ]

    def test_logs_flow(self) -> None:
        store = _store()
        controller = _at_actions(store=store)
        _to_container(controller, "logs")
        assert store.recent_for(RECENT_INSTANCES, "web") == ["web-1 (Running)"]

        controller.dispatch(
            msg.SubresourcesLoaded(("app", "sidecar"), instance="web-1 (Running)")
        )
        effects = _pick(controller, "app")
        assert controller.state == EXECUTING
        assert effects == [fx.FetchLog(controller.target, 500)]
        assert controller.target.subresource == "app"

        controller.dispatch(msg.LogsFetched(text="line one\nline two"))
        assert controller.state == VIEW_LOGS
        assert controller.viewer is not None
        assert controller.viewer.all_lines == ["line one", "line two"]
        assert controller.viewer.title == "web-1/app"

        controller.handle_key(KEY_ESCAPE)
        assert controller.state == SELECT_ACTION
        assert controller.viewer is None

    def test_single_container_is_chosen_automatically(self) -> None:
        controller = _at_actions()
        _to_container(controller, "logs")
        effects = controller.dispatch(msg.SubresourcesLoaded(("app",), instance="web-1 (Running)"))
        assert controller.target.subresource == "app"
        assert effects == [fx.FetchLog(controller.target, 500)]

    def test_container_action_uses_first_pod(self) -> None:
        """Actions needing only a container take the instance the loader used."""
        controller = _at_actions()
        effects = _pick(controller, "update-image")
        assert controller.state == SELECT_CONTAINER
        assert effects == [fx.LoadSubresources(Target("default", "web"))]
        controller.dispatch(msg.SubresourcesLoaded(("app", "sidecar"), instance="web-1 (Running)"))
        assert controller.target.instance == "web-1 (Running)"
        _pick(controller, "sidecar")
        assert controller.state == AWAIT_INPUT
        effects = _pick(controller, "nginx:1.27")
        assert effects == [
            fx.InvokeAction(
                "update-image",
                Target("default", "web", "web-1 (Running)", "sidecar"),
                "nginx:1.27",
            )
        ]

    def test_fast_deploy_collects_folder(self) -> None:
        controller = _at_actions()
        _to_container(controller, "fast-deploy")
        effects = controller.dispatch(msg.SubresourcesLoaded(("app",), instance="web-1 (Running)"))
        assert controller.state == SELECT_ASSET_FOLDER
        assert effects == [fx.LoadFolders(controller.target, "/app/assets")]

        controller.dispatch(msg.FoldersLoaded(("admin", "site")))
        _pick(controller, "site")
        assert controller.state == AWAIT_INPUT
        effects = _pick(controller, "~/dist")
        assert effects == [
            fx.InvokeAction(
                "fast-deploy",
                Target("default", "web", "web-1 (Running)", "app", "site"),
                "~/dist",
            )
        ]

    def test_preset_pod_skips_pod_selection(self) -> None:
        controller = _controller(namespace="default", resource="web", instance="web-9")
        controller.start()
        effects = _pick(controller, "logs")
        assert controller.state == SELECT_CONTAINER
        assert effects == [fx.LoadSubresources(Target("default", "web", "web-9"))]

    def test_load_error_shown_on_selector(self) -> None:
        controller = _controller()
        controller.start()
        controller.dispatch(msg.NamespacesLoaded(error=LoadError("forbidden")))
        selector = controller.selector(SELECT_NAMESPACE)
        assert controller.state == SELECT_NAMESPACE
        assert str(selector.error) == "forbidden"
        assert controller.handle_key(KEY_ENTER) == []


# =============================================================================
# Log streaming
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestLogStreaming:
    """Tests for follow-mode logs."""

    def _streaming(self) -> WizardController:
        controller = _at_actions()
        _to_container(controller, "logs-follow")
        effects = controller.dispatch(msg.SubresourcesLoaded(("app",), instance="web-1 (Running)"))
        assert effects == [fx.StartLogStream(controller.target, 100, 1)]
        assert controller.state == VIEW_LOGS
        return controller

    def test_lines_are_appended(self) -> None:
        controller = self._streaming()
        controller.dispatch(msg.LogLineReceived(1, "hello"))
        assert controller.viewer is not None
        assert controller.viewer.all_lines == ["hello"]
        assert controller.viewer.streaming is True

    def test_stale_generation_is_ignored(self) -> None:
        controller = self._streaming()
        controller.dispatch(msg.LogLineReceived(0, "old"))
        assert controller.viewer is not None
        assert controller.viewer.all_lines == []

    def test_leaving_cancels_stream(self) -> None:
        controller = self._streaming()
        effects = controller.handle_key(KEY_ESCAPE)
        assert effects == [fx.CancelLogStream(1)]
        assert controller.state == SELECT_ACTION
        controller.dispatch(msg.LogLineReceived(1, "late"))
        assert controller.viewer is None

    def test_new_stream_gets_new_generation(self) -> None:
        controller = self._streaming()
        controller.handle_key(KEY_ESCAPE)
        _to_container(controller, "logs-follow")
        effects = controller.dispatch(msg.SubresourcesLoaded(("app",), instance="web-1 (Running)"))
        assert effects == [fx.StartLogStream(controller.target, 100, 2)]

    def test_stream_end_with_error(self) -> None:
        controller = self._streaming()
        controller.dispatch(msg.LogStreamEnded(1, StreamError("pod deleted")))
        assert controller.viewer is not None
        assert controller.viewer.streaming is False
        assert "pod deleted" in (controller.viewer.note or "")

    def test_q_types_while_search_focused(self) -> None:
        controller = self._streaming()
        assert controller.handle_key("q") == []
        assert controller.state == VIEW_LOGS
        controller.handle_key(KEY_ENTER)
        controller.handle_key("q")
        assert controller.state == SELECT_ACTION

    def test_search_remembered_on_leave(self) -> None:
        store = _store()
        controller = _at_actions(store=store)
        _to_container(controller, "logs-follow")
        controller.dispatch(msg.SubresourcesLoaded(("app",), instance="web-1 (Running)"))
        _type(controller, "error")
        controller.handle_key(KEY_ESCAPE)
        assert store.recent_for("log_searches") == ["error"]

    def test_quit_while_streaming_cancels_first(self) -> None:
        controller = self._streaming()
        effects = controller.handle_key(KEY_QUIT)
        assert effects[0] == fx.CancelLogStream(1)
        assert isinstance(effects[1], fx.Exit)


# =============================================================================
# Back navigation
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestBackNavigation:
    """Tests for escape and backspace."""

    def test_escape_clears_query_first(self) -> None:
        controller = _at_actions()
        _type(controller, "sc")
        assert controller.handle_key(KEY_ESCAPE) == []
        assert controller.state == SELECT_ACTION
        assert controller.selector(SELECT_ACTION).query.value == ""

    def test_back_from_actions_reloads_resources(self) -> None:
        controller = _at_actions()
        assert controller.handle_key(KEY_ESCAPE) == [fx.LoadResources("default")]
        assert controller.state == SELECT_RESOURCE
        assert controller.target.resource == ""

    def test_backspace_on_empty_query_goes_back(self) -> None:
        controller = _at_actions()
        controller.handle_key(KEY_BACKSPACE)
        assert controller.state == SELECT_RESOURCE

    def test_back_from_pod_to_actions(self) -> None:
        controller = _at_actions()
        _pick(controller, "logs")
        assert controller.handle_key(KEY_ESCAPE) == []
        assert controller.state == SELECT_ACTION
        assert controller.action is None

    def test_back_from_container_to_pod(self) -> None:
        controller = _at_actions()
        _to_container(controller, "logs")
        controller.handle_key(KEY_ESCAPE)
        assert controller.state == SELECT_POD
        assert controller.target.instance == ""
        assert controller.selector(SELECT_POD).total == 2

    def test_back_from_input_to_actions(self) -> None:
        controller = _at_actions()
        _pick(controller, "scale")
        controller.handle_key(KEY_ESCAPE)
        assert controller.state == SELECT_ACTION
        assert controller.value is None

    def test_back_at_root_does_nothing(self) -> None:
        controller = _controller()
        controller.start()
        assert controller.handle_key(KEY_ESCAPE) == []
        assert controller.state == SELECT_NAMESPACE


# =============================================================================
# Detours
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestDetours:
    """Tests for changing kubeconfig or namespace mid-flow."""

    def test_namespace_detour_same_namespace(self) -> None:
        controller = _controller(namespace="default")
        controller.start()
        effects = controller.handle_key(KEY_CHANGE_NAMESPACE)
        assert effects == [fx.LoadNamespaces()]
        assert controller.state == SELECT_NAMESPACE
        assert controller.in_detour is True

        controller.dispatch(msg.NamespacesLoaded(("default", "prod")))
        effects = _pick(controller, "default")
        assert controller.state == SELECT_RESOURCE
        assert effects == [fx.LoadResources("default")]
        assert controller.stack == ()

    def test_namespace_change_clamps_to_resources(self) -> None:
        controller = _at_actions()
        controller.handle_key(KEY_CHANGE_NAMESPACE)
        controller.dispatch(msg.NamespacesLoaded(("default", "prod")))
        effects = _pick(controller, "prod")
        assert controller.state == SELECT_RESOURCE
        assert effects == [fx.LoadResources("prod")]
        assert controller.target == Target(namespace="prod")

    def test_escape_cancels_detour(self) -> None:
        controller = _at_actions()
        controller.handle_key(KEY_CHANGE_NAMESPACE)
        assert controller.handle_key(KEY_ESCAPE) == []
        assert controller.state == SELECT_ACTION
        assert controller.target.resource == "web"

    def test_detour_blocked_while_executing(self) -> None:
        controller = _at_actions()
        _pick(controller, "describe")
        assert controller.handle_key(KEY_CHANGE_CONFIG) == []
        assert controller.state == EXECUTING

    def test_namespace_detour_needs_client(self) -> None:
        controller = _controller(has_client=False, context_path="")
        controller.start()
        assert controller.handle_key(KEY_CHANGE_NAMESPACE) == []
        assert controller.state == SELECT_CONFIG

    def test_kubeconfig_change(self) -> None:
        store = _store()
        controller = _controller(store, namespace="default", context_path="/a")
        controller.start()
        assert controller.handle_key(KEY_CHANGE_CONFIG) == [fx.LoadContexts()]
        controller.dispatch(msg.ContextsLoaded(("/a", "/b")))
        selector = controller.selector(SELECT_CONFIG)
        assert selector.items[0] == NEW_KUBECONFIG_OPTION

        controller.handle_key(KEY_DOWN)
        controller.handle_key(KEY_DOWN)
        assert controller.handle_key(KEY_ENTER) == [fx.ConnectContext("/b")]
        assert controller.pending_context == "/b"

        effects = controller.dispatch(msg.ContextConnected("/b", client=object()))
        assert controller.context_path == "/b"
        assert controller.pending_context is None
        assert controller.state == SELECT_RESOURCE
        assert effects == [fx.LoadResources("default")]
        assert store.last_context_path() == "/b"

    def test_rejected_kubeconfig_stays_on_selection(self) -> None:
        controller = _controller(namespace="default", context_path="/a")
        controller.start()
        controller.handle_key(KEY_CHANGE_CONFIG)
        controller.dispatch(msg.ContextsLoaded(("/a", "/b")))
        controller.handle_key(KEY_DOWN)
        controller.handle_key(KEY_DOWN)
        controller.handle_key(KEY_ENTER)
        controller.dispatch(msg.ContextConnected("/b", error=TransportError("unreachable")))
        assert controller.state == SELECT_CONFIG
        assert controller.context_path == "/a"
        assert "unreachable" in (controller.notice or "")

    def test_stale_connection_ignored(self) -> None:
        controller = _controller(has_client=False, context_path="")
        controller.start()
        assert controller.dispatch(msg.ContextConnected("/other", client=object())) == []
        assert controller.has_client is False

    def test_new_kubeconfig_path(self) -> None:
        controller = _controller(has_client=False, context_path="")
        controller.start()
        controller.dispatch(msg.ContextsLoaded(()))
        controller.handle_key(KEY_ENTER)
        assert controller.state == AWAIT_INPUT
        assert controller.entering_config_path is True

        assert _pick(controller, "/tmp/kc") == [fx.ConnectContext("/tmp/kc")]
        effects = controller.dispatch(msg.ContextConnected("/tmp/kc", client=object()))
        assert controller.has_client is True
        assert controller.state == SELECT_NAMESPACE
        assert effects == [fx.LoadNamespaces()]

    def test_escape_from_path_prompt(self) -> None:
        controller = _controller(has_client=False, context_path="")
        controller.start()
        controller.dispatch(msg.ContextsLoaded(()))
        controller.handle_key(KEY_ENTER)
        controller.handle_key(KEY_ESCAPE)
        assert controller.state == SELECT_CONFIG
        assert controller.entering_config_path is False


# =============================================================================
# Stale completions
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestStaleCompletions:
    """Completions that no longer match the current state are dropped."""

    def test_resources_for_other_namespace(self) -> None:
        controller = _controller(namespace="default")
        controller.start()
        controller.dispatch(msg.ResourcesLoaded(("x",), namespace="prod"))
        assert controller.selector(SELECT_RESOURCE).loading is True

    def test_execution_result_after_leaving(self) -> None:
        controller = _at_actions()
        controller.dispatch(msg.ExecutionFinished(result="late"))
        assert controller.state == SELECT_ACTION
        assert controller.result is None

    def test_instances_for_other_resource(self) -> None:
        controller = _at_actions()
        _pick(controller, "logs")
        controller.dispatch(msg.InstancesLoaded(("api-1 (Running)",), resource="api"))
        assert controller.selector(SELECT_POD).total == 0

    def test_unsupported_message(self) -> None:
        controller = _controller()
        with pytest.raises(TypeError):
            controller.dispatch("not a message")  # type: ignore[arg-type]


# =============================================================================
# Quit and hand-off
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestQuit:
    """Tests for the outcome reported on exit."""

    def test_ctrl_c_quits(self) -> None:
        controller = _at_actions()
        effects = controller.handle_key(KEY_QUIT)
        assert len(effects) == 1
        assert isinstance(effects[0], fx.Exit)
        assert effects[0].outcome.error is None
        assert effects[0].outcome.handoff is False

    def test_quit_without_client_is_fatal(self) -> None:
        controller = _controller(has_client=False, context_path="")
        controller.start()
        effects = controller.handle_key(KEY_QUIT)
        assert isinstance(effects[0], fx.Exit)
        assert isinstance(effects[0].outcome.error, FatalStartupError)

    def test_q_quits_on_result(self) -> None:
        controller = _at_actions()
        _pick(controller, "describe")
        controller.dispatch(msg.ExecutionFinished(result="Deployment: web"))
        effects = controller.handle_key("q")
        assert isinstance(effects[0], fx.Exit)

    def test_q_types_in_selector(self) -> None:
        controller = _at_actions()
        assert controller.handle_key("q") == []
        assert controller.selector(SELECT_ACTION).query.value == "q"

    def test_keys_ignored_after_exit(self) -> None:
        controller = _at_actions()
        controller.handle_key(KEY_QUIT)
        assert controller.handle_key(KEY_ENTER) == []
        assert controller.dispatch(msg.ExecutionFinished(result="x")) == []

    def test_shell_hands_off(self) -> None:
        controller = _at_actions()
        _to_container(controller, "shell")
        effects = controller.dispatch(msg.SubresourcesLoaded(("app",), instance="web-1 (Running)"))
        assert effects == [fx.InvokeAction("shell", controller.target, None)]
        effects = controller.dispatch(msg.ExecutionFinished(result=None))
        assert len(effects) == 1
        outcome = effects[0].outcome  # type: ignore[attr-defined]
        assert outcome.handoff is True
        assert outcome.action.name == "shell"
        assert outcome.target.pod_name == "web-1"

    def test_empty_result_without_handoff_flag(self) -> None:
        """Only descriptors marked for hand-off ask the host to run a command."""
        controller = _at_actions()
        _pick(controller, "describe")
        assert controller.state == EXECUTING
        effects = controller.dispatch(msg.ExecutionFinished(result=None))
        assert len(effects) == 1
        outcome = effects[0].outcome  # type: ignore[attr-defined]
        assert outcome.action.name == "describe"
        assert outcome.handoff is False


@pytest.mark.unit
@pytest.mark.fast
class TestNextRequirement:
    """Tests for next_requirement ordering."""

    def test_order(self) -> None:
        action = find_action("fast-deploy")
        assert action is not None
        target = Target("ns", "web")
        assert next_requirement(action, target, None) is Requirement.INSTANCE
        target = target.with_values(instance="p")
        assert next_requirement(action, target, None) is Requirement.SUBRESOURCE
        target = target.with_values(subresource="c")
        assert next_requirement(action, target, None) is Requirement.FOLDER
        target = target.with_values(folder="f")
        assert next_requirement(action, target, None) is Requirement.INPUT
        assert next_requirement(action, target, "~/dist") is Requirement.EXECUTE
