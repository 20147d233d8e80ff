"""Runs wizard effects against a cluster client.

Each effect becomes one client call whose outcome is reported as a wizard
message. Client failures are converted here into the wizard error kinds, so
the controller only ever sees ``LoadError``, ``ExecutionError`` and
``StreamError`` (plus the raw error of a rejected kubeconfig).
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from khelper.controllers.base import ResourceClient
from khelper.errors import (
    ClientConfigError,
    ExecutionError,
    KHelperError,
    LoadError,
    NotFoundError,
    StreamError,
    TransportError,
)
from khelper.wizard import effects as fx
from khelper.wizard import messages as msg

logger = logging.getLogger(__name__)

PostFunc = Callable[[msg.WizardMessage], None]


class WizardPresenter:
    """Effect runner bound to the current client.

    Args:
        client: Client for the active kubeconfig, or None before one exists.
        client_class: Used to discover kubeconfigs and to connect new ones.
    """

    def __init__(
        self,
        client: ResourceClient | None,
        client_class: type[ResourceClient],
    ) -> None:
        self.client = client
        self.client_class = client_class

    def _require_client(self) -> ResourceClient:
        if self.client is None:
            raise TransportError("no kubeconfig is connected")
        return self.client

    async def run(self, effect: fx.Effect) -> msg.WizardMessage:
        """Run a one-shot effect and return its completion message."""
        if isinstance(effect, fx.ConnectContext):
            return await self._connect(effect)
        if isinstance(effect, fx.InvokeAction):
            return await self._invoke(effect)
        if isinstance(effect, fx.FetchLog):
            return await self._fetch_log(effect)
        return await self._load(effect)

    async def _connect(self, effect: fx.ConnectContext) -> msg.ContextConnected:
        try:
            client = self.client_class.from_kubeconfig(effect.path)
            if not await client.check_connection():
                raise TransportError(f"unable to reach the cluster configured in {effect.path}")
        except KHelperError as exc:
            return msg.ContextConnected(effect.path, error=exc)
        except Exception as exc:
            logger.exception("Unexpected failure while connecting %s", effect.path)
            error = ClientConfigError(str(exc) or type(exc).__name__)
            return msg.ContextConnected(effect.path, error=error)
        return msg.ContextConnected(effect.path, client=client)

    async def _load(self, effect: fx.Effect) -> msg.WizardMessage:
        try:
            return await self._load_items(effect)
        except KHelperError as exc:
            error = LoadError(str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure while running %s", type(effect).__name__)
            error = LoadError(str(exc) or type(exc).__name__)
        return self._failed_load(effect, error)

    async def _load_items(self, effect: fx.Effect) -> msg.WizardMessage:
        if isinstance(effect, fx.LoadContexts):
            if self.client is not None:
                return msg.ContextsLoaded(tuple(self.client.list_contexts()))
            return msg.ContextsLoaded(tuple(self.client_class.discover_contexts()))
        client = self._require_client()
        if isinstance(effect, fx.LoadNamespaces):
            return msg.NamespacesLoaded(tuple(await client.list_namespaces()))
        if isinstance(effect, fx.LoadResources):
            items = await client.list_resources(effect.namespace)
            return msg.ResourcesLoaded(tuple(items), namespace=effect.namespace)
        if isinstance(effect, fx.LoadInstances):
            target = effect.target
            items = await client.list_instances(target.namespace, target.resource)
            return msg.InstancesLoaded(tuple(items), resource=target.resource)
        if isinstance(effect, fx.LoadSubresources):
            target = effect.target
            instance = target.instance
            if not instance:
                pods = await client.list_instances(target.namespace, target.resource)
                if not pods:
                    raise NotFoundError(f"no pods found for deployment {target.resource}")
                instance = pods[0]
            items = await client.list_subresources(target.namespace, instance)
            return msg.SubresourcesLoaded(tuple(items), instance=instance)
        if isinstance(effect, fx.LoadFolders):
            items = await client.list_nested_folders(effect.target, effect.base_path)
            return msg.FoldersLoaded(tuple(items))
        raise TypeError(f"unsupported effect: {type(effect).__name__}")

    @staticmethod
    def _failed_load(effect: fx.Effect, error: LoadError) -> msg.WizardMessage:
        if isinstance(effect, fx.LoadContexts):
            return msg.ContextsLoaded(error=error)
        if isinstance(effect, fx.LoadNamespaces):
            return msg.NamespacesLoaded(error=error)
        if isinstance(effect, fx.LoadResources):
            return msg.ResourcesLoaded(error=error, namespace=effect.namespace)
        if isinstance(effect, fx.LoadInstances):
            return msg.InstancesLoaded(error=error, resource=effect.target.resource)
        if isinstance(effect, fx.LoadSubresources):
            return msg.SubresourcesLoaded(error=error, instance=effect.target.instance)
        return msg.FoldersLoaded(error=error)

    async def _invoke(self, effect: fx.InvokeAction) -> msg.ExecutionFinished:
        try:
            result = await self._require_client().invoke_action(
                effect.name, effect.target, effect.value
            )
        except ExecutionError as exc:
            return msg.ExecutionFinished(error=exc)
        except KHelperError as exc:
            return msg.ExecutionFinished(error=ExecutionError(str(exc)))
        except Exception as exc:
            logger.exception("Unexpected failure while running action %s", effect.name)
            return msg.ExecutionFinished(error=ExecutionError(str(exc) or type(exc).__name__))
        return msg.ExecutionFinished(result=result)

    async def _fetch_log(self, effect: fx.FetchLog) -> msg.LogsFetched:
        try:
            text = await self._require_client().fetch_log(effect.target, effect.tail_lines)
        except KHelperError as exc:
            return msg.LogsFetched(error=ExecutionError(str(exc)))
        except Exception as exc:
            logger.exception("Unexpected failure while fetching logs")
            return msg.LogsFetched(error=ExecutionError(str(exc) or type(exc).__name__))
        return msg.LogsFetched(text=text)

    async def stream(self, effect: fx.StartLogStream, post: PostFunc) -> None:
        """Post each streamed line, then a final end message.

        Cancellation propagates without an end message; the controller has
        already left the log view when it cancels.
        """
        error: StreamError | None = None
        try:
            client = self._require_client()
            async for line in client.stream_log(effect.target, effect.tail_lines):
                post(msg.LogLineReceived(effect.generation, line))
        except KHelperError as exc:
            error = StreamError(str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure while streaming logs")
            error = StreamError(str(exc) or type(exc).__name__)
        post(msg.LogStreamEnded(effect.generation, error))


__all__ = ["PostFunc", "WizardPresenter"]
