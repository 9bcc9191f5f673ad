"""Convenience wrapper binding one resource to one backend."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from envelope_rest import operations
from envelope_rest.config import ClientConfig
from envelope_rest.descriptor import ResourceDescriptor
from envelope_rest.envelope import Entity
from envelope_rest.identifiers import Identifier
from envelope_rest.transport import HttpxTransport, Transport

TagT = TypeVar("TagT")
V = TypeVar("V")
P = TypeVar("P")


class ResourceClient(Generic[TagT, V, P]):
    """The CRUD operations with transport, base URL, token and resource filled in.

    Holds no mutable request state; one instance may serve any number of
    concurrent calls. A transport built by :meth:`from_config` is owned by
    the client and closed by :meth:`aclose` (or on leaving ``async with``);
    an injected transport is left to its owner.
    """

    def __init__(
        self,
        transport: Transport,
        base_url: str,
        resource: ResourceDescriptor[TagT, V, P],
        token: str | None = None,
        *,
        owns_transport: bool = False,
    ) -> None:
        self.transport = transport
        self.base_url = base_url
        self.resource = resource
        self.token = token
        self._owns_transport = owns_transport

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        resource: ResourceDescriptor[TagT, V, P],
        transport: Transport | None = None,
    ) -> ResourceClient[TagT, V, P]:
        return cls(
            transport=transport or HttpxTransport.from_config(config),
            base_url=config.base_url,
            resource=resource,
            token=config.access_token,
            owns_transport=transport is None,
        )

    def __repr__(self) -> str:
        return f"ResourceClient(base_url={self.base_url!r}, path={self.resource.path!r})"

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            await self.transport.aclose()

    async def __aenter__(self) -> ResourceClient[TagT, V, P]:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def select(self, params: P | None = None) -> list[Entity[TagT, V]]:
        return await operations.select(self.transport, self.base_url, self.token, self.resource, params)

    async def get(self, identifier: Identifier[TagT], params: P | None = None) -> Entity[TagT, V] | None:
        return await operations.get(self.transport, self.base_url, self.token, self.resource, identifier, params)

    async def get_404(self, identifier: Identifier[TagT], params: P | None = None) -> Entity[TagT, V]:
        return await operations.get_404(self.transport, self.base_url, self.token, self.resource, identifier, params)

    async def create(self, value: V, params: P | None = None) -> Entity[TagT, V]:
        return await operations.create(self.transport, self.base_url, self.token, self.resource, value, params)

    async def replace(self, identifier: Identifier[TagT], value: V, params: P | None = None) -> V:
        return await operations.replace(
            self.transport, self.base_url, self.token, self.resource, identifier, value, params
        )

    async def replace_ignore_response(self, identifier: Identifier[TagT], value: V, params: P | None = None) -> None:
        await operations.replace_ignore_response(
            self.transport, self.base_url, self.token, self.resource, identifier, value, params
        )

    async def patch(self, identifier: Identifier[TagT], patch_body: Any, params: P | None = None) -> V:
        return await operations.patch(
            self.transport, self.base_url, self.token, self.resource, identifier, patch_body, params
        )

    async def patch_ignore_response(
        self, identifier: Identifier[TagT], patch_body: Any, params: P | None = None
    ) -> None:
        await operations.patch_ignore_response(
            self.transport, self.base_url, self.token, self.resource, identifier, patch_body, params
        )

    async def delete(self, identifier: Identifier[TagT], params: P | None = None) -> None:
        await operations.delete(self.transport, self.base_url, self.token, self.resource, identifier, params)
