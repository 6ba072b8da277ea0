"""ToolRegistry: the immutable name-to-tool map a server is built around.

A registry is assembled once through :class:`RegistryBuilder` and then handed
to the :class:`~dotmcp.protocol.engine.ProtocolEngine`.  After ``build()``
there is no way to add or remove tools, so the registry can be shared by
every request without locking.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from dotmcp.protocol.models import ToolDescriptor


@runtime_checkable
class ToolHandler(Protocol):
    """A callable accepting the ``arguments`` object and returning a result.

    Failures are raised, typically as :class:`~dotmcp.tools.errors.ToolError`.
    The result must be JSON-serializable or a pydantic model.
    """

    def __call__(self, arguments: dict[str, Any]) -> Any: ...


@dataclass(frozen=True)
class ToolEntry:
    """A descriptor paired with the callable that implements it."""

    descriptor: ToolDescriptor
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.descriptor.name


class ToolRegistry:
    """Read-only lookup of tools by name, in registration order.

    Usage::

        builder = RegistryBuilder()
        builder.register(descriptor, handler)
        registry = builder.build()

        entry = registry.get("wofi_apply")     # None if unknown
        descriptors = registry.list()          # stable order
    """

    def __init__(self, entries: Iterable[ToolEntry] = ()) -> None:
        table: dict[str, ToolEntry] = {}
        for entry in entries:
            if entry.name in table:
                msg = f"Duplicate tool name: {entry.name}"
                raise ValueError(msg)
            table[entry.name] = entry
        self._entries = MappingProxyType(table)

    def get(self, name: str) -> ToolEntry | None:
        """Return the entry for *name*, or ``None`` when it is not registered."""
        return self._entries.get(name)

    def list(self) -> list[ToolDescriptor]:
        """Return all descriptors in registration order."""
        return [entry.descriptor for entry in self._entries.values()]

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ToolEntry]:
        return iter(self._entries.values())


class RegistryBuilder:
    """Collects tools during server construction."""

    def __init__(self) -> None:
        self._entries: list[ToolEntry] = []
        self._names: set[str] = set()

    def register(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        """Add a tool.  Names must be unique."""
        if descriptor.name in self._names:
            msg = f"Duplicate tool name: {descriptor.name}"
            raise ValueError(msg)
        self._names.add(descriptor.name)
        self._entries.append(ToolEntry(descriptor=descriptor, handler=handler))

    def add(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        handler: ToolHandler,
    ) -> None:
        """Shorthand for ``register`` from a declarative tuple."""
        self.register(
            ToolDescriptor(name=name, description=description, input_schema=input_schema),
            handler,
        )

    def tool(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any] | None = None,
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of :meth:`add`."""

        def decorator(handler: ToolHandler) -> ToolHandler:
            self.add(
                name,
                description,
                input_schema or {"type": "object", "properties": {}},
                handler,
            )
            return handler

        return decorator

    def build(self) -> ToolRegistry:
        """Freeze the collected tools into a :class:`ToolRegistry`."""
        return ToolRegistry(self._entries)


def registry_from_specs(
    specs: Iterable[tuple[str, str, dict[str, Any], ToolHandler]],
) -> ToolRegistry:
    """Build a registry from ``(name, description, schema, handler)`` tuples."""
    builder = RegistryBuilder()
    for name, description, schema, handler in specs:
        builder.add(name, description, schema, handler)
    return builder.build()
