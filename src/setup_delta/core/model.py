"""Immutable value objects describing a parsed setup."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping as ABCMapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Union

__all__ = [
    "Node",
    "Parameter",
    "ParameterGroup",
    "ParameterTree",
    "ParseDiagnostic",
    "ParseResult",
]


@dataclass(frozen=True, slots=True)
class Parameter:
    """Leaf value of a setup: a number with an optional unit, or plain text."""

    value: float | str
    unit: str | None = None

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise TypeError(f"Unsupported parameter value: {value!r}")
        if isinstance(value, int):
            object.__setattr__(self, "value", float(value))

    @property
    def is_numeric(self) -> bool:
        return isinstance(self.value, float)

    def numeric_value(self) -> float:
        """Return the value as ``float``, degrading text and non-finite numbers to 0."""

        if isinstance(self.value, float) and math.isfinite(self.value):
            return self.value
        return 0.0

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"value": self.value}
        if self.unit is not None:
            payload["unit"] = self.unit
        return payload


def _freeze_node(value: object) -> "Node":
    if isinstance(value, (Parameter, ParameterGroup)):
        return value
    if isinstance(value, ABCMapping):
        return ParameterGroup(value)
    raise TypeError(
        f"Setup groups only hold Parameter or ParameterGroup values, got {type(value).__name__}"
    )


class ParameterGroup(ABCMapping):
    """Read-only mapping from a label to a :class:`Parameter` or a nested group.

    Plain mappings passed as values are frozen recursively, so a group built
    from nested ``dict`` objects can no longer be modified by its creator.
    """

    __slots__ = ("_entries",)

    def __init__(
        self,
        entries: Mapping[str, object] | Iterable[tuple[str, object]] = (),
    ) -> None:
        frozen: dict[str, Node] = {}
        for key, value in dict(entries).items():
            frozen[str(key)] = _freeze_node(value)
        self._entries: Mapping[str, Node] = MappingProxyType(frozen)

    def __getitem__(self, key: str) -> "Node":
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._entries)!r})"

    def parameters(self) -> Mapping[str, Parameter]:
        """Return only the leaf entries of this group."""

        return MappingProxyType(
            {key: node for key, node in self._entries.items() if isinstance(node, Parameter)}
        )

    def groups(self) -> Mapping[str, "ParameterGroup"]:
        """Return only the nested groups of this group."""

        return MappingProxyType(
            {
                key: node
                for key, node in self._entries.items()
                if isinstance(node, ParameterGroup)
            }
        )

    def as_dict(self) -> dict[str, Any]:
        return {key: node.as_dict() for key, node in self._entries.items()}


Node = Union[Parameter, ParameterGroup]


class ParameterTree(ParameterGroup):
    """Top level of a parsed setup keyed by canonical section token."""

    __slots__ = ()

    def __init__(
        self,
        sections: Mapping[str, object] | Iterable[tuple[str, object]] = (),
    ) -> None:
        super().__init__(sections)
        for name, node in self._entries.items():
            if not isinstance(node, ParameterGroup):
                raise TypeError(f"Section {name!r} must be a parameter group")

    def __getitem__(self, key: str) -> ParameterGroup:
        return self._entries[key]  # type: ignore[return-value]

    def section(self, name: str) -> ParameterGroup:
        """Return section ``name`` or an empty group when it is absent."""

        node = self._entries.get(name)
        if isinstance(node, ParameterGroup):
            return node
        return _EMPTY_GROUP


_EMPTY_GROUP = ParameterGroup()


@dataclass(frozen=True, slots=True)
class ParseDiagnostic:
    """A line or row the parser skipped, with the reason it was dropped."""

    location: str
    source: str
    reason: str

    def as_dict(self) -> dict[str, str]:
        return {"location": self.location, "source": self.source, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Parsed tree plus the diagnostics accumulated while building it."""

    tree: ParameterTree
    diagnostics: tuple[ParseDiagnostic, ...] = ()

    @property
    def skipped(self) -> int:
        return len(self.diagnostics)
