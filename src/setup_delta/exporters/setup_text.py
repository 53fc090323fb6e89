"""Render parameter trees back into bracket/assignment setup text."""

from __future__ import annotations

from typing import List

from ..core.model import Parameter, ParameterGroup, ParameterTree
from ..ingestion.vocabulary import is_positional

__all__ = ["format_parameter", "render_setup"]


def format_parameter(parameter: Parameter) -> str:
    value = parameter.value
    text = repr(value) if isinstance(value, float) else value
    if parameter.unit and isinstance(value, float):
        return f"{text} {parameter.unit}"
    return text


def _render_leaves(group: ParameterGroup, lines: List[str]) -> None:
    for name, parameter in group.parameters().items():
        lines.append(f"{name} = {format_parameter(parameter)}")


def render_setup(tree: ParameterTree) -> str:
    """Serialise ``tree`` so that parsing the output rebuilds the same tree.

    Sub-groups are written as positional section headers after the leaves
    of their section. Groups the text format cannot express (non-positional
    names or more than one level of nesting) raise :class:`ValueError`.
    """

    lines: List[str] = []
    for section, group in tree.items():
        lines.append(f"[{section}]")
        _render_leaves(group, lines)
        for name, subgroup in group.groups().items():
            if not is_positional(name):
                raise ValueError(
                    f"Group {section!r}/{name!r} has no positional name and cannot be "
                    "written as a sub-section"
                )
            if subgroup.groups():
                raise ValueError(
                    f"Group {section!r}/{name!r} is nested deeper than the text format allows"
                )
            lines.append(f"[{name}]")
            _render_leaves(subgroup, lines)
        lines.append("")
    return "\n".join(lines)
