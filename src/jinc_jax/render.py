"""Text rendering of values, in the two-line shape/elements layout.

A value of rank one or more prints its shape on one line and its elements
on the next, each number followed by a single space::

    2 3
    0 1 2 3 4 5

A plain scalar prints only its element. A box prints ``< `` followed by the
rendering of its contents; lines after the first of a nested rendering are
indented two spaces per level of boxing so they sit under the contents.
"""

from __future__ import annotations

from .values import Value

_BOX_MARKER = "< "
_INDENT = " " * len(_BOX_MARKER)


def _numbers_line(items) -> str:
    return "".join(f"{int(item)} " for item in items)


def _box_lines(inner: Value) -> list[str]:
    lines = render_lines(inner)
    return [_BOX_MARKER + lines[0], *(_INDENT + line for line in lines[1:])]


def render_lines(value: Value) -> list[str]:
    lines: list[str] = []
    if value.rank:
        lines.append(_numbers_line(value.shape))
    if not value.is_boxed:
        lines.append(_numbers_line(value.elements()))
        return lines
    for inner in value.data:
        lines.extend(_box_lines(inner))
    if not value.data:
        lines.append("")
    return lines


def render(value: Value) -> str:
    return "\n".join(render_lines(value)) + "\n"
