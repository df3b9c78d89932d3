"""Base node class for rendergen template trees."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, slots=True, kw_only=True)
class Node:
    """Base class for all tree nodes.

    Nodes live in a `Tree` arena. ``index`` is the node's slot in that
    arena and ``parent`` is the arena index of the enclosing element, so
    upward lookups never hold an owning reference. Equality is identity.

    ``start``/``end`` are source offsets kept for diagnostics only.

    """

    index: int = -1
    parent: int | None = None
    start: int | None = None
    end: int | None = None
    static: bool | None = None
