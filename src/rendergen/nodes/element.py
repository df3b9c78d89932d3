"""Element node and the directive metadata attached to it."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import MISSING, dataclass, field, fields

from rendergen.nodes.base import Node

# Arena bookkeeping and analysis outputs. Never considered when deciding
# whether a node carries only static-safe fields.
_BOOKKEEPING_FIELDS = frozenset({"index", "parent", "static", "static_root", "static_in_for"})


@dataclass(frozen=True, slots=True)
class Attr:
    """Attribute or property binding: name="value" / :name="expr" / :[name]="expr"."""

    name: str
    value: str
    dynamic: bool = False
    start: int | None = None
    end: int | None = None


@dataclass(frozen=True, slots=True)
class Handler:
    """One event listener registered for an event name.

    ``modifiers`` is None when the listener was declared without any
    modifier; an empty mapping means modifiers were present but all of them
    were consumed while building the tree (e.g. ``.native``).
    """

    value: str
    dynamic: bool = False
    modifiers: Mapping[str, bool] | None = None
    start: int | None = None
    end: int | None = None


@dataclass(frozen=True, slots=True)
class Directive:
    """Generic directive usage: v-name:arg.modifier="value"."""

    name: str
    raw_name: str
    value: str | None = None
    arg: str | None = None
    is_dynamic_arg: bool = False
    modifiers: Mapping[str, bool] | None = None
    start: int | None = None
    end: int | None = None


@dataclass(frozen=True, slots=True)
class IfCondition:
    """One branch of a v-if / v-else-if / v-else chain.

    ``expression`` is None for the terminal v-else branch.
    """

    expression: str | None
    block: ElementNode


@dataclass(frozen=True, slots=True)
class ModelBinding:
    """Component v-model descriptor emitted as ``model:{...}``."""

    value: str
    callback: str
    expression: str


@dataclass(eq=False, slots=True, kw_only=True)
class ElementNode(Node):
    """An element: plain tag, component, <template> or <slot> outlet.

    Structural fields are filled by the parser (or the `Tree` builder).
    ``static``, ``static_root`` and ``static_in_for`` are written by the
    static analyzer and read by code generation.

    """

    tag: str
    ns: str | None = None
    attrs_list: list[Attr] = field(default_factory=list)
    attrs_map: dict[str, str] = field(default_factory=dict)
    raw_attrs_map: dict[str, Attr] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)

    # v-pre
    pre: bool = False

    # v-for="(alias, iterator1, iterator2) in for_source"
    for_source: str | None = None
    alias: str | None = None
    iterator1: str | None = None
    iterator2: str | None = None

    # v-if / v-else-if / v-else
    if_expr: str | None = None
    else_if: str | None = None
    is_else: bool = False
    if_conditions: list[IfCondition] | None = None

    once: bool = False
    key: str | None = None
    ref: str | None = None
    ref_in_for: bool = False

    # Slots
    slot_target: str | None = None
    slot_target_dynamic: bool = False
    slot_scope: str | None = None
    scoped_slots: dict[str, ElementNode] | None = None
    slot_name: str | None = None

    # <component :is="...">
    component: str | None = None

    static_class: str | None = None
    class_binding: str | None = None
    static_style: str | None = None
    style_binding: str | None = None

    events: dict[str, list[Handler]] | None = None
    native_events: dict[str, list[Handler]] | None = None
    props: list[Attr] | None = None
    attrs: list[Attr] | None = None
    dynamic_attrs: list[Attr] | None = None
    directives: list[Directive] | None = None
    model: ModelBinding | None = None

    inline_template: bool = False
    plain: bool = False
    processed: bool = False
    has_bindings: bool = False

    # Attached by the object-form v-bind / v-on directives
    wrap_data: Callable[[str], str] | None = None
    wrap_listeners: Callable[[str], str] | None = None

    static_root: bool | None = None
    static_in_for: bool | None = None

    @property
    def has_for(self) -> bool:
        return bool(self.for_source)

    def populated_keys(self) -> Iterator[str]:
        """Yield the names of fields holding a non-default, non-empty value."""
        for f in fields(self):
            if f.name in _BOOKKEEPING_FIELDS:
                continue
            value = getattr(self, f.name)
            if value is None or value is False:
                continue
            if isinstance(value, (str, list, dict, tuple)) and not value:
                continue
            if f.default is not MISSING and value == f.default:
                continue
            yield f.name
