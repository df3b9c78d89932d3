"""Tree mutation helpers shared by the builder, the loader and directive plugins.

These follow the parser's own helpers: every binding added to an element
clears its ``plain`` flag, and event names absorb the capture/once/passive
modifiers as prefix markers.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from rendergen.exceptions import ErrorCode
from rendergen.nodes.element import Attr, Directive, ElementNode, Handler
from rendergen.utils.code import js_string

# Modifiers folded into the event name instead of the handler body
_NAME_MARKERS = (("capture", "!"), ("once", "~"), ("passive", "&"))


def _range(source: Any) -> dict[str, int | None]:
    if source is None:
        return {}
    return {"start": getattr(source, "start", None), "end": getattr(source, "end", None)}


def add_prop(
    el: ElementNode, name: str, value: str, loc: Any = None, dynamic: bool = False
) -> None:
    """Add a DOM property binding (emitted under ``domProps``)."""
    if el.props is None:
        el.props = []
    el.props.append(Attr(name, value, dynamic, **_range(loc)))
    el.plain = False


def add_attr(
    el: ElementNode, name: str, value: str, loc: Any = None, dynamic: bool = False
) -> None:
    """Add an attribute binding; dynamically named ones go to ``dynamic_attrs``."""
    attr = Attr(name, value, dynamic, **_range(loc))
    if dynamic:
        if el.dynamic_attrs is None:
            el.dynamic_attrs = []
        el.dynamic_attrs.append(attr)
    else:
        if el.attrs is None:
            el.attrs = []
        el.attrs.append(attr)
    el.plain = False


def add_raw_attr(el: ElementNode, name: str, value: str, loc: Any = None) -> None:
    """Add a raw (unprocessed) attribute to the attribute list and map."""
    attr = Attr(name, value, **_range(loc))
    el.attrs_map[name] = value
    el.raw_attrs_map[name] = attr
    el.attrs_list.append(attr)


def add_directive(
    el: ElementNode,
    name: str,
    raw_name: str,
    value: str | None = None,
    arg: str | None = None,
    is_dynamic_arg: bool = False,
    modifiers: Mapping[str, bool] | None = None,
    loc: Any = None,
) -> None:
    if el.directives is None:
        el.directives = []
    el.directives.append(
        Directive(name, raw_name, value, arg, is_dynamic_arg, modifiers, **_range(loc))
    )
    el.plain = False


def prepend_modifier_marker(symbol: str, name: str, dynamic: bool, helper: str = "_p") -> str:
    """Prefix an event name with a modifier marker.

    Dynamic names are wrapped in the modifier-prepend intrinsic so the
    marker is applied once the name is known at runtime.
    """
    if dynamic:
        return f'{helper}({name},"{symbol}")'
    return symbol + name


def add_handler(
    el: ElementNode,
    name: str,
    value: str,
    modifiers: Mapping[str, bool] | None = None,
    important: bool = False,
    warn: Callable[..., None] | None = None,
    loc: Any = None,
    dynamic: bool = False,
    prepend_helper: str = "_p",
) -> None:
    """Register an event listener, normalizing name-level modifiers.

    ``click.right`` and ``click.middle`` are rewritten to the events that
    actually fire (contextmenu, mouseup). ``capture``/``once``/``passive``
    become name markers. ``native`` routes the listener to
    ``native_events``. ``important`` listeners run first.
    """
    mods: dict[str, bool] | None = dict(modifiers) if modifiers else None
    if warn is not None and mods and mods.get("prevent") and mods.get("passive"):
        warn(
            "passive and prevent modifiers cannot be used together. "
            "Passive handler cannot prevent default event.",
            loc,
            code=ErrorCode.PASSIVE_PREVENT,
        )

    if mods and mods.get("right"):
        if dynamic:
            name = f"({name})==='click'?'contextmenu':({name})"
        elif name == "click":
            name = "contextmenu"
            del mods["right"]
    elif mods and mods.get("middle"):
        if dynamic:
            name = f"({name})==='click'?'mouseup':({name})"
        elif name == "click":
            name = "mouseup"

    if mods:
        for modifier, symbol in _NAME_MARKERS:
            if mods.pop(modifier, False):
                name = prepend_modifier_marker(symbol, name, dynamic, prepend_helper)

    if mods is not None and mods.pop("native", False):
        if el.native_events is None:
            el.native_events = {}
        events = el.native_events
    else:
        if el.events is None:
            el.events = {}
        events = el.events

    handler = Handler(value.strip(), dynamic, mods, **_range(loc))
    handlers = events.setdefault(name, [])
    if important:
        handlers.insert(0, handler)
    else:
        handlers.append(handler)
    el.plain = False


def get_and_remove_attr(el: ElementNode, name: str, remove_from_map: bool = False) -> str | None:
    value = el.attrs_map.get(name)
    if value is not None:
        for i, attr in enumerate(el.attrs_list):
            if attr.name == name:
                del el.attrs_list[i]
                break
    if remove_from_map:
        el.attrs_map.pop(name, None)
    return value


def get_binding_attr(el: ElementNode, name: str, get_static: bool = True) -> str | None:
    """Return the bound expression for ``name`` (``:name`` / ``v-bind:name``).

    Falls back to the static attribute value as a string literal.
    """
    dynamic_value = get_and_remove_attr(el, ":" + name) or get_and_remove_attr(
        el, "v-bind:" + name
    )
    if dynamic_value is not None:
        return dynamic_value
    if get_static:
        static_value = get_and_remove_attr(el, name)
        if static_value is not None:
            return js_string(static_value)
    return None
