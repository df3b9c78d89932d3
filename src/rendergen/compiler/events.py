"""Event listener emission for ``on:`` / ``nativeOn:``.

A handler value is emitted one of three ways:

- method path (``onClick``, ``a.b['c']``) or function expression
  (``e => go(e)``, ``function (e) {...}``): passed through as-is
- inline statement (``count++``, ``go(1)``): wrapped in
  ``function($event){...}``
- with modifiers: always wrapped, guards first, then the call

Key modifiers become a single filter statement that returns early when
the pressed key does not match.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from rendergen.intrinsics import DEFAULT_INTRINSICS, Intrinsics
from rendergen.nodes.element import Handler
from rendergen.utils.code import js_json

FN_EXP_RE = re.compile(r"^([\w$_]+|\([^)]*?\))\s*=>|^function(?:\s+[\w$]+)?\s*\(")
FN_INVOKE_RE = re.compile(r"\([^)]*?\);*$")
SIMPLE_PATH_RE = re.compile(
    r"^[A-Za-z_$][\w$]*"
    r"(?:\.[A-Za-z_$][\w$]*|\['[^']*?']|\[\"[^\"]*?\"]|\[\d+]|\[[A-Za-z_$][\w$]*])*$"
)
_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")

# Key codes for the built-in key aliases
KEY_CODES: dict[str, int | list[int]] = {
    "esc": 27,
    "tab": 9,
    "enter": 13,
    "space": 32,
    "up": 38,
    "left": 37,
    "right": 39,
    "down": 40,
    "delete": [8, 46],
}

# KeyboardEvent.key values, including the legacy IE/Edge spellings
KEY_NAMES: dict[str, str | list[str]] = {
    "esc": ["Esc", "Escape"],
    "tab": "Tab",
    "enter": "Enter",
    "space": [" ", "Spacebar"],
    "up": ["Up", "ArrowUp"],
    "left": ["Left", "ArrowLeft"],
    "right": ["Right", "ArrowRight"],
    "down": ["Down", "ArrowDown"],
    "delete": ["Backspace", "Delete", "Del"],
}


def _guard(condition: str) -> str:
    return f"if({condition})return null;"


MODIFIER_CODE: dict[str, str] = {
    "stop": "$event.stopPropagation();",
    "prevent": "$event.preventDefault();",
    "self": _guard("$event.target !== $event.currentTarget"),
    "ctrl": _guard("!$event.ctrlKey"),
    "shift": _guard("!$event.shiftKey"),
    "alt": _guard("!$event.altKey"),
    "meta": _guard("!$event.metaKey"),
    "left": _guard("'button' in $event && $event.button !== 0"),
    "middle": _guard("'button' in $event && $event.button !== 1"),
    "right": _guard("'button' in $event && $event.button !== 2"),
}

_SYSTEM_KEYS = ("ctrl", "shift", "alt", "meta")


def gen_handlers(
    events: Mapping[str, Sequence[Handler]],
    is_native: bool,
    intrinsics: Intrinsics = DEFAULT_INTRINSICS,
) -> str:
    """Emit ``on:{...}`` (or ``nativeOn:``) for an event table.

    Entries with a dynamic event name go through the dynamic-keys helper.
    """
    prefix = "nativeOn:" if is_native else "on:"
    static_handlers: list[str] = []
    dynamic_handlers: list[str] = []
    for name, handlers in events.items():
        code = gen_handler(handlers, intrinsics)
        if any(handler.dynamic for handler in handlers):
            dynamic_handlers.append(f"{name},{code}")
        else:
            static_handlers.append(f'"{name}":{code}')
    static_code = "{" + ",".join(static_handlers) + "}"
    if dynamic_handlers:
        return f"{prefix}{intrinsics.bind_dynamic_keys}({static_code},[{','.join(dynamic_handlers)}])"
    return prefix + static_code


def gen_handler(
    handler: Handler | Sequence[Handler] | None,
    intrinsics: Intrinsics = DEFAULT_INTRINSICS,
) -> str:
    if not handler:
        return "function(){}"
    if not isinstance(handler, Handler):
        if len(handler) == 1:
            return gen_handler(handler[0], intrinsics)
        return "[" + ",".join(gen_handler(h, intrinsics) for h in handler) + "]"

    value = handler.value
    is_method_path = SIMPLE_PATH_RE.match(value) is not None
    is_function_expression = FN_EXP_RE.match(value) is not None
    is_function_invocation = SIMPLE_PATH_RE.match(FN_INVOKE_RE.sub("", value, count=1)) is not None

    if handler.modifiers is None:
        if is_method_path or is_function_expression:
            return value
        body = f"return {value}" if is_function_invocation else value
        return f"function($event){{{body}}}"

    code = ""
    modifier_code = ""
    keys: list[str] = []
    modifiers = handler.modifiers
    for key in modifiers:
        if key in MODIFIER_CODE:
            modifier_code += MODIFIER_CODE[key]
            # left/right double as arrow keys
            if key in KEY_CODES:
                keys.append(key)
        elif key == "exact":
            modifier_code += _guard(
                "||".join(f"$event.{k}Key" for k in _SYSTEM_KEYS if not modifiers.get(k))
            )
        else:
            keys.append(key)
    if keys:
        code += gen_key_filter(keys, intrinsics)
    code += modifier_code

    if is_method_path:
        handler_code = f"return {value}.apply(null, arguments)"
    elif is_function_expression:
        handler_code = f"return ({value}).apply(null, arguments)"
    elif is_function_invocation:
        handler_code = f"return {value}"
    else:
        handler_code = value
    return f"function($event){{{code}{handler_code}}}"


def gen_key_filter(keys: Sequence[str], intrinsics: Intrinsics = DEFAULT_INTRINSICS) -> str:
    # Key filters only apply to keyboard events
    filters = "&&".join(_gen_filter_code(key, intrinsics) for key in keys)
    return f"if(!$event.type.indexOf('key')&&{filters})return null;"


def _gen_filter_code(key: str, intrinsics: Intrinsics) -> str:
    match = _LEADING_INT_RE.match(key)
    if match and int(match.group()):
        return f"$event.keyCode!=={int(match.group())}"
    key_code = KEY_CODES.get(key)
    key_name = KEY_NAMES.get(key)
    return (
        f"{intrinsics.check_key_codes}($event.keyCode,"
        f"{js_json(key)},"
        f"{_json_or_undefined(key_code)},"
        "$event.key,"
        f"{_json_or_undefined(key_name)})"
    )


def _json_or_undefined(value: object) -> str:
    return "undefined" if value is None else js_json(value)
