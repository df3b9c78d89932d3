"""Helpers for building generated-code text."""

from __future__ import annotations

import json
import re
from typing import Any

_CAMELIZE_RE = re.compile(r"-(\w)")


def transform_special_newlines(text: str) -> str:
    """Escape U+2028/U+2029, which may not appear raw inside a function body."""
    return text.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")


def js_string(value: str) -> str:
    """Quote ``value`` as a double-quoted string literal of the generated code."""
    return json.dumps(value, ensure_ascii=False)


def js_json(value: Any) -> str:
    """Serialize ``value`` compactly, as the runtime's JSON would."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def camelize(name: str) -> str:
    """``foo-bar`` → ``fooBar``."""
    return _CAMELIZE_RE.sub(lambda m: m.group(1).upper(), name)
