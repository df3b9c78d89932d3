"""Assertion helpers shared by rendergen tests."""

from __future__ import annotations


def body(render: str) -> str:
    """Strip the ``with(this){return ...}`` wrapper from generated code."""
    prefix, suffix = "with(this){return ", "}"
    assert render.startswith(prefix) and render.endswith(suffix), render
    return render[len(prefix) : -len(suffix)]


def assert_contains(code: str, *expected_parts: str) -> None:
    """Assert generated code contains all expected parts.

    Args:
        code: The generated code.
        expected_parts: Strings that should all be present in the code.
    """
    for part in expected_parts:
        assert part in code, (
            f"Generated code missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {code!r}"
        )
