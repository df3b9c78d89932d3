"""Capability interfaces for codegen plugins.

Two plugin kinds extend code generation:

- `DirectivePlugin`: compile-time handler for one directive name. It may
  rewrite the element (e.g. turn ``v-text`` into a DOM property) and
  reports whether the directive still needs its runtime counterpart.
- `CompilerModule`: per-attribute module contributing data-object
  fragments, static-key names and output transforms.

Plain functions with the directive signature are accepted anywhere a
`DirectivePlugin` is expected and adapted by `as_directive_plugin`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

from rendergen.exceptions import PluginError
from rendergen.intrinsics import DEFAULT_INTRINSICS, Intrinsics

if TYPE_CHECKING:
    from rendergen.nodes.element import Directive, ElementNode


class WarnFunc(Protocol):
    """Internal diagnostic sink; call sites may pass ``code=ErrorCode``."""

    def __call__(self, message: str, loc: Any = None, tip: bool = False, **kwargs: Any) -> None: ...


# User sinks only receive (message, loc, tip)
UserWarnFunc = Callable[[str, Any, bool], None]


def adapt_user_warn(sink: UserWarnFunc) -> WarnFunc:
    """Wrap a user ``warn(message, loc, tip)`` sink as an internal `WarnFunc`."""

    def warn(message: str, loc: Any = None, tip: bool = False, **kwargs: Any) -> None:
        sink(message, loc, tip)

    return warn


class DirectivePlugin:
    """Compile-time handler for one directive.

    Subclasses override `compile_directive`. The intrinsic names in
    ``self.intrinsics`` must be used for any helper call the plugin emits.
    """

    __slots__ = ("intrinsics",)

    def __init__(self, intrinsics: Intrinsics = DEFAULT_INTRINSICS) -> None:
        self.intrinsics = intrinsics

    def compile_directive(
        self, node: ElementNode, directive: Directive, warn: WarnFunc
    ) -> bool:
        """Process one directive usage.

        Returns:
            True when the directive must also be emitted for the runtime.
        """
        raise NotImplementedError


class FunctionDirective(DirectivePlugin):
    """Adapter for a plain ``(node, directive, warn) -> bool`` function."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[..., Any]) -> None:
        super().__init__()
        self.func = func

    def compile_directive(
        self, node: ElementNode, directive: Directive, warn: WarnFunc
    ) -> bool:
        return bool(self.func(node, directive, warn))

    def __repr__(self) -> str:
        return f"FunctionDirective({getattr(self.func, '__name__', self.func)!r})"


def as_directive_plugin(value: Any) -> DirectivePlugin:
    """Return ``value`` as a `DirectivePlugin`, wrapping plain callables.

    Raises:
        PluginError: if ``value`` is neither a plugin nor callable.
    """
    if isinstance(value, DirectivePlugin):
        return value
    if callable(getattr(value, "compile_directive", None)):
        return value
    if callable(value):
        return FunctionDirective(value)
    raise PluginError(f"directive plugin must be callable, got {type(value).__name__}")


class CompilerModule:
    """Per-attribute codegen module.

    Attributes:
        static_keys: Extra element fields that do not make a node dynamic.

    Every hook has a neutral default so modules only override what they
    contribute.
    """

    static_keys: tuple[str, ...] = ()

    def __init__(self, intrinsics: Intrinsics = DEFAULT_INTRINSICS) -> None:
        self.intrinsics = intrinsics

    def generate_module_data(self, node: ElementNode) -> str:
        """Return ``key:value,`` fragments to splice into the data object."""
        return ""

    def transform_output(self, node: ElementNode, code: str) -> str:
        """Rewrite the finished element/component code."""
        return code
