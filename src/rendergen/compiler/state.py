"""Per-compile code generation state.

`CodegenOptions` is immutable and may be shared between compiles (and
with nested inline-template compiles). `CodegenState` holds what one
compile mutates: the hoisted render functions, the once counter and the
pre-mode flag.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Flag, auto
from types import MappingProxyType

from rendergen.intrinsics import DEFAULT_INTRINSICS, Intrinsics
from rendergen.plugins.base import CompilerModule, DirectivePlugin
from rendergen.utils.constants import is_reserved_tag


class Stage(Flag):
    """Dispatch stages already applied to a node on the current path.

    Each stage is entered at most once per generation path; a node that
    re-enters the dispatcher carries the stages it has been through.
    """

    UNVISITED = 0
    HOISTED = auto()
    ONCE = auto()
    LOOPED = auto()
    BRANCHED = auto()


@dataclass(frozen=True, slots=True)
class CodegenOptions:
    """Configuration read by code generation.

    Attributes:
        intrinsics: Runtime helper names used at every emission site.
        modules: Codegen modules, applied in order.
        directives: Directive name → compile-time plugin.
        is_reserved_tag: Platform tag predicate; other tags may be components.
    """

    intrinsics: Intrinsics = DEFAULT_INTRINSICS
    modules: tuple[CompilerModule, ...] = ()
    directives: Mapping[str, DirectivePlugin] = field(
        default_factory=lambda: MappingProxyType({})
    )
    is_reserved_tag: Callable[[str], bool] = is_reserved_tag


@dataclass(slots=True)
class CodegenState:
    static_render_fns: list[str] = field(default_factory=list)
    once_id: int = 0
    pre: bool = False

    def next_once_id(self) -> int:
        once_id = self.once_id
        self.once_id += 1
        return once_id
