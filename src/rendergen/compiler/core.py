"""rendergen code generator core.

Turns an analyzed template tree into render function source. Uses a
mixin-based design:

- `StructureMixin`: element dispatcher, stages and child lists
- `DataObjectMixin`: data objects, directives and inline templates
- `ScopedSlotsMixin`: scoped slot descriptors

Output shape::

    render            with(this){return _c('div',[_m(0),_v(_s(msg))])}
    static_render_fns [with(this){return _c('p',[_v("hi"),_c('b')])}]

The runtime evaluates every function with the component instance as
``this``, so identifiers in expressions resolve against the instance.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from rendergen.compiler.data import DataObjectMixin
from rendergen.compiler.slots import ScopedSlotsMixin
from rendergen.compiler.state import CodegenOptions, CodegenState
from rendergen.compiler.structure import StructureMixin
from rendergen.nodes.element import ElementNode
from rendergen.nodes.tree import Tree
from rendergen.plugins.base import UserWarnFunc, WarnFunc, adapt_user_warn

logger = logging.getLogger(__name__)

_DEFAULT_OPTIONS = CodegenOptions()


@dataclass(frozen=True, slots=True)
class CodegenResult:
    render: str
    static_render_fns: list[str] = field(default_factory=list)


def _log_warning(message: str, loc: Any = None, tip: bool = False, **kwargs: Any) -> None:
    if tip:
        logger.info("Template tip: %s", message)
    else:
        logger.warning("Template error: %s", message)


class CodeGenerator(StructureMixin, DataObjectMixin, ScopedSlotsMixin):
    """Generate render function source for one tree.

    One instance serves one compile: it owns the `CodegenState` (hoisted
    functions, once counter, pre mode). Nested inline-template compiles
    get their own generator that shares only ``options`` and ``warn``.

    Attributes:
        tree: Arena holding every node, used for upward lookups.
        options: Immutable configuration.
        warn: Diagnostic sink; never raises.
        state: Mutable per-compile state.

    """

    __slots__ = ("_pre_cache", "options", "state", "tree", "warn")

    def __init__(
        self,
        tree: Tree,
        options: CodegenOptions = _DEFAULT_OPTIONS,
        warn: WarnFunc | None = None,
    ) -> None:
        self.tree = tree
        self.options = options
        self.warn: WarnFunc = warn or _log_warning
        self.state = CodegenState()
        self._pre_cache: dict[int, bool] = {}

    def generate(self, root: ElementNode | None = None) -> CodegenResult:
        """Generate the render function for ``root`` (default: the tree root)."""
        if root is None:
            root = self.tree.root
        if root is None:
            code = f'{self.options.intrinsics.create}("div")'
        elif root.tag == "script":
            code = "null"
        else:
            code = self.gen_element(root)
        return CodegenResult(
            render=f"with(this){{return {code}}}",
            static_render_fns=list(self.state.static_render_fns),
        )

    def subcompile(self, root: ElementNode) -> CodegenResult:
        """Compile ``root`` as a separate template sharing this configuration."""
        return CodeGenerator(self.tree, self.options, self.warn).generate(root)

    # ─────────────────────────────────────────────────────────────────────────
    # Node queries
    # ─────────────────────────────────────────────────────────────────────────

    def is_pre(self, el: ElementNode) -> bool:
        """True if ``el`` or any ancestor is ``v-pre``."""
        cached = self._pre_cache.get(el.index)
        if cached is None:
            parent = self.tree.parent_of(el)
            cached = el.pre or (parent is not None and self.is_pre(parent))
            if el.index >= 0:
                self._pre_cache[el.index] = cached
        return cached

    def maybe_component(self, el: ElementNode) -> bool:
        return bool(el.component) or not self.options.is_reserved_tag(el.tag)


def generate(
    tree: Tree,
    options: CodegenOptions | Mapping[str, Any] | None = None,
    *,
    root: ElementNode | None = None,
    warn: UserWarnFunc | None = None,
) -> CodegenResult:
    """Generate render code for an (optionally analyzed) tree.

    ``warn`` is called as ``warn(message, loc, tip)``; without it
    diagnostics go to the module logger.

    Example:
        >>> tree = Tree()
        >>> div = tree.element("div")
        >>> _ = tree.expression("_s(msg)", div)
        >>> generate(tree).render
        "with(this){return _c('div',[_v(_s(msg))])}"

    """
    if options is None:
        options = _DEFAULT_OPTIONS
    elif not isinstance(options, CodegenOptions):
        options = CodegenOptions(**options)
    sink = adapt_user_warn(warn) if warn is not None else None
    return CodeGenerator(tree, options, sink).generate(root)
