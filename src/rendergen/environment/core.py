"""Compile environment: configuration plus the compile driver.

An `Environment` is configured once and reused for many compiles. It
holds no per-compile state, so separate trees may be compiled from
separate threads.

Example:
    >>> from rendergen import Environment, Tree
    >>> env = Environment()
    >>> tree = Tree()
    >>> div = tree.element("div")
    >>> _ = tree.text("hello", div)
    >>> print(env.compile(tree).render)
    with(this){return _c('div',[_v("hello")])}

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import InitVar, dataclass, field
from typing import Any

from rendergen.analysis.static import StaticAnalyzer
from rendergen.compiler.core import CodeGenerator
from rendergen.compiler.state import CodegenOptions
from rendergen.environment.registry import DirectiveRegistry
from rendergen.exceptions import Diagnostic, ErrorCode, PluginError
from rendergen.intrinsics import DEFAULT_INTRINSICS, Intrinsics
from rendergen.nodes.loader import tree_from_dict
from rendergen.nodes.tree import Tree
from rendergen.plugins import default_directives, default_modules
from rendergen.plugins.base import (
    CompilerModule,
    DirectivePlugin,
    UserWarnFunc,
    as_directive_plugin,
)
from rendergen.utils.constants import is_reserved_tag

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompiledResult:
    """Outcome of one compile.

    Attributes:
        tree: The (analyzed) tree that was compiled.
        render: Source of the render function.
        static_render_fns: Sources of the hoisted static render functions,
            indexed by the ``_m(i)`` calls in ``render``.
        errors: Template mistakes that were worked around.
        tips: Suggestions.
    """

    tree: Tree
    render: str
    static_render_fns: list[str]
    errors: list[Diagnostic] = field(default_factory=list)
    tips: list[Diagnostic] = field(default_factory=list)

    def format_diagnostics(self, source: str | None = None, name: str | None = None) -> str:
        """Render every diagnostic, errors first."""
        return "\n\n".join(d.format(source, name) for d in (*self.errors, *self.tips))


def _span(loc: Any) -> tuple[int | None, int | None]:
    if loc is None:
        return None, None
    if isinstance(loc, Mapping):
        return loc.get("start"), loc.get("end")
    return getattr(loc, "start", None), getattr(loc, "end", None)


@dataclass
class Environment:
    """Central configuration for compiling template trees.

    Attributes:
        intrinsics: Runtime helper names used by generated code and plugins.
        is_reserved_tag: Platform tag predicate; other tags may be components.
        optimize: Run static analysis before generating code.
        static_keys: Extra element fields that do not make a node dynamic.
        warn: Optional sink called as ``warn(message, loc, tip)`` for every
            diagnostic, in addition to collecting it on the result.
        modules: Codegen modules, applied in order. Defaults to the class
            and style modules.
        extra_directives: Directive plugins (or plain functions) to register
            on top of the defaults.

    Plugins:
        ```python
        env.directives["focus"] = lambda node, directive, warn: True
        env.add_module(MyModule())
        ```

    """

    intrinsics: Intrinsics = DEFAULT_INTRINSICS
    is_reserved_tag: Callable[[str], bool] = is_reserved_tag
    optimize: bool = True
    static_keys: Sequence[str] = ()
    warn: UserWarnFunc | None = None
    modules: list[CompilerModule] | None = None
    extra_directives: InitVar[Mapping[str, Any] | None] = None

    _directives: dict[str, DirectivePlugin] = field(init=False, repr=False)

    def __post_init__(self, extra_directives: Mapping[str, Any] | None) -> None:
        if self.modules is None:
            self.modules = default_modules(self.intrinsics)
        else:
            self.modules = list(self.modules)
        for module in self.modules:
            self._check_module(module)
        directives: dict[str, DirectivePlugin] = dict(
            default_directives(self.intrinsics, self.is_reserved_tag)
        )
        for name, plugin in (extra_directives or {}).items():
            directives[name] = as_directive_plugin(plugin)
        self._directives = directives

    @property
    def directives(self) -> DirectiveRegistry:
        """Directive plugins by directive name (dict-like, copy-on-write)."""
        return DirectiveRegistry(self, "_directives")

    @staticmethod
    def _check_module(module: Any) -> None:
        for hook in ("generate_module_data", "transform_output"):
            if not callable(getattr(module, hook, None)):
                raise PluginError(f"module {module!r} does not implement {hook}()")

    def add_module(self, module: CompilerModule) -> None:
        """Append a codegen module (copy-on-write)."""
        self._check_module(module)
        self.modules = [*(self.modules or ()), module]

    def all_static_keys(self) -> frozenset[str]:
        """Configured static keys plus those contributed by modules."""
        keys = set(self.static_keys)
        for module in self.modules or ():
            keys.update(getattr(module, "static_keys", ()))
        return frozenset(keys)

    def codegen_options(self) -> CodegenOptions:
        return CodegenOptions(
            intrinsics=self.intrinsics,
            modules=tuple(self.modules or ()),
            directives=self._directives,
            is_reserved_tag=self.is_reserved_tag,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Compile driver
    # ─────────────────────────────────────────────────────────────────────

    def compile(self, tree: Tree) -> CompiledResult:
        """Analyze ``tree`` in place and generate its render code.

        Never raises for template problems; they are reported as
        diagnostics on the result.
        """
        errors: list[Diagnostic] = []
        tips: list[Diagnostic] = []
        user_warn = self.warn

        def warn(
            message: str,
            loc: Any = None,
            tip: bool = False,
            code: ErrorCode = ErrorCode.GENERIC,
            **kwargs: Any,
        ) -> None:
            start, end = _span(loc)
            diagnostic = Diagnostic(message, code, start, end, tip)
            (tips if tip else errors).append(diagnostic)
            if user_warn is not None:
                user_warn(message, loc, tip)
            elif not tip:
                logger.warning("%s", diagnostic)

        # Snapshot so concurrent registry updates do not affect this compile
        options = self.codegen_options()
        logger.debug("Compiling tree with %d nodes", len(tree))
        if self.optimize:
            StaticAnalyzer(options.is_reserved_tag, self.all_static_keys()).optimize(tree)
        result = CodeGenerator(tree, options, warn).generate()
        logger.debug(
            "Generated render code: %d static render fn(s), %d error(s), %d tip(s)",
            len(result.static_render_fns),
            len(errors),
            len(tips),
        )
        return CompiledResult(
            tree=tree,
            render=result.render,
            static_render_fns=result.static_render_fns,
            errors=errors,
            tips=tips,
        )

    def compile_dict(self, data: Mapping[str, Any] | None) -> CompiledResult:
        """Load a parser AST mapping with `tree_from_dict` and compile it."""
        return self.compile(tree_from_dict(data))
