"""rendergen: template tree to render function compiler.

Takes a parsed template tree (elements, text, interpolations and comments
with directive metadata attached) and produces the source of a render
function plus hoisted static render functions for a virtual-DOM runtime.

Quickstart:
    >>> from rendergen import Environment, Tree
    >>> tree = Tree()
    >>> ul = tree.element("ul")
    >>> li = tree.element("li", ul, for_source="items", alias="item", key="item.id")
    >>> _ = tree.expression("_s(item.name)", li)
    >>> print(Environment().compile(tree).render)
    with(this){return _c('ul',_l((items),function(item){return _c('li',{key:item.id},[_v(_s(item.name))])}),0)}

Parser output:
    >>> result = Environment().compile_dict({"type": 1, "tag": "div", "children": []})
    >>> result.render
    "with(this){return _c('div')}"

Architecture:
Tree → Static Analyzer → Code Generator → (render, static_render_fns)

Pipeline stages:
1. **Static Analyzer**: flags subtrees that never change and promotes
   them to static roots
2. **Code Generator**: recursive descent emitting intrinsic calls;
   static roots are hoisted into separate functions
3. **Environment**: configuration, plugin registries and diagnostics

Thread-Safety:
An `Environment` holds no per-compile state and its registries use
copy-on-write, so distinct trees may be compiled concurrently.
"""

from rendergen.analysis import StaticAnalyzer, optimize
from rendergen.compiler import CodegenOptions, CodegenResult, Stage, generate, slot_hash
from rendergen.environment import CompiledResult, DirectiveRegistry, Environment
from rendergen.exceptions import (
    CompilerError,
    Diagnostic,
    ErrorCode,
    PluginError,
    SourceSnippet,
    TreeStructureError,
    build_source_snippet,
)
from rendergen.intrinsics import DEFAULT_INTRINSICS, Intrinsics
from rendergen.nodes import (
    EMPTY_SLOT_SCOPE_TOKEN,
    Attr,
    CommentNode,
    Directive,
    ElementNode,
    ExpressionNode,
    Handler,
    IfCondition,
    ModelBinding,
    Node,
    TextNode,
    Tree,
    tree_from_dict,
)
from rendergen.plugins import CompilerModule, DirectivePlugin

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_INTRINSICS",
    "EMPTY_SLOT_SCOPE_TOKEN",
    "Attr",
    "CodegenOptions",
    "CodegenResult",
    "CommentNode",
    "CompiledResult",
    "CompilerError",
    "CompilerModule",
    "Diagnostic",
    "Directive",
    "DirectivePlugin",
    "DirectiveRegistry",
    "ElementNode",
    "Environment",
    "ErrorCode",
    "ExpressionNode",
    "Handler",
    "IfCondition",
    "Intrinsics",
    "ModelBinding",
    "Node",
    "PluginError",
    "SourceSnippet",
    "Stage",
    "StaticAnalyzer",
    "TextNode",
    "Tree",
    "TreeStructureError",
    "__version__",
    "build_source_snippet",
    "compile_tree",
    "generate",
    "optimize",
    "slot_hash",
    "tree_from_dict",
]


def compile_tree(tree: Tree, **options: object) -> CompiledResult:
    """Compile ``tree`` with a one-off `Environment` built from ``options``."""
    return Environment(**options).compile(tree)  # type: ignore[arg-type]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'rendergen' has no attribute {name!r}")
