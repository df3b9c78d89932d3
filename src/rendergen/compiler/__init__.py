"""Render function code generation.

`generate` turns a (statically analyzed) tree into the source of a render
function plus the hoisted static render functions.
"""

from rendergen.compiler.core import CodeGenerator, CodegenResult, generate
from rendergen.compiler.data import gen_props
from rendergen.compiler.events import gen_handler, gen_handlers
from rendergen.compiler.slots import slot_hash
from rendergen.compiler.state import CodegenOptions, CodegenState, Stage

__all__ = [
    "CodeGenerator",
    "CodegenOptions",
    "CodegenResult",
    "CodegenState",
    "Stage",
    "gen_handler",
    "gen_handlers",
    "gen_props",
    "generate",
    "slot_hash",
]
