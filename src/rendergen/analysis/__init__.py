"""Static analysis of template trees.

Marks which subtrees never change between renders so code generation can
hoist them.
"""

from rendergen.analysis.static import BASE_STATIC_KEYS, StaticAnalyzer, optimize
from rendergen.analysis.visitor import branch_blocks, walk

__all__ = ["BASE_STATIC_KEYS", "StaticAnalyzer", "branch_blocks", "optimize", "walk"]
