"""Compile environment for rendergen.

`Environment` carries configuration (intrinsic names, plugins, tag
predicate) and drives a compile: static analysis, then code generation.
"""

from rendergen.environment.core import CompiledResult, Environment
from rendergen.environment.registry import DirectiveRegistry

__all__ = ["CompiledResult", "DirectiveRegistry", "Environment"]
