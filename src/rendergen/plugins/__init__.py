"""Directive plugins and codegen modules.

The default web-platform set is built per `Intrinsics` so every helper
call a plugin emits uses the configured runtime names.
"""

from __future__ import annotations

from collections.abc import Callable

from rendergen.intrinsics import DEFAULT_INTRINSICS, Intrinsics
from rendergen.plugins.base import (
    CompilerModule,
    DirectivePlugin,
    FunctionDirective,
    UserWarnFunc,
    WarnFunc,
    as_directive_plugin,
)
from rendergen.plugins.directives import (
    BindDirective,
    CloakDirective,
    HtmlDirective,
    OnDirective,
    TextDirective,
)
from rendergen.plugins.model import (
    ModelDirective,
    ModelPath,
    gen_assignment_code,
    parse_model,
)
from rendergen.plugins.modules import ClassModule, StyleModule
from rendergen.utils.constants import is_reserved_tag


def default_directives(
    intrinsics: Intrinsics = DEFAULT_INTRINSICS,
    reserved: Callable[[str], bool] = is_reserved_tag,
) -> dict[str, DirectivePlugin]:
    """Base directives (on, bind, cloak) plus the web ones (text, html, model)."""
    return {
        "on": OnDirective(intrinsics),
        "bind": BindDirective(intrinsics),
        "cloak": CloakDirective(intrinsics),
        "text": TextDirective(intrinsics),
        "html": HtmlDirective(intrinsics),
        "model": ModelDirective(intrinsics, reserved),
    }


def default_modules(intrinsics: Intrinsics = DEFAULT_INTRINSICS) -> list[CompilerModule]:
    return [ClassModule(intrinsics), StyleModule(intrinsics)]


__all__ = [
    "BindDirective",
    "ClassModule",
    "CloakDirective",
    "CompilerModule",
    "DirectivePlugin",
    "FunctionDirective",
    "HtmlDirective",
    "ModelDirective",
    "ModelPath",
    "OnDirective",
    "StyleModule",
    "TextDirective",
    "UserWarnFunc",
    "WarnFunc",
    "as_directive_plugin",
    "default_directives",
    "default_modules",
    "gen_assignment_code",
    "parse_model",
]
