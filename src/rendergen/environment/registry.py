"""Directive plugin registry for the rendergen environment.

Provides a dict-like interface over the environment's directive table.
"""

from __future__ import annotations

from collections.abc import ItemsView, KeysView, Mapping, ValuesView
from typing import TYPE_CHECKING, Any

from rendergen.plugins.base import DirectivePlugin, as_directive_plugin

if TYPE_CHECKING:
    from rendergen.environment.core import Environment


class DirectiveRegistry:
    """Dict-like view of the directive plugins of an `Environment`.

    Supports:
        - env.directives['focus'] = plugin_or_function
        - env.directives.update({'focus': plugin_or_function})
        - plugin = env.directives['model']
        - 'model' in env.directives
        - del env.directives['html']

    Plain functions are adapted to `DirectivePlugin` on registration.
    All mutations use copy-on-write, so a compile that already read the
    table keeps a consistent snapshot.
    """

    __slots__ = ("_attr", "_env")

    def __init__(self, env: Environment, attr: str):
        self._env = env
        self._attr = attr

    def _get_dict(self) -> dict[str, DirectivePlugin]:
        return getattr(self._env, self._attr)

    def _set_dict(self, d: dict[str, DirectivePlugin]) -> None:
        setattr(self._env, self._attr, d)

    def __getitem__(self, name: str) -> DirectivePlugin:
        return self._get_dict()[name]

    def __setitem__(self, name: str, plugin: Any) -> None:
        new = self._get_dict().copy()
        new[name] = as_directive_plugin(plugin)
        self._set_dict(new)

    def __delitem__(self, name: str) -> None:
        new = self._get_dict().copy()
        del new[name]
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict()

    def __len__(self) -> int:
        return len(self._get_dict())

    def __iter__(self):
        return iter(self._get_dict())

    def get(self, name: str, default: DirectivePlugin | None = None) -> DirectivePlugin | None:
        return self._get_dict().get(name, default)

    def update(self, mapping: Mapping[str, Any]) -> None:
        """Register several plugins at once."""
        new = self._get_dict().copy()
        new.update({name: as_directive_plugin(plugin) for name, plugin in mapping.items()})
        self._set_dict(new)

    def copy(self) -> dict[str, DirectivePlugin]:
        """Return a copy of the underlying dict."""
        return self._get_dict().copy()

    def keys(self) -> KeysView[str]:
        return self._get_dict().keys()

    def values(self) -> ValuesView[DirectivePlugin]:
        return self._get_dict().values()

    def items(self) -> ItemsView[str, DirectivePlugin]:
        return self._get_dict().items()
