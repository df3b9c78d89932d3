"""Pytest configuration and fixtures for rendergen tests."""

from collections.abc import Callable

import pytest

from rendergen import Environment, Tree

from .helpers import body


@pytest.fixture
def env():
    """Create a basic rendergen Environment."""
    return Environment()


@pytest.fixture
def env_no_optimize():
    """Create an Environment that skips static analysis."""
    return Environment(optimize=False)


@pytest.fixture
def tree():
    """Create an empty tree arena."""
    return Tree()


@pytest.fixture
def compile_body(env) -> Callable[[Tree], str]:
    """Compile a tree with the default environment and return the render body."""

    def _compile(tree: Tree) -> str:
        return body(env.compile(tree).render)

    return _compile
