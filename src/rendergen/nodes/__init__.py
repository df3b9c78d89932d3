"""Template tree nodes.

A tree is an arena (`Tree`) of three node kinds:

- `ElementNode`: tags, components, <template> and <slot> outlets
- `TextNode` / `ExpressionNode`: literal text and interpolations
- `CommentNode`: preserved comments

Elements own their children; parents are arena indices.
"""

from rendergen.nodes.base import Node
from rendergen.nodes.element import (
    Attr,
    Directive,
    ElementNode,
    Handler,
    IfCondition,
    ModelBinding,
)
from rendergen.nodes.helpers import (
    add_attr,
    add_directive,
    add_handler,
    add_prop,
    add_raw_attr,
    get_and_remove_attr,
    get_binding_attr,
    prepend_modifier_marker,
)
from rendergen.nodes.loader import tree_from_dict
from rendergen.nodes.text import CommentNode, ExpressionNode, TextNode
from rendergen.nodes.tree import EMPTY_SLOT_SCOPE_TOKEN, Tree, add_if_condition

__all__ = [
    "EMPTY_SLOT_SCOPE_TOKEN",
    "Attr",
    "CommentNode",
    "Directive",
    "ElementNode",
    "ExpressionNode",
    "Handler",
    "IfCondition",
    "ModelBinding",
    "Node",
    "TextNode",
    "Tree",
    "add_attr",
    "add_directive",
    "add_handler",
    "add_if_condition",
    "add_prop",
    "add_raw_attr",
    "get_and_remove_attr",
    "get_binding_attr",
    "prepend_modifier_marker",
    "tree_from_dict",
]
