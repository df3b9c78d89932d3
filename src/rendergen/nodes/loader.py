"""Load a tree from the JSON-shaped AST emitted by the template parser.

The parser serializes nodes as plain mappings with camelCase keys:

- ``type: 1`` elements (``tag``, ``attrsList``, ``for``, ``ifConditions``...)
- ``type: 2`` interpolations (``expression``, ``text``)
- ``type: 3`` text, or comments when ``isComment`` is true

Mappings cannot express identity, so an ``ifConditions`` entry without a
``block`` stands for the element that owns the list.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from rendergen.exceptions import ErrorCode, TreeStructureError
from rendergen.nodes.element import (
    Attr,
    Directive,
    ElementNode,
    Handler,
    IfCondition,
    ModelBinding,
)
from rendergen.nodes.text import CommentNode, ExpressionNode, TextNode
from rendergen.nodes.tree import Tree

logger = logging.getLogger(__name__)

# camelCase key → ElementNode field, for plain scalar fields
_SCALAR_FIELDS = {
    "ns": "ns",
    "pre": "pre",
    "for": "for_source",
    "alias": "alias",
    "iterator1": "iterator1",
    "iterator2": "iterator2",
    "if": "if_expr",
    "elseif": "else_if",
    "else": "is_else",
    "once": "once",
    "key": "key",
    "ref": "ref",
    "refInFor": "ref_in_for",
    "slotTarget": "slot_target",
    "slotTargetDynamic": "slot_target_dynamic",
    "slotScope": "slot_scope",
    "slotName": "slot_name",
    "component": "component",
    "staticClass": "static_class",
    "classBinding": "class_binding",
    "staticStyle": "static_style",
    "styleBinding": "style_binding",
    "inlineTemplate": "inline_template",
    "plain": "plain",
    "processed": "processed",
    "hasBindings": "has_bindings",
    "start": "start",
    "end": "end",
}

_STRUCTURAL_KEYS = frozenset(
    {
        "type",
        "tag",
        "attrsList",
        "attrsMap",
        "rawAttrsMap",
        "children",
        "parent",
        "ifConditions",
        "scopedSlots",
        "events",
        "nativeEvents",
        "props",
        "attrs",
        "dynamicAttrs",
        "directives",
        "model",
        "static",
        "staticRoot",
        "staticInFor",
    }
)


def tree_from_dict(data: Mapping[str, Any] | None) -> Tree:
    """Build a `Tree` from a parser AST mapping (or None for an empty template).

    Raises:
        TreeStructureError: when a node has an unknown type or lacks a
            required key.
    """
    tree = Tree()
    if data is None:
        return tree
    root = _load_node(tree, data, None, "$")
    if not isinstance(root, ElementNode):
        raise TreeStructureError("root node must be an element", "$")
    tree.root = root
    logger.debug("Loaded tree with %d nodes", len(tree))
    return tree


def _require(data: Mapping[str, Any], key: str, path: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise TreeStructureError(f"missing required key {key!r}", path) from None


def _load_node(
    tree: Tree,
    data: Mapping[str, Any],
    parent: ElementNode | None,
    path: str,
) -> ElementNode | TextNode | ExpressionNode | CommentNode:
    if not isinstance(data, Mapping):
        raise TreeStructureError(f"expected a mapping, got {type(data).__name__}", path)
    node_type = data.get("type", 1)
    position = {"start": data.get("start"), "end": data.get("end")}

    if node_type == 2:
        node: Any = ExpressionNode(
            expression=_require(data, "expression", path),
            text=data.get("text", ""),
            **position,
        )
    elif node_type == 3:
        text = _require(data, "text", path)
        if data.get("isComment"):
            node = CommentNode(text=text, **position)
        else:
            node = TextNode(text=text, **position)
    elif node_type == 1:
        return _load_element(tree, data, parent, path)
    else:
        raise TreeStructureError(
            f"unknown node type {node_type!r}", path, code=ErrorCode.UNKNOWN_NODE_TYPE
        )
    tree.adopt(node, parent)
    return node


def _load_element(
    tree: Tree,
    data: Mapping[str, Any],
    parent: ElementNode | None,
    path: str,
) -> ElementNode:
    tag = _require(data, "tag", path)
    attrs_list = [_load_attr(a) for a in data.get("attrsList", ())]
    fields: dict[str, Any] = {
        field: data[key] for key, field in _SCALAR_FIELDS.items() if key in data
    }
    unknown = set(data) - set(_SCALAR_FIELDS) - _STRUCTURAL_KEYS
    if unknown:
        logger.debug("Ignoring unknown keys %s at %s", sorted(unknown), path)

    el = ElementNode(
        tag=tag,
        attrs_list=attrs_list,
        attrs_map=dict(data.get("attrsMap") or {a.name: a.value for a in attrs_list}),
        raw_attrs_map={
            name: _load_attr(attr) for name, attr in (data.get("rawAttrsMap") or {}).items()
        },
        **fields,
    )
    if "plain" not in data:
        el.plain = not el.key and not data.get("scopedSlots") and not el.attrs_list
    tree.adopt(el, parent)

    for key, field in (("props", "props"), ("attrs", "attrs"), ("dynamicAttrs", "dynamic_attrs")):
        if data.get(key) is not None:
            setattr(el, field, [_load_attr(a) for a in data[key]])
    for key, field in (("events", "events"), ("nativeEvents", "native_events")):
        if data.get(key) is not None:
            setattr(el, field, _load_events(data[key]))
    if data.get("directives") is not None:
        el.directives = [_load_directive(d, f"{path}.directives") for d in data["directives"]]
    if data.get("model") is not None:
        model = data["model"]
        el.model = ModelBinding(
            value=_require(model, "value", f"{path}.model"),
            callback=_require(model, "callback", f"{path}.model"),
            expression=_require(model, "expression", f"{path}.model"),
        )
    for key, field in (("static", "static"), ("staticRoot", "static_root"), ("staticInFor", "static_in_for")):
        if key in data:
            setattr(el, field, data[key])

    for i, child in enumerate(data.get("children", ())):
        el.children.append(_load_node(tree, child, el, f"{path}.children[{i}]"))

    if data.get("scopedSlots"):
        el.scoped_slots = {}
        for name, slot in data["scopedSlots"].items():
            slot_node = _load_node(tree, slot, el, f"{path}.scopedSlots[{name!r}]")
            if not isinstance(slot_node, ElementNode):
                raise TreeStructureError("scoped slot must be an element", path)
            el.scoped_slots[name] = slot_node

    if data.get("ifConditions") is not None:
        el.if_conditions = []
        for i, condition in enumerate(data["ifConditions"]):
            block_data = condition.get("block")
            if block_data is None:
                block = el
            else:
                block = _load_node(tree, block_data, parent, f"{path}.ifConditions[{i}]")
                if not isinstance(block, ElementNode):
                    raise TreeStructureError("condition block must be an element", path)
            el.if_conditions.append(IfCondition(condition.get("exp"), block))
    elif el.if_expr:
        el.if_conditions = [IfCondition(el.if_expr, el)]
    return el


def _load_attr(data: Mapping[str, Any]) -> Attr:
    return Attr(
        name=data["name"],
        value=data.get("value", ""),
        dynamic=bool(data.get("dynamic")),
        start=data.get("start"),
        end=data.get("end"),
    )


def _load_handler(data: Mapping[str, Any]) -> Handler:
    modifiers = data.get("modifiers")
    return Handler(
        value=data.get("value", ""),
        dynamic=bool(data.get("dynamic")),
        modifiers=dict(modifiers) if modifiers is not None else None,
        start=data.get("start"),
        end=data.get("end"),
    )


def _load_events(data: Mapping[str, Any]) -> dict[str, list[Handler]]:
    events: dict[str, list[Handler]] = {}
    for name, handlers in data.items():
        if isinstance(handlers, Mapping):
            handlers = [handlers]
        events[name] = [_load_handler(h) for h in handlers]
    return events


def _load_directive(data: Mapping[str, Any], path: str) -> Directive:
    modifiers = data.get("modifiers")
    return Directive(
        name=_require(data, "name", path),
        raw_name=data.get("rawName", "v-" + data["name"]),
        value=data.get("value"),
        arg=data.get("arg"),
        is_dynamic_arg=bool(data.get("isDynamicArg")),
        modifiers=dict(modifiers) if modifiers is not None else None,
        start=data.get("start"),
        end=data.get("end"),
    )
