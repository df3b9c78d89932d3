"""Tests for the tree arena, the mutation helpers and the dict loader."""

from __future__ import annotations

import pytest

from rendergen import (
    CommentNode,
    ElementNode,
    Environment,
    ErrorCode,
    ExpressionNode,
    TextNode,
    Tree,
    TreeStructureError,
    tree_from_dict,
)
from rendergen.nodes import (
    add_attr,
    add_prop,
    add_raw_attr,
    get_and_remove_attr,
    get_binding_attr,
    prepend_modifier_marker,
)

from .helpers import body


class TestArena:
    """Indices, parents and upward walks."""

    def test_indices_follow_creation_order(self, tree: Tree) -> None:
        div = tree.element("div")
        p = tree.element("p", div)
        text = tree.text("x", p)
        assert [node.index for node in tree] == [0, 1, 2]
        assert tree[2] is text
        assert len(tree) == 3
        assert tree.root is div

    def test_parent_links_are_indices(self, tree: Tree) -> None:
        div = tree.element("div")
        p = tree.element("p", div)
        assert div.parent is None
        assert p.parent == div.index
        assert tree.parent_of(p) is div
        assert tree.parent_of(div) is None

    def test_ancestors_nearest_first(self, tree: Tree) -> None:
        div = tree.element("div")
        ul = tree.element("ul", div)
        li = tree.element("li", ul)
        assert list(tree.ancestors(li)) == [ul, div]
        assert list(tree.ancestors(div)) == []

    def test_first_parentless_element_is_root(self, tree: Tree) -> None:
        first = tree.element("div")
        tree.element("span")
        assert tree.root is first

    def test_root_given_to_constructor(self) -> None:
        root = ElementNode(tag="div")
        tree = Tree(root)
        assert tree.root is root
        assert root.index == 0

    def test_node_equality_is_identity(self, tree: Tree) -> None:
        div = tree.element("div")
        a = tree.text("x", div)
        b = tree.text("x", div)
        assert a != b


class TestBuilder:
    """Element construction shortcuts."""

    def test_plain_is_derived(self, tree: Tree) -> None:
        assert tree.element("div").plain is True
        assert tree.element("div", key="k").plain is False
        assert tree.element("div", attrs={"id": "a"}).plain is False
        assert tree.element("div", plain=False).plain is False

    def test_attrs_fill_list_and_maps(self, tree: Tree) -> None:
        div = tree.element("div", attrs=[("id", "a"), ("title", "t")])
        assert [(a.name, a.value) for a in div.attrs_list] == [("id", "a"), ("title", "t")]
        assert div.attrs_map == {"id": "a", "title": "t"}
        assert div.raw_attrs_map["title"].value == "t"

    def test_if_seeds_condition_list(self, tree: Tree) -> None:
        p = tree.element("p", if_expr="ok")
        assert [(c.expression, c.block) for c in p.if_conditions] == [("ok", p)]

    def test_branches_are_not_children(self, tree: Tree) -> None:
        div = tree.element("div")
        owner = tree.element("p", div, if_expr="a")
        elif_ = tree.branch(owner, "span", "b")
        else_ = tree.branch(owner, "i")
        assert div.children == [owner]
        assert tree.parent_of(else_) is div
        assert elif_.else_if == "b"
        assert else_.is_else is True
        assert [c.expression for c in owner.if_conditions] == ["a", "b", None]

    def test_scoped_slot_registration(self, tree: Tree) -> None:
        host = tree.element("my-comp")
        slot = tree.scoped_slot(host, '"header"', scope="props")
        assert host.scoped_slots == {'"header"': slot}
        assert host.plain is False
        assert host.children == []
        assert tree.parent_of(slot) is host
        assert (slot.tag, slot.slot_scope, slot.slot_target_dynamic) == ("template", "props", False)

    def test_leaf_kinds(self, tree: Tree) -> None:
        div = tree.element("div")
        assert isinstance(tree.text("a", div), TextNode)
        assert isinstance(tree.expression("_s(a)", div), ExpressionNode)
        assert isinstance(tree.comment("a", div), CommentNode)


class TestHelpers:
    """Element mutation helpers."""

    def test_bindings_clear_plain(self, tree: Tree) -> None:
        div = tree.element("div")
        add_prop(div, "value", "v")
        assert div.plain is False
        span = tree.element("span")
        add_attr(span, "id", "x")
        assert span.plain is False

    def test_dynamic_attr_goes_to_dynamic_list(self, tree: Tree) -> None:
        div = tree.element("div")
        add_attr(div, "name", "v", dynamic=True)
        assert div.attrs is None
        assert div.dynamic_attrs[0].dynamic is True

    def test_location_is_copied(self, tree: Tree) -> None:
        div = tree.element("div")
        add_prop(div, "value", "v", loc=tree.element("span", start=3, end=9))
        assert (div.props[0].start, div.props[0].end) == (3, 9)

    def test_raw_attr(self, tree: Tree) -> None:
        div = tree.element("div")
        add_raw_attr(div, "slot-scope", "p")
        assert div.attrs_map["slot-scope"] == "p"
        assert div.attrs_list[-1].name == "slot-scope"
        assert "slot-scope" in div.raw_attrs_map

    def test_get_and_remove_attr(self, tree: Tree) -> None:
        div = tree.element("div", attrs={"id": "a", "title": "t"})
        assert get_and_remove_attr(div, "id") == "a"
        assert [a.name for a in div.attrs_list] == ["title"]
        assert div.attrs_map["id"] == "a"
        assert get_and_remove_attr(div, "title", remove_from_map=True) == "t"
        assert "title" not in div.attrs_map
        assert get_and_remove_attr(div, "missing") is None

    @pytest.mark.parametrize(
        ("attrs", "expected"),
        [
            ({":value": "v"}, "v"),
            ({"v-bind:value": "v"}, "v"),
            ({"value": "plain"}, '"plain"'),
            ({"value": 'say "hi"'}, '"say \\"hi\\""'),
            ({"value": "café"}, '"café"'),
            ({}, None),
        ],
    )
    def test_get_binding_attr(self, tree: Tree, attrs, expected) -> None:
        div = tree.element("div", attrs=attrs)
        assert get_binding_attr(div, "value") == expected

    def test_get_binding_attr_without_static(self, tree: Tree) -> None:
        div = tree.element("div", attrs={"value": "plain"})
        assert get_binding_attr(div, "value", get_static=False) is None

    def test_prepend_modifier_marker(self) -> None:
        assert prepend_modifier_marker("!", "click", False) == "!click"
        assert prepend_modifier_marker("~", "name", True) == '_p(name,"~")'
        assert prepend_modifier_marker("&", "name", True, "mark") == 'mark(name,"&")'


class TestLoader:
    """Parser AST mappings."""

    def test_none_is_an_empty_tree(self) -> None:
        tree = tree_from_dict(None)
        assert tree.root is None
        assert len(tree) == 0

    def test_node_kinds(self) -> None:
        tree = tree_from_dict(
            {
                "type": 1,
                "tag": "div",
                "children": [
                    {"type": 3, "text": "hi"},
                    {"type": 2, "expression": "_s(msg)", "text": "{{ msg }}"},
                    {"type": 3, "text": " note ", "isComment": True},
                ],
            }
        )
        kinds = [type(child) for child in tree.root.children]
        assert kinds == [TextNode, ExpressionNode, CommentNode]
        assert tree.root.children[1].text == "{{ msg }}"
        assert all(tree.parent_of(child) is tree.root for child in tree.root.children)

    def test_scalar_fields_are_renamed(self) -> None:
        tree = tree_from_dict(
            {
                "tag": "li",
                "for": "items",
                "alias": "item",
                "key": "item.id",
                "if": "item.visible",
                "refInFor": True,
                "staticClass": '"row"',
            }
        )
        li = tree.root
        assert (li.for_source, li.alias, li.key, li.if_expr) == (
            "items",
            "item",
            "item.id",
            "item.visible",
        )
        assert li.ref_in_for is True
        assert li.static_class == '"row"'
        assert [c.block for c in li.if_conditions] == [li]

    def test_plain_is_derived_when_absent(self) -> None:
        assert tree_from_dict({"tag": "div"}).root.plain is True
        assert tree_from_dict({"tag": "div", "key": "k"}).root.plain is False
        assert tree_from_dict({"tag": "div", "plain": False}).root.plain is False

    def test_condition_blocks(self) -> None:
        tree = tree_from_dict(
            {
                "tag": "div",
                "children": [
                    {
                        "tag": "p",
                        "if": "a",
                        "ifConditions": [
                            {"exp": "a"},
                            {"exp": None, "block": {"tag": "span", "else": True}},
                        ],
                    }
                ],
            }
        )
        div = tree.root
        owner = div.children[0]
        other = owner.if_conditions[1].block
        assert owner.if_conditions[0].block is owner
        assert other.is_else is True
        assert div.children == [owner]
        assert tree.parent_of(other) is div

    def test_scoped_slots(self) -> None:
        tree = tree_from_dict(
            {
                "tag": "my-comp",
                "scopedSlots": {
                    '"a"': {"tag": "template", "slotTarget": '"a"', "slotScope": "p"},
                },
            }
        )
        host = tree.root
        assert host.plain is False
        assert host.scoped_slots['"a"'].slot_scope == "p"
        assert tree.parent_of(host.scoped_slots['"a"']) is host

    def test_events_and_directives(self) -> None:
        tree = tree_from_dict(
            {
                "tag": "div",
                "events": {
                    "click": {"value": "go"},
                    "keyup": [{"value": "a", "modifiers": {"enter": True}}, {"value": "b"}],
                },
                "directives": [{"name": "focus", "value": "x", "modifiers": {}}],
                "model": {"value": "(v)", "callback": "cb", "expression": '"v"'},
            }
        )
        div = tree.root
        assert [h.value for h in div.events["click"]] == ["go"]
        assert div.events["click"][0].modifiers is None
        assert div.events["keyup"][0].modifiers == {"enter": True}
        assert div.directives[0].raw_name == "v-focus"
        assert div.directives[0].modifiers == {}
        assert div.model.callback == "cb"

    def test_attr_lists(self) -> None:
        tree = tree_from_dict(
            {
                "tag": "div",
                "attrsList": [{"name": "id", "value": "app", "start": 5, "end": 13}],
                "attrs": [{"name": "id", "value": '"app"'}],
                "dynamicAttrs": [{"name": "k", "value": "v", "dynamic": True}],
            }
        )
        div = tree.root
        assert div.attrs_map == {"id": "app"}
        assert div.attrs_list[0].start == 5
        assert div.attrs[0].value == '"app"'
        assert div.dynamic_attrs[0].dynamic is True

    def test_unknown_node_type(self) -> None:
        with pytest.raises(TreeStructureError) as exc_info:
            tree_from_dict({"tag": "div", "children": [{"type": 7}]})
        error = exc_info.value
        assert error.code is ErrorCode.UNKNOWN_NODE_TYPE
        assert error.path == "$.children[0]"
        assert str(error) == "unknown node type 7 at $.children[0]"

    def test_missing_required_key(self) -> None:
        with pytest.raises(TreeStructureError, match="missing required key 'expression'") as exc_info:
            tree_from_dict({"tag": "div", "children": [{"type": 2}]})
        assert exc_info.value.code is ErrorCode.MISSING_FIELD
        assert exc_info.value.format_compact().startswith("R-TRE-002: ")

    def test_missing_tag(self) -> None:
        with pytest.raises(TreeStructureError, match=r"'tag' at \$"):
            tree_from_dict({"type": 1})

    def test_root_must_be_an_element(self) -> None:
        with pytest.raises(TreeStructureError, match="root node must be an element"):
            tree_from_dict({"type": 3, "text": "hi"})

    def test_children_must_be_mappings(self) -> None:
        with pytest.raises(TreeStructureError, match="expected a mapping, got str"):
            tree_from_dict({"tag": "div", "children": ["hi"]})

    def test_compile_dict(self) -> None:
        result = Environment().compile_dict(
            {
                "type": 1,
                "tag": "ul",
                "children": [
                    {
                        "type": 1,
                        "tag": "li",
                        "for": "items",
                        "alias": "item",
                        "key": "item.id",
                        "children": [{"type": 2, "expression": "_s(item)"}],
                    }
                ],
            }
        )
        assert body(result.render) == (
            "_c('ul',_l((items),function(item){return _c('li',{key:item.id},[_v(_s(item))])}),0)"
        )
