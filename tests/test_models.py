"""Tests for cart items and tree construction."""

from __future__ import annotations

import pytest

from sharing_cart.models import CartItem, DirectoryNode, LeafNode, TreeShapeError, build_tree, from_mapping


class TestCartItem:
    @pytest.mark.parametrize(("fileid", "copying"), [(None, True), (0, True), (-3, True), (1, False), (42, False)])
    def test_is_copying(self, fileid, copying):
        assert CartItem(id=1, modname="forum", fileid=fileid).is_copying is copying

    def test_from_dict_ignores_unknown_keys(self):
        item = CartItem.from_dict(
            {
                "id": 3,
                "modname": "quiz",
                "fileid": "12",
                "coursefullname": None,
                "uninstalled_plugin": 0,
                "userid": 99,
            }
        )
        assert item == CartItem(id=3, modname="quiz", fileid=12, coursefullname="", uninstalled_plugin=False)

    def test_from_dict_requires_id(self):
        with pytest.raises(TreeShapeError):
            CartItem.from_dict({"modname": "quiz"})


class TestBuildTree:
    def test_groups_by_path_in_first_seen_order(self):
        first = CartItem(id=1, modname="forum", tree="Course B/Section 2")
        second = CartItem(id=2, modname="quiz", tree="Course A")
        third = CartItem(id=3, modname="page", tree="Course B")
        root = build_tree([first, second, third])

        assert [child.name for child in root.children] == ["Course B", "Course A"]
        course_b = root.children[0]
        assert isinstance(course_b.children[0], DirectoryNode)
        assert course_b.children[0].leaf_items() == [first]
        assert isinstance(course_b.children[1], LeafNode)
        assert course_b.leaf_items() == [third]

    def test_empty_segments_are_ignored(self):
        item = CartItem(id=1, modname="forum", tree="/Course A//")
        root = build_tree([item])
        assert [child.name for child in root.children] == ["Course A"]
        assert root.children[0].leaf_items() == [item]

    def test_root_items(self):
        item = CartItem(id=1, modname="forum")
        root = build_tree([item])
        assert root.children == [LeafNode(items=[item])]


class TestFromMapping:
    def test_converts_nested_shape(self):
        tree = {
            "Course A": {"": [{"id": 1, "modname": "forum"}]},
            "": [CartItem(id=2, modname="quiz")],
        }
        root = from_mapping(tree)
        assert root.children[0].name == "Course A"
        assert root.children[0].leaf_items()[0].id == 1
        assert root.leaf_items() == [CartItem(id=2, modname="quiz")]

    def test_rejects_non_mapping_directory(self):
        with pytest.raises(TreeShapeError, match="Course A"):
            from_mapping({"Course A": "oops"})

    def test_rejects_non_sequence_items(self):
        with pytest.raises(TreeShapeError):
            from_mapping({"": "forum"})

    def test_rejects_unknown_item_type(self):
        with pytest.raises(TreeShapeError):
            from_mapping({"": [42]})
