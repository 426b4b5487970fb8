from __future__ import annotations

"""
Unit tests for the Path Resolver and Tree Serializer.

Verifies:
1. Flatten order, path composition and top-down exclusion.
2. Serialization in both styles re-parses into the same shape.
3. Kind markers that keep extension-less files and dotted directories stable.
4. Edited names and comments that must stay on one parseable line.
5. Preview rendering with excluded and collapsed nodes.
"""

from typing import List

import pytest

from treeforge.core.parsing.structure_parser import parse_structure
from treeforge.core.tree import mutations
from treeforge.core.tree.mutations import NodeEdit
from treeforge.core.tree.paths import EXCLUDED_MARK, flatten, render_tree_lines, serialize_to_text
from treeforge.domain.node_models import DirectoryNode, FileNode, Forest, NodeKind


def shape(nodes: Forest) -> List:
    out: List = []
    for n in nodes:
        if isinstance(n, DirectoryNode):
            out.append((n.name, "d", n.comment, shape(n.children)))
        else:
            out.append((n.name, "f", n.comment))
    return out


@pytest.fixture
def forest() -> Forest:
    makefile = FileNode(id="mk", name="Makefile", depth=2, comment="build")
    release = DirectoryNode(id="rel", name="v1.2", depth=2)
    src = DirectoryNode(id="src", name="src", depth=1, children=(makefile, release))
    readme = FileNode(id="readme", name="README.md", depth=1)
    app = DirectoryNode(id="app", name="app", depth=0, comment="root dir", children=(src, readme))
    extra = DirectoryNode(id="extra", name="extra", depth=0)
    return app, extra


# -----------------------------------------------------------------------------
# Flatten
# -----------------------------------------------------------------------------
def test_flatten_paths_and_order(forest: Forest) -> None:
    """TC-01: Paths join names with '/' in pre-order; roots stand alone."""
    items = [(i.path, i.kind) for i in flatten(forest)]

    assert items == [
        ("app", NodeKind.DIRECTORY),
        ("app/src", NodeKind.DIRECTORY),
        ("app/src/Makefile", NodeKind.FILE),
        ("app/src/v1.2", NodeKind.DIRECTORY),
        ("app/README.md", NodeKind.FILE),
        ("extra", NodeKind.DIRECTORY),
    ]


def test_flatten_excludes_unselected_subtree(forest: Forest) -> None:
    """TC-02: An unselected directory hides descendants whose own flag is still set."""
    forest = mutations.set_selected(forest, "src", False)
    paths = [i.path for i in flatten(forest)]

    assert paths == ["app", "app/README.md", "extra"]
    assert mutations.find_node(forest, "mk").selected is True


def test_flatten_empty_forest() -> None:
    assert flatten(()) == []


# -----------------------------------------------------------------------------
# Serialization
# -----------------------------------------------------------------------------
@pytest.mark.parametrize("style", ["indent", "tree"])
def test_serialize_round_trip(forest: Forest, style: str) -> None:
    """TC-03: Re-parsing serialized text yields the same names, kinds and comments."""
    text = serialize_to_text(forest, style=style)
    assert shape(parse_structure(text)) == shape(forest)


@pytest.mark.parametrize("style", ["indent", "tree"])
def test_flatten_agrees_after_round_trip(sample_structure: str, style: str) -> None:
    """Flatten of the re-parsed text yields the same (path, kind) pairs."""
    forest = parse_structure(sample_structure)
    reparsed = parse_structure(serialize_to_text(forest, style=style))

    assert [(i.path, i.kind) for i in flatten(reparsed)] == [(i.path, i.kind) for i in flatten(forest)]


def test_selection_cascade_drives_flatten(forest: Forest) -> None:
    """select_all includes every node; deselect_all includes none."""
    assert len(flatten(mutations.select_all(forest))) == mutations.count_nodes(forest)
    assert flatten(mutations.deselect_all(forest)) == []


@pytest.mark.parametrize("style", ["indent", "tree"])
@pytest.mark.parametrize("name, kind", [
    ("+page.svelte", NodeKind.FILE),
    ("|notes.txt", NodeKind.FILE),
    ("my file.txt", NodeKind.FILE),
    ("LICENSE", NodeKind.FILE),
    ("a*", NodeKind.DIRECTORY),
    ("build.d", NodeKind.DIRECTORY),
])
def test_edited_names_survive_round_trip(forest: Forest, style: str, name: str, kind: NodeKind) -> None:
    """Names accepted by edit_node re-parse with the same path and kind."""
    edited, error = mutations.edit_node(forest, "readme", NodeEdit(name=name, kind=kind, comment="note"))
    assert error is None

    reparsed = parse_structure(serialize_to_text(edited, style=style))
    assert [(i.path, i.kind) for i in flatten(reparsed)] == [(i.path, i.kind) for i in flatten(edited)]
    assert shape(reparsed) == shape(edited)


@pytest.mark.parametrize("name", ["C#.txt", "glob**", "├x", "|-- x"])
def test_names_with_structure_markers_are_refused(forest: Forest, name: str) -> None:
    """Markers the parser would consume are rejected before they reach the forest."""
    for kind in (NodeKind.FILE, NodeKind.DIRECTORY):
        edited, error = mutations.edit_node(forest, "readme", NodeEdit(name=name, kind=kind))
        assert error
        assert edited is forest


@pytest.mark.parametrize("style", ["indent", "tree"])
def test_multiline_comment_stays_on_one_line(forest: Forest, style: str) -> None:
    """Line breaks in an edited comment never become extra structure lines."""
    edited, _ = mutations.edit_node(
        forest, "readme", NodeEdit(name="README.md", kind=NodeKind.FILE, comment="first\nsecond\n  line"),
    )
    assert mutations.find_node(edited, "readme").comment == "first second line"

    text = serialize_to_text(edited, style=style)
    assert len(text.splitlines()) == mutations.count_nodes(edited)
    assert shape(parse_structure(text)) == shape(edited)


def test_raw_comment_with_newline_is_flattened() -> None:
    forest = (DirectoryNode(id="a", name="a", comment="x\ny"),)
    assert serialize_to_text(forest) == "a/ # x y\n"


def test_file_as_first_root_reads_back_as_directory() -> None:
    """The first line always parses as a directory; later file roots keep their kind."""
    forest = (
        FileNode(id="a", name="notes.txt"),
        FileNode(id="b", name="LICENSE"),
    )
    reparsed = parse_structure(serialize_to_text(forest))

    assert shape(reparsed) == [("notes.txt", "d", None, []), ("LICENSE", "f", None)]


def test_serialize_indent_format(forest: Forest) -> None:
    """TC-04: Two spaces per level, '/' on directories, '**' on extension-less files."""
    assert serialize_to_text(forest, style="indent") == (
        "app/ # root dir\n"
        "  src/\n"
        "    Makefile** # build\n"
        "    v1.2/\n"
        "  README.md\n"
        "extra/\n"
    )


def test_serialize_tree_format(forest: Forest) -> None:
    """TC-05: Connector style draws branches under each root."""
    assert serialize_to_text(forest, style="tree") == (
        "app/ # root dir\n"
        "├── src/\n"
        "│   ├── Makefile** # build\n"
        "│   └── v1.2/\n"
        "└── README.md\n"
        "extra/\n"
    )


def test_serialize_skips_excluded_subtrees(forest: Forest) -> None:
    """TC-06: Serialization follows the same exclusion rule as flatten."""
    forest = mutations.set_selected(forest, "src", False)
    text = serialize_to_text(forest, style="indent")

    assert "Makefile" not in text and "src" not in text
    assert shape(parse_structure(text)) == [
        ("app", "d", "root dir", [("README.md", "f", None)]),
        ("extra", "d", None, []),
    ]


def test_serialize_empty_selection() -> None:
    assert serialize_to_text(()) == ""
    assert serialize_to_text((DirectoryNode(id="a", name="a", selected=False),)) == ""


def test_serialize_unknown_style_raises(forest: Forest) -> None:
    with pytest.raises(ValueError):
        serialize_to_text(forest, style="xml")


# -----------------------------------------------------------------------------
# Preview rendering
# -----------------------------------------------------------------------------
def test_render_tree_lines_marks_excluded(forest: Forest) -> None:
    """TC-07: Excluded nodes stay visible with a marker in previews."""
    forest = mutations.set_selected(forest, "readme", False)
    lines = render_tree_lines(forest)

    assert "└── README.md" + EXCLUDED_MARK in lines
    assert len(lines) == 6


def test_render_tree_lines_hides_collapsed_children(forest: Forest) -> None:
    """TC-08: only_expanded stops at collapsed directories."""
    forest = mutations.toggle_expanded(forest, "src")
    lines = render_tree_lines(forest, only_expanded=True)

    assert not any("Makefile" in line for line in lines)
    assert "├── src/" in lines


def test_render_tree_lines_can_drop_excluded(forest: Forest) -> None:
    """TC-09: include_unselected=False mirrors serialization."""
    forest = mutations.set_selected(forest, "extra", False)
    lines = render_tree_lines(forest, include_unselected=False)
    assert not any(line.startswith("extra") for line in lines)
