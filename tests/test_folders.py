"""
BookmarkHub v1 - Folder Hierarchy Tests
"""

import pytest

from shared.errors import CycleError, ValidationError
from shared.folders import FolderHierarchy, FolderSelection, SelectionMode
from shared.models import FolderNode


def folder(folder_id, parent_id=None, collection_id="col_1", name=None) -> FolderNode:
    return FolderNode(
        id=folder_id,
        name=name or folder_id,
        collection_id=collection_id,
        parent_id=parent_id,
    )


def ids(folders) -> list[str]:
    return [f.id for f in folders]


def tree_ids(forest) -> list[str]:
    return [node.folder.id for root in forest for node in root.walk()]


class TestRootsAndChildren:
    """Tests for root detection and child lookup."""

    def test_research_and_papers(self):
        """A child created under Research is its only child; Research is the only root."""
        hierarchy = FolderHierarchy()
        hierarchy.insert(folder("Research"))
        hierarchy.insert(folder("Papers", parent_id="Research"))

        assert ids(hierarchy.children_of("Research")) == ["Papers"]
        assert ids(hierarchy.roots()) == ["Research"]

    def test_dangling_parent_is_root(self):
        """A folder whose parent was deleted elsewhere stays visible as a root."""
        hierarchy = FolderHierarchy([folder("a"), folder("orphan", parent_id="deleted")])

        assert ids(hierarchy.roots()) == ["a", "orphan"]

    def test_parent_in_other_collection_is_root(self):
        hierarchy = FolderHierarchy([
            folder("a", collection_id="col_1"),
            folder("b", parent_id="a", collection_id="col_2"),
        ])

        assert ids(hierarchy.roots()) == ["a", "b"]
        assert hierarchy.children_of("a") == []

    def test_children_keep_input_order(self):
        hierarchy = FolderHierarchy([
            folder("root"),
            folder("z", parent_id="root"),
            folder("a", parent_id="root"),
        ])

        assert ids(hierarchy.children_of("root")) == ["z", "a"]

    def test_children_of_unknown_id(self):
        assert FolderHierarchy([folder("a")]).children_of("nope") == []

    def test_empty_hierarchy(self):
        hierarchy = FolderHierarchy()

        assert hierarchy.roots() == []
        assert hierarchy.build_tree() == []


class TestTraversal:
    """Tests for ancestors, descendants, paths and tree building."""

    @pytest.fixture
    def hierarchy(self) -> FolderHierarchy:
        return FolderHierarchy([
            folder("research", name="Research"),
            folder("papers", parent_id="research", name="Papers"),
            folder("ml", parent_id="papers", name="ML"),
            folder("notes", parent_id="research", name="Notes"),
            folder("home", name="Home"),
        ])

    def test_ancestors_of(self, hierarchy):
        assert ids(hierarchy.ancestors_of("ml")) == ["papers", "research"]
        assert hierarchy.ancestors_of("research") == []

    def test_descendants_of_depth_first(self, hierarchy):
        assert ids(hierarchy.descendants_of("research")) == ["papers", "ml", "notes"]

    def test_path_of(self, hierarchy):
        assert hierarchy.path_of("ml") == "Research/Papers/ML"
        assert hierarchy.path_of("missing") == ""

    def test_build_tree_structure(self, hierarchy):
        forest = hierarchy.build_tree()

        assert [root.folder.id for root in forest] == ["research", "home"]
        research = forest[0]
        assert [c.folder.id for c in research.children] == ["papers", "notes"]
        assert research.children[0].children[0].depth == 2
        assert research.to_dict()["children"][0]["children"][0]["name"] == "ML"

    def test_build_tree_contains_every_folder_once(self, hierarchy):
        assert sorted(tree_ids(hierarchy.build_tree())) == sorted(ids(hierarchy))


class TestCycles:
    """Tests for cycle safety."""

    def test_insert_self_parent_raises(self):
        hierarchy = FolderHierarchy()

        with pytest.raises(CycleError):
            hierarchy.insert(folder("a", parent_id="a"))
        assert len(hierarchy) == 0

    def test_move_under_descendant_raises_and_keeps_set(self):
        """Moving a folder below its own grandchild is rejected."""
        hierarchy = FolderHierarchy([
            folder("a"),
            folder("b", parent_id="a"),
            folder("c", parent_id="b"),
        ])

        with pytest.raises(CycleError):
            hierarchy.insert(folder("a", parent_id="c"))

        assert hierarchy.get("a").parent_id is None
        assert ids(hierarchy.roots()) == ["a"]
        assert len(hierarchy) == 3

    def test_check_insert_does_not_modify(self):
        hierarchy = FolderHierarchy([folder("a"), folder("b", parent_id="a")])

        hierarchy.check_insert(folder("c", parent_id="b"))
        with pytest.raises(CycleError):
            hierarchy.check_insert(folder("a", parent_id="b"))

        assert "c" not in hierarchy
        assert hierarchy.get("a").parent_id is None

    def test_move_to_other_branch(self):
        hierarchy = FolderHierarchy([folder("a"), folder("b"), folder("c", parent_id="a")])

        hierarchy.insert(folder("c", parent_id="b"))

        assert ids(hierarchy.children_of("b")) == ["c"]
        assert hierarchy.children_of("a") == []

    def test_existing_cycle_is_broken_for_display(self):
        """A cycle loaded from storage still yields a forest with every folder."""
        hierarchy = FolderHierarchy([
            folder("x", parent_id="y"),
            folder("y", parent_id="x"),
            folder("z", parent_id="x"),
        ])

        forest = hierarchy.build_tree()

        assert ids(hierarchy.roots()) == ["x"]
        assert sorted(tree_ids(forest)) == ["x", "y", "z"]
        assert ids(hierarchy.children_of("x")) == ["y", "z"]

    def test_insert_next_to_existing_cycle(self):
        """An unrelated insert terminates even if the set holds a cycle."""
        hierarchy = FolderHierarchy([folder("x", parent_id="y"), folder("y", parent_id="x")])

        hierarchy.insert(folder("new", parent_id="x"))

        assert "new" in hierarchy

    def test_no_folder_is_its_own_ancestor(self):
        hierarchy = FolderHierarchy([
            folder("a", parent_id="c"),
            folder("b", parent_id="a"),
            folder("c", parent_id="b"),
            folder("d", parent_id="c"),
        ])

        for node in hierarchy:
            assert node.id not in ids(hierarchy.ancestors_of(node.id))


class TestValidation:
    """Tests for folder name rules."""

    @pytest.mark.parametrize("name", ["", "   ", "x" * 51])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError):
            FolderHierarchy().insert(FolderNode(id="a", name=name, collection_id="col_1"))

    def test_fifty_character_name_is_allowed(self):
        hierarchy = FolderHierarchy()
        hierarchy.insert(FolderNode(id="a", name="x" * 50, collection_id="col_1"))

        assert "a" in hierarchy


class TestFolderSelection:
    """Tests for the three-way folder filter."""

    def test_all_matches_everything(self):
        selection = FolderSelection.all_folders()

        assert selection.matches(None)
        assert selection.matches("a")

    def test_root_matches_only_unfiled(self):
        selection = FolderSelection.collection_root()

        assert selection.matches(None)
        assert not selection.matches("a")

    def test_folder_matches_only_that_folder(self):
        selection = FolderSelection.folder("a")

        assert selection.mode is SelectionMode.FOLDER
        assert selection.matches("a")
        assert not selection.matches("b")
        assert not selection.matches(None)

    def test_selections_are_distinct(self):
        assert FolderSelection.all_folders() != FolderSelection.collection_root()

    def test_folder_selection_needs_id(self):
        with pytest.raises(ValidationError):
            FolderSelection(SelectionMode.FOLDER)
