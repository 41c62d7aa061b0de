"""
BookmarkHub v1 - Folder Hierarchy Model

In-memory view over the folders of a collection. Parent links are resolved
on every call from the current folder set, so the view never holds a cache
that could go stale.

A folder is a root when its parent_id is None or points at a folder that is
not in the set (deleted out of band, or living in another collection).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

from .errors import CycleError, ValidationError
from .models import FolderNode

logger = logging.getLogger(__name__)

MAX_FOLDER_NAME_LENGTH = 50
PATH_SEPARATOR = "/"


def validate_folder_name(name: Optional[str]) -> str:
    """
    Check a folder name and return it stripped.

    Raises:
        ValidationError: If the name is empty or longer than 50 characters
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Folder name must not be empty")
    if len(cleaned) > MAX_FOLDER_NAME_LENGTH:
        raise ValidationError(
            f"Folder name must be at most {MAX_FOLDER_NAME_LENGTH} characters",
            detail=cleaned,
        )
    return cleaned


@dataclass
class FolderTreeNode:
    """One folder in a built tree, with its nested children"""
    folder: FolderNode
    depth: int = 0
    children: list["FolderTreeNode"] = field(default_factory=list)

    def walk(self) -> Iterator["FolderTreeNode"]:
        """Pre-order traversal of this subtree"""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict:
        return {
            "id": self.folder.id,
            "name": self.folder.name,
            "depth": self.depth,
            "children": [child.to_dict() for child in self.children],
        }


class SelectionMode(str, Enum):
    ALL = "all"
    ROOT = "root"
    FOLDER = "folder"


@dataclass(frozen=True)
class FolderSelection:
    """
    Which folder a view is filtered to.

    ALL means no folder filter at all, ROOT selects the collection root
    itself (items outside any folder) and FOLDER selects one folder id.

    This is a model type for view layers. Bookmark records do not carry a
    folder id yet, so no route filters by it.
    """
    mode: SelectionMode = SelectionMode.ALL
    folder_id: Optional[str] = None

    def __post_init__(self):
        if self.mode is SelectionMode.FOLDER and not self.folder_id:
            raise ValidationError("A folder selection needs a folder id")
        if self.mode is not SelectionMode.FOLDER and self.folder_id is not None:
            raise ValidationError(f"Selection mode {self.mode.value} takes no folder id")

    @classmethod
    def all_folders(cls) -> "FolderSelection":
        return cls(SelectionMode.ALL)

    @classmethod
    def collection_root(cls) -> "FolderSelection":
        return cls(SelectionMode.ROOT)

    @classmethod
    def folder(cls, folder_id: str) -> "FolderSelection":
        return cls(SelectionMode.FOLDER, folder_id)

    def matches(self, folder_id: Optional[str]) -> bool:
        """Whether an item stored in folder_id (None = no folder) is selected"""
        if self.mode is SelectionMode.ALL:
            return True
        if self.mode is SelectionMode.ROOT:
            return folder_id is None
        return folder_id == self.folder_id


class FolderHierarchy:
    """
    Folder forest for one collection.

    Folders keep their input order; children and roots are reported in that
    order. Inserting a folder whose id already exists moves that folder.
    """

    def __init__(self, folders: Iterable[FolderNode] = ()):
        self._folders: dict[str, FolderNode] = {}
        for folder in folders:
            self._folders[folder.id] = folder

    def __len__(self) -> int:
        return len(self._folders)

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self._folders

    def __iter__(self) -> Iterator[FolderNode]:
        return iter(list(self._folders.values()))

    def get(self, folder_id: str) -> Optional[FolderNode]:
        return self._folders.get(folder_id)

    def _resolved_parent(
        self, folder: FolderNode, folders: dict[str, FolderNode]
    ) -> Optional[str]:
        parent = folders.get(folder.parent_id) if folder.parent_id is not None else None
        if parent is None or parent.collection_id != folder.collection_id:
            return None
        return parent.id

    def _parent_map(self) -> dict[str, Optional[str]]:
        """
        Effective parent of every folder.

        A set loaded from storage may already contain a cycle. The earliest
        folder of such a cycle is treated as a root so nothing disappears.
        """
        parents = {
            folder_id: self._resolved_parent(folder, self._folders)
            for folder_id, folder in self._folders.items()
        }
        position = {folder_id: i for i, folder_id in enumerate(self._folders)}

        settled: set[str] = set()
        for start in self._folders:
            path: list[str] = []
            on_path: set[str] = set()
            current: Optional[str] = start
            while current is not None and current not in settled and current not in on_path:
                path.append(current)
                on_path.add(current)
                current = parents[current]

            if current is not None and current in on_path:
                cycle = path[path.index(current):]
                breaker = min(cycle, key=position.__getitem__)
                logger.warning(
                    f"Folder cycle detected through {cycle}; treating {breaker} as a root"
                )
                parents[breaker] = None

            settled.update(path)

        return parents

    def roots(self) -> list[FolderNode]:
        """Folders with no resolvable parent, in input order"""
        parents = self._parent_map()
        return [f for f in self._folders.values() if parents[f.id] is None]

    def children_of(self, folder_id: str) -> list[FolderNode]:
        """Direct children of a folder, found by a scan of the whole set"""
        parents = self._parent_map()
        return [f for f in self._folders.values() if parents[f.id] == folder_id]

    def ancestors_of(self, folder_id: str) -> list[FolderNode]:
        """Ancestors from the direct parent up to the root"""
        if folder_id not in self._folders:
            return []
        parents = self._parent_map()
        ancestors = []
        current = parents[folder_id]
        while current is not None:
            ancestors.append(self._folders[current])
            current = parents[current]
        return ancestors

    def descendants_of(self, folder_id: str) -> list[FolderNode]:
        """All folders below folder_id, depth first"""
        parents = self._parent_map()
        result: list[FolderNode] = []

        def visit(parent_id: str) -> None:
            for folder in self._folders.values():
                if parents[folder.id] == parent_id:
                    result.append(folder)
                    visit(folder.id)

        visit(folder_id)
        return result

    def path_of(self, folder_id: str) -> str:
        """Slash-joined names from the root down to the folder"""
        folder = self._folders.get(folder_id)
        if folder is None:
            return ""
        names = [a.name for a in reversed(self.ancestors_of(folder_id))]
        names.append(folder.name)
        return PATH_SEPARATOR.join(names)

    def build_tree(self) -> list[FolderTreeNode]:
        """
        Build the folder forest as plain data for a renderer to walk.

        Returns:
            One FolderTreeNode per root; every folder appears exactly once
        """
        parents = self._parent_map()
        children: dict[Optional[str], list[FolderNode]] = {}
        for folder in self._folders.values():
            children.setdefault(parents[folder.id], []).append(folder)

        def build(folder: FolderNode, depth: int) -> FolderTreeNode:
            return FolderTreeNode(
                folder=folder,
                depth=depth,
                children=[build(child, depth + 1) for child in children.get(folder.id, [])],
            )

        return [build(root, 0) for root in children.get(None, [])]

    def insert(self, node: FolderNode) -> FolderNode:
        """
        Add a folder, or move an existing one when its id is already present.

        Raises:
            ValidationError: If the folder name is invalid
            CycleError: If the folder would become its own ancestor; the
                hierarchy is left unchanged
        """
        self._folders = self._checked(node)
        return node

    def check_insert(self, node: FolderNode) -> None:
        """Raise as insert() would, without changing the hierarchy"""
        self._checked(node)

    def _checked(self, node: FolderNode) -> dict[str, FolderNode]:
        validate_folder_name(node.name)

        if node.parent_id == node.id:
            raise CycleError(f"Folder {node.id} cannot be its own parent", detail=node.id)

        candidate = dict(self._folders)
        candidate[node.id] = node

        seen: set[str] = set()
        current = self._resolved_parent(node, candidate)
        while current is not None and current not in seen:
            if current == node.id:
                raise CycleError(
                    f"Moving folder {node.id} under {node.parent_id} would create a cycle",
                    detail=node.id,
                )
            seen.add(current)
            current = self._resolved_parent(candidate[current], candidate)

        return candidate
