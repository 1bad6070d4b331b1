from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Literal, Optional


FileItemType = Literal["file", "folder"]


class PathCollisionError(ValueError):
    pass


@dataclass
class FileItem:
    name: str
    path: str
    type: FileItemType
    content: Optional[str] = None
    children: Optional[List["FileItem"]] = None


def normalize_path(path: str) -> str:
    parts = [part for part in path.replace("\\", "/").split("/") if part and part != "."]
    return "/".join(parts)


class ProjectTree:
    """Folder/file hierarchy with an index from path to node.

    Roots and every folder's children keep insertion order. Ancestor folders
    are always created before the node that needs them and nothing is ever
    removed.
    """

    def __init__(self) -> None:
        self._roots: List[FileItem] = []
        self._index: Dict[str, FileItem] = {}

    @classmethod
    def from_items(cls, items: List[FileItem]) -> "ProjectTree":
        tree = cls()
        for item in items:
            tree._adopt(item, tree._roots)
        return tree

    @classmethod
    def from_list(cls, data: List[dict]) -> "ProjectTree":
        return cls.from_items([item_from_dict(entry) for entry in data or []])

    def _adopt(self, item: FileItem, siblings: List[FileItem]) -> None:
        if item.path in self._index:
            raise ValueError(f"duplicate path: {item.path}")
        siblings.append(item)
        self._index[item.path] = item
        if item.type == "folder":
            children = item.children or []
            item.children = []
            for child in children:
                self._adopt(child, item.children)

    def items(self) -> List[FileItem]:
        return self._roots

    def get(self, path: str) -> Optional[FileItem]:
        return self._index.get(normalize_path(path))

    def contains(self, path: str) -> bool:
        return normalize_path(path) in self._index

    def __len__(self) -> int:
        return len(self._index)

    def walk(self) -> Iterator[FileItem]:
        stack = list(reversed(self._roots))
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def files(self) -> List[FileItem]:
        return [node for node in self.walk() if node.type == "file"]

    def ensure_folder(self, path: str) -> FileItem:
        parts = normalize_path(path).split("/")
        if parts == [""]:
            raise ValueError("path is empty")
        for depth in range(len(parts)):
            prefix = "/".join(parts[: depth + 1])
            existing = self._index.get(prefix)
            if existing is not None and existing.type != "folder":
                raise PathCollisionError(f"{prefix} is a file")
        siblings = self._roots
        node: Optional[FileItem] = None
        for depth in range(len(parts)):
            prefix = "/".join(parts[: depth + 1])
            node = self._index.get(prefix)
            if node is None:
                node = FileItem(name=parts[depth], path=prefix, type="folder", children=[])
                siblings.append(node)
                self._index[prefix] = node
            if node.children is None:
                node.children = []
            siblings = node.children
        assert node is not None
        return node

    def upsert_file(self, path: str, content: str) -> FileItem:
        full = normalize_path(path)
        if not full:
            raise ValueError("path is empty")
        existing = self._index.get(full)
        if existing is not None:
            if existing.type != "file":
                raise PathCollisionError(f"{full} is a folder")
            existing.content = content.strip()
            return existing
        parent, _, name = full.rpartition("/")
        siblings = self.ensure_folder(parent).children if parent else self._roots
        node = FileItem(name=name, path=full, type="file", content=content.strip())
        assert siblings is not None
        siblings.append(node)
        self._index[full] = node
        return node

    def to_list(self) -> List[dict]:
        return [item_to_dict(item) for item in self._roots]


def item_to_dict(item: FileItem) -> dict:
    data: dict = {"name": item.name, "path": item.path, "type": item.type}
    if item.type == "file":
        data["content"] = item.content or ""
    else:
        data["children"] = [item_to_dict(child) for child in item.children or []]
    return data


def item_from_dict(data: dict) -> FileItem:
    item_type = data.get("type")
    if item_type not in ("file", "folder"):
        raise ValueError(f"unknown item type: {item_type!r}")
    path = normalize_path(str(data.get("path", "")))
    if not path:
        raise ValueError("item path is empty")
    if item_type == "file":
        return FileItem(
            name=str(data.get("name") or path.rsplit("/", 1)[-1]),
            path=path,
            type="file",
            content=str(data.get("content") or ""),
        )
    return FileItem(
        name=str(data.get("name") or path.rsplit("/", 1)[-1]),
        path=path,
        type="folder",
        children=[item_from_dict(child) for child in data.get("children") or []],
    )
