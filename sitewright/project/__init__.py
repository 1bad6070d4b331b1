from .state import MergeResult, ProjectState, merge_steps, next_step_id
from .tree import (
    FileItem,
    FileItemType,
    PathCollisionError,
    ProjectTree,
    item_from_dict,
    item_to_dict,
    normalize_path,
)

__all__ = [
    "MergeResult",
    "ProjectState",
    "merge_steps",
    "next_step_id",
    "FileItem",
    "FileItemType",
    "PathCollisionError",
    "ProjectTree",
    "item_from_dict",
    "item_to_dict",
    "normalize_path",
]
