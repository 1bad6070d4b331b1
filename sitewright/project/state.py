from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import List, Optional

from sitewright.steps.models import Step
from .tree import FileItem, PathCollisionError, ProjectTree


@dataclass
class MergeResult:
    files: List[FileItem]
    steps: List[Step]
    selected_path: Optional[str] = None
    rejected: List[int] = field(default_factory=list)


def next_step_id(steps: List[Step]) -> int:
    if not steps:
        return 1
    return max(step.id for step in steps) + 1


class ProjectState:
    """Running file tree plus the step list that builds it.

    Steps move pending -> active -> completed one at a time, lowest id first,
    and are folded into the tree as they leave ``active``.
    """

    def __init__(self, tree: Optional[ProjectTree] = None, steps: Optional[List[Step]] = None) -> None:
        self.tree = tree if tree is not None else ProjectTree()
        self.steps: List[Step] = sorted(steps or [], key=lambda step: step.id)
        self.selected_path: Optional[str] = None
        self.rejected: List[int] = []

    def active_step(self) -> Optional[Step]:
        return next((step for step in self.steps if step.status == "active"), None)

    def merge(self, batch: List[Step]) -> MergeResult:
        next_id = next_step_id(self.steps)
        for offset, step in enumerate(sorted(batch, key=lambda item: item.id)):
            step.id = next_id + offset
            step.status = "pending"
            self.steps.append(step)
        self.rejected = []
        selected = self.advance()
        return MergeResult(
            files=self.tree.items(),
            steps=self.steps,
            selected_path=selected,
            rejected=list(self.rejected),
        )

    def advance(self) -> Optional[str]:
        selected: Optional[str] = None
        while any(step.status in ("pending", "active") for step in self.steps):
            path = self.step_once()
            if path:
                selected = path
        return selected

    def step_once(self) -> Optional[str]:
        selected: Optional[str] = None
        current = self.active_step()
        if current is not None:
            self.fold(current)
            current.status = "completed"
            if current.path:
                selected = current.path
        pending = next((step for step in self.steps if step.status == "pending"), None)
        if pending is not None:
            pending.status = "active"
            if pending.path:
                selected = pending.path
        if selected:
            self.selected_path = selected
        return selected

    def fold(self, step: Step) -> None:
        if step.type != "CreateFile" or not step.path or step.code is None:
            return
        try:
            self.tree.upsert_file(step.path, step.code)
        except PathCollisionError as err:
            print("fold: step rejected", {"step_id": step.id, "path": step.path, "err": str(err)})
            self.rejected.append(step.id)
        except ValueError as err:
            print("fold: step ignored", {"step_id": step.id, "err": str(err)})


def merge_steps(files: List[FileItem], steps: List[Step], batch: List[Step]) -> MergeResult:
    state = ProjectState(
        ProjectTree.from_items(copy.deepcopy(files)),
        copy.deepcopy(steps),
    )
    return state.merge(copy.deepcopy(batch))
