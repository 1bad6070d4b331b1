from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal, Optional


StepType = Literal["CreateFile", "CreateFolder", "EditFile", "DeleteFile", "RunScript"]
StepStatus = Literal["pending", "active", "completed"]

STEP_TYPES = ("CreateFile", "CreateFolder", "EditFile", "DeleteFile", "RunScript")

_STATUS_ALIASES = {"current": "active"}


@dataclass
class Step:
    id: int
    title: str
    type: StepType
    status: StepStatus = "pending"
    description: str = ""
    path: Optional[str] = None
    code: Optional[str] = None


def step_to_dict(step: Step) -> dict:
    data = asdict(step)
    if data["path"] is None:
        del data["path"]
    if data["code"] is None:
        del data["code"]
    return data


def step_from_dict(data: dict) -> Step:
    step_type = str(data.get("type", ""))
    if step_type not in STEP_TYPES:
        raise ValueError(f"unknown step type: {step_type!r}")
    status = str(data.get("status") or "pending").lower()
    status = _STATUS_ALIASES.get(status, status)
    if status not in ("pending", "active", "completed"):
        raise ValueError(f"unknown step status: {status!r}")
    path = data.get("path")
    code = data.get("code")
    return Step(
        id=int(data.get("id", 0)),
        title=str(data.get("title", "")),
        type=step_type,  # type: ignore[arg-type]
        status=status,  # type: ignore[arg-type]
        description=str(data.get("description") or ""),
        path=str(path) if path is not None else None,
        code=str(code) if code is not None else None,
    )
