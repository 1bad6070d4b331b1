from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from sitewright.project.tree import FileItem
from sitewright.steps.models import Step


BuildStatus = Literal["queued", "running", "succeeded", "failed"]


@dataclass
class Build:
    id: str
    created_at: str
    updated_at: str
    status: BuildStatus
    prompt: str
    template: Optional[str] = None
    files: List[FileItem] = field(default_factory=list)
    steps: List[Step] = field(default_factory=list)
    selected_path: Optional[str] = None
    error: Optional[str] = None


@dataclass
class BuildEvent:
    ts: str
    build_id: str
    type: str
    message: Optional[str] = None
    data: Optional[Dict[str, object]] = None
