from .models import Build, BuildEvent, BuildStatus
from .store import BuildStore, NotFoundError

__all__ = [
    "Build",
    "BuildEvent",
    "BuildStatus",
    "BuildStore",
    "NotFoundError",
]
