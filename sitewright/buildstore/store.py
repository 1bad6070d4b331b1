from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List

from sitewright.util.id import new_build_id
from .models import Build, BuildEvent


class NotFoundError(KeyError):
    pass


class BuildStore:
    """Builds and their event logs, held in memory for the life of the process."""

    def __init__(self, max_events: int = 1000) -> None:
        self._builds: Dict[str, Build] = {}
        self._events: Dict[str, List[BuildEvent]] = {}
        self._subs: Dict[str, set[Callable[[BuildEvent], None]]] = {}
        self._max_events = max_events
        self._lock = threading.RLock()

    def create_build(self, prompt: str) -> Build:
        if not prompt.strip():
            raise ValueError("prompt is empty")
        build = Build(
            id=new_build_id(),
            created_at=_now(),
            updated_at=_now(),
            status="queued",
            prompt=prompt,
        )
        with self._lock:
            self._builds[build.id] = build
            self._events[build.id] = []
        self.append_event(build.id, BuildEvent(ts=_now(), build_id=build.id, type="build_created"))
        return copy.deepcopy(build)

    def update_build(self, build: Build) -> None:
        if not build:
            raise ValueError("build is nil")
        build.updated_at = _now()
        with self._lock:
            if build.id not in self._builds:
                raise NotFoundError(f"build not found: {build.id}")
            self._builds[build.id] = copy.deepcopy(build)

    def get_build(self, build_id: str) -> Build:
        with self._lock:
            build = self._builds.get(build_id)
            if not build:
                raise NotFoundError(f"build not found: {build_id}")
            return copy.deepcopy(build)

    def list_builds(self) -> List[Build]:
        with self._lock:
            builds = list(self._builds.values())
        builds.sort(key=lambda b: b.created_at, reverse=True)
        return [copy.deepcopy(build) for build in builds]

    def append_event(self, build_id: str, ev: BuildEvent) -> None:
        with self._lock:
            events = self._events.get(build_id)
            if events is None:
                raise NotFoundError(f"build not found: {build_id}")
            events.append(ev)
            if len(events) > self._max_events:
                del events[: len(events) - self._max_events]
            subs = list(self._subs.get(build_id, ()))
        for handler in subs:
            handler(ev)

    def subscribe(self, build_id: str, handler: Callable[[BuildEvent], None]) -> Callable[[], None]:
        with self._lock:
            if build_id not in self._subs:
                self._subs[build_id] = set()
            self._subs[build_id].add(handler)

        def _unsubscribe() -> None:
            with self._lock:
                if build_id in self._subs:
                    self._subs[build_id].discard(handler)

        return _unsubscribe

    def read_events(self, build_id: str, max_items: int) -> List[BuildEvent]:
        with self._lock:
            events = list(self._events.get(build_id, []))
        if max_items > 0:
            events = events[-max_items:]
        return events


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
