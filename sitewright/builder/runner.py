from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from sitewright.buildstore import BuildEvent, BuildStore
from sitewright.project import ProjectState
from .session import Builder, TextProducer


class BuildRunner:
    """Runs builds on background threads and mirrors their progress into the store."""

    def __init__(self, store: BuildStore, producer: TextProducer) -> None:
        self._store = store
        self._builder = Builder(producer)
        self._running: set[str] = set()
        self._lock = threading.Lock()

    def start_build(self, build_id: str) -> None:
        with self._lock:
            if build_id in self._running:
                return
            self._running.add(build_id)
        thread = threading.Thread(target=self._execute, args=(build_id,), daemon=True)
        thread.start()

    def _execute(self, build_id: str) -> None:
        try:
            self.run_build(build_id)
        finally:
            with self._lock:
                self._running.discard(build_id)

    def run_build(self, build_id: str) -> None:
        build = self._store.get_build(build_id)
        build.status = "running"
        self._store.update_build(build)
        self._store.append_event(build_id, _event(build_id, "build_started", "build started"))

        state = ProjectState()

        def on_event(event_type: str, data: Dict[str, object]) -> None:
            self._store.append_event(build_id, _event(build_id, event_type, data=data))
            if event_type == "template_selected":
                build.template = str(data.get("template", ""))
            if event_type == "steps_merged":
                build.files = state.tree.items()
                build.steps = state.steps
                build.selected_path = state.selected_path
                self._store.update_build(build)

        try:
            self._builder.build(build.prompt, state=state, on_event=on_event)
        except Exception as err:
            # already-folded template files stay on the build
            build.files = state.tree.items()
            build.steps = state.steps
            build.selected_path = state.selected_path
            build.status = "failed"
            build.error = str(err)
            self._store.update_build(build)
            return

        build.status = "succeeded"
        build.error = None
        self._store.update_build(build)
        self._store.append_event(build_id, _event(build_id, "build_succeeded", "build completed successfully"))


def _event(
    build_id: str,
    event_type: str,
    message: Optional[str] = None,
    data: Optional[Dict[str, object]] = None,
) -> BuildEvent:
    return BuildEvent(
        ts=datetime.now(timezone.utc).isoformat(),
        build_id=build_id,
        type=event_type,
        message=message,
        data=data,
    )
