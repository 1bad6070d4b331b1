from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Tuple


def load_env_file(path: str) -> int:
    """Export ``KEY=value`` lines from ``path`` without clobbering the environment.

    Returns how many variables were set. A missing file is not an error.
    """
    if not path:
        return 0
    file_path = Path(path)
    if not file_path.is_file():
        return 0
    count = 0
    for raw in file_path.read_text(encoding="utf-8").splitlines():
        entry = _parse_line(raw)
        if entry is None:
            continue
        key, value = entry
        if key in os.environ:
            continue
        os.environ[key] = value
        count += 1
    return count


def _parse_line(raw: str) -> Optional[Tuple[str, str]]:
    line = raw.strip()
    if not line or line.startswith("#"):
        return None
    if line.startswith("export "):
        line = line[len("export ") :].strip()
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value
