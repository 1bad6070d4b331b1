from __future__ import annotations

import base64
import secrets
from datetime import datetime, timezone


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dt%H%M%Sz")


def _new_id(prefix: str) -> str:
    enc = base64.b32encode(secrets.token_bytes(10)).decode("ascii").lower().rstrip("=")
    return f"{prefix}{_timestamp()}_{enc}"


def new_build_id() -> str:
    return _new_id("build_")
