from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class ModelPolicy:
    require_tools: bool = False
    require_vision: bool = False
    max_cost_usd: float = 5.0
    preferred_models: List[str] = field(default_factory=list)


@dataclass
class Config:
    listen_addr: str = "127.0.0.1:3000"
    auth_token: str = ""
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:5173"])
    model_policy: ModelPolicy = field(default_factory=ModelPolicy)


def default_config() -> Config:
    return Config()


def load_from_file(file_path: str) -> Config:
    if not file_path:
        raise ValueError("path is empty")
    raw = Path(file_path).expanduser().read_text(encoding="utf-8")
    data = json.loads(raw)
    policy_raw = data.get("model_policy") or {}
    policy = ModelPolicy(
        require_tools=bool(policy_raw.get("require_tools", False)),
        require_vision=bool(policy_raw.get("require_vision", False)),
        max_cost_usd=float(policy_raw.get("max_cost_usd", 5.0)),
        preferred_models=list(policy_raw.get("preferred_models", [])),
    )
    return Config(
        listen_addr=str(data.get("listen_addr", "127.0.0.1:3000")),
        auth_token=str(data.get("auth_token", "")),
        cors_origins=list(data.get("cors_origins", ["http://localhost:5173"])),
        model_policy=policy,
    )


def apply_env(cfg: Config) -> Config:
    listen = os.environ.get("SITEWRIGHT_LISTEN", "").strip()
    if listen:
        cfg.listen_addr = listen
    token = os.environ.get("SITEWRIGHT_AUTH_TOKEN", "").strip()
    if token:
        cfg.auth_token = token
    origins = parse_list(os.environ.get("SITEWRIGHT_CORS_ORIGINS", ""))
    if origins:
        cfg.cors_origins = origins
    models = parse_list(os.environ.get("SITEWRIGHT_PREFERRED_MODELS", ""))
    if models:
        cfg.model_policy.preferred_models = models
    return cfg


def parse_list(value: str) -> List[str]:
    parts = [item.strip() for item in value.replace(";", ",").replace("\n", " ").split(",")]
    out = []
    for part in parts:
        for sub in part.split():
            if sub:
                out.append(sub)
    return out
