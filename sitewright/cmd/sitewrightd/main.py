#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import sys
from typing import Dict, Mapping, Tuple

import uvicorn

from sitewright.api.server import Server
from sitewright.builder import BuildRunner, ModelClient
from sitewright.buildstore import BuildStore
from sitewright.config import apply_env, default_config, load_from_file, parse_list
from sitewright.util.env import load_env_file


def main() -> None:
    parser = argparse.ArgumentParser(prog="sitewrightd")
    parser.add_argument("--listen", default="", help="listen address host:port")
    parser.add_argument("--auth-token", default="", help="auth token")
    parser.add_argument("--config", default="", help="config file")
    args = parser.parse_args()

    load_env_file(".env.local")
    load_env_file(".env")

    cfg = default_config()

    config_path = args.config or os.environ.get("SITEWRIGHT_CONFIG", "")
    if config_path:
        try:
            cfg = load_from_file(config_path)
        except Exception as err:
            print("failed to load config file", {"path": config_path, "err": err})

    cfg = apply_env(cfg)

    if args.listen:
        cfg.listen_addr = args.listen
    if args.auth_token:
        cfg.auth_token = args.auth_token

    store = BuildStore()
    kit, router = create_model_backend(os.environ)
    producer = ModelClient(kit, cfg.model_policy, router)
    runner = BuildRunner(store, producer)

    server = Server(store, cfg.auth_token, runner, producer, cfg.cors_origins)
    host, port = parse_listen_addr(cfg.listen_addr)

    print("sitewrightd listening", {"addr": cfg.listen_addr, "cors_origins": cfg.cors_origins})
    if cfg.auth_token:
        print("auth enabled", {"mode": "bearer"})

    uvicorn.run(server.handler(), host=host, port=port, log_level="info")


def parse_listen_addr(addr: str) -> tuple[str, int]:
    trimmed = addr.strip() or "127.0.0.1:3000"
    if ":" in trimmed:
        host, port_raw = trimmed.rsplit(":", 1)
    else:
        host, port_raw = trimmed, "3000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 3000
    return host or "127.0.0.1", port


# name -> (single-key variables, key-list variable)
_KEYED_PROVIDERS: Dict[str, Tuple[Tuple[str, ...], str]] = {
    "google": (("GOOGLE_API_KEY", "GEMINI_API_KEY"), "GOOGLE_API_KEYS"),
    "openai": (("OPENAI_API_KEY",), "OPENAI_API_KEYS"),
    "anthropic": (("ANTHROPIC_API_KEY",), "ANTHROPIC_API_KEYS"),
}
DEFAULT_OLLAMA_URL = "http://localhost:11434"


def provider_settings(env: Mapping[str, str]) -> Dict[str, Dict[str, object]]:
    """Provider name -> constructor kwargs, read from ``env``.

    Ollama is added when ``OLLAMA_BASE_URL`` is set or no keyed provider is.
    """
    settings: Dict[str, Dict[str, object]] = {}
    for name, (key_vars, list_var) in _KEYED_PROVIDERS.items():
        key = next((env.get(var, "").strip() for var in key_vars if env.get(var, "").strip()), "")
        keys = parse_list(env.get(list_var, ""))
        if key or keys:
            settings[name] = {"api_key": key, "api_keys": keys or None}
    ollama_base = env.get("OLLAMA_BASE_URL", "").strip()
    if ollama_base or not settings:
        settings["ollama"] = {"base_url": ollama_base or DEFAULT_OLLAMA_URL}
    return settings


def create_model_backend(env: Mapping[str, str]):
    """Build the ai-kit ``Kit`` and ``ModelRouter`` the model client talks to."""
    try:
        from ai_kit import Kit, KitConfig, ModelRouter
        from ai_kit.providers import (
            AnthropicConfig,
            GeminiConfig,
            OllamaConfig,
            OpenAIConfig,
        )
    except Exception as err:
        print("ai-kit is not installed", err)
        sys.exit(1)

    config_types = {
        "google": GeminiConfig,
        "openai": OpenAIConfig,
        "anthropic": AnthropicConfig,
        "ollama": OllamaConfig,
    }
    settings = provider_settings(env)
    if list(settings) == ["ollama"]:
        print("ai-kit: no provider keys configured; using Ollama", settings["ollama"])
    providers = {name: config_types[name](**kwargs) for name, kwargs in settings.items()}
    return Kit(KitConfig(providers=providers, registry_ttl_seconds=15 * 60)), ModelRouter()


if __name__ == "__main__":
    main()
