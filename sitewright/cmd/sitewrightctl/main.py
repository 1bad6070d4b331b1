#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import httpx

from sitewright.project import ProjectState
from sitewright.steps import parse_steps, step_to_dict


def main() -> None:
    parser = argparse.ArgumentParser(prog="sitewrightctl", add_help=False)
    parser.add_argument("-h", "--help", action="store_true")
    subparsers = parser.add_subparsers(dest="command")

    parser_parse = subparsers.add_parser("parse")
    parser_parse.add_argument("file")
    parser_parse.add_argument("--json", dest="as_json", action="store_true")

    parser_tree = subparsers.add_parser("tree")
    parser_tree.add_argument("files", nargs="+")

    parser_build = subparsers.add_parser("build")
    parser_build.add_argument("--prompt", default="")
    parser_build.add_argument("--prompt-file", dest="prompt_file", default="")
    parser_build.add_argument("--url", default="")

    parser_list = subparsers.add_parser("list")
    parser_list.add_argument("--url", default="")

    parser_show = subparsers.add_parser("show")
    parser_show.add_argument("build_id")
    parser_show.add_argument("--file", default="")
    parser_show.add_argument("--url", default="")

    parser_events = subparsers.add_parser("events")
    parser_events.add_argument("build_id")
    parser_events.add_argument("--url", default="")

    args, _ = parser.parse_known_args()

    if args.help or not args.command:
        usage()
        sys.exit(2 if not args.command else 0)

    if args.command == "parse":
        cmd_parse(args)
        return
    if args.command == "tree":
        cmd_tree(args)
        return
    if args.command == "build":
        cmd_build(args)
        return
    if args.command == "list":
        cmd_list(args)
        return
    if args.command == "show":
        cmd_show(args)
        return
    if args.command == "events":
        cmd_events(args)
        return
    print(f"unknown command: {args.command}")
    usage()
    sys.exit(2)


def usage() -> None:
    print(
        """sitewrightctl - CLI client for sitewrightd

Usage:
  sitewrightctl parse <response.txt> [--json]
  sitewrightctl tree <response.txt> [<response.txt> ...]
  sitewrightctl build --prompt <text> [--url <base>]
  sitewrightctl list [--url <base>]
  sitewrightctl show <build_id> [--file <path>] [--url <base>]
  sitewrightctl events <build_id> [--url <base>]

parse and tree work offline on saved model responses; tree folds every
response, in order, into one project.

Environment:
  SITEWRIGHT_URL         Base URL for sitewrightd (default http://127.0.0.1:3000)
  SITEWRIGHT_AUTH_TOKEN  Bearer token (optional, must match sitewrightd)
"""
    )


def base_url(flag_url: str) -> str:
    if flag_url.strip():
        return flag_url.strip().rstrip("/")
    env = os.environ.get("SITEWRIGHT_URL", "").strip()
    if env:
        return env.rstrip("/")
    return "http://127.0.0.1:3000"


def auth_headers() -> Dict[str, str]:
    tok = os.environ.get("SITEWRIGHT_AUTH_TOKEN", "").strip()
    if tok:
        return {"Authorization": f"Bearer {tok}"}
    return {}


def do_json(method: str, url: str, body: Any | None = None) -> Any:
    headers: Dict[str, str] = {"Content-Type": "application/json"}
    headers.update(auth_headers())
    with httpx.Client(timeout=120.0) as client:
        resp = client.request(method, url, headers=headers, json=body)
    if resp.status_code >= 400:
        raise RuntimeError(f"http {resp.status_code}: {resp.text.strip()}")
    if resp.status_code == 204:
        return None
    return resp.json() if resp.text else None


def cmd_parse(args) -> None:
    text = Path(args.file).read_text(encoding="utf-8")
    steps = parse_steps(text)
    if args.as_json:
        print(json.dumps([step_to_dict(step) for step in steps], indent=2))
        return
    for step in steps:
        print(f"{str(step.id).rjust(3)}  {step.type.ljust(12)}  {step.title}")


def cmd_tree(args) -> None:
    state = ProjectState()
    for file_name in args.files:
        text = Path(file_name).read_text(encoding="utf-8")
        result = state.merge(parse_steps(text))
        for step_id in result.rejected:
            print(f"[tree] rejected step {step_id} (path collision)", file=sys.stderr)
    for line in render_tree(state.tree.to_list()):
        print(line)
    if state.selected_path:
        print(f"selected: {state.selected_path}")


def cmd_build(args) -> None:
    prompt_text = (args.prompt or "").strip()
    if not prompt_text and args.prompt_file:
        prompt_text = Path(args.prompt_file).read_text(encoding="utf-8").strip()
    if not prompt_text:
        die("prompt text is required")
    resp = do_json("POST", f"{base_url(args.url)}/v1/builds", {"prompt": prompt_text})
    print(resp["build_id"])


def cmd_list(args) -> None:
    builds = do_json("GET", f"{base_url(args.url)}/v1/builds")
    for build in builds or []:
        template = build.get("template") or "-"
        print(f"{build['id']}  {str(build['status']).ljust(10)}  {template.ljust(6)}  {build['prompt']}")


def cmd_show(args) -> None:
    url = base_url(args.url)
    if args.file:
        with httpx.Client(timeout=30.0) as client:
            resp = client.get(f"{url}/v1/builds/{args.build_id}/files/{args.file}", headers=auth_headers())
        if resp.status_code >= 400:
            die(f"http {resp.status_code}: {resp.text.strip()}")
        print(resp.text)
        return
    build = do_json("GET", f"{url}/v1/builds/{args.build_id}")
    print(f"{build['id']}  {build['status']}  template={build.get('template') or '-'}")
    if build.get("error"):
        print(f"error: {build['error']}")
    for step in build.get("steps") or []:
        print(f"  [{status_mark(step['status'])}] {step['title']}")
    for line in render_tree(build.get("files") or []):
        print(line)


def cmd_events(args) -> None:
    url = f"{base_url(args.url)}/v1/builds/{args.build_id}/events"
    with httpx.stream("GET", url, headers=auth_headers(), timeout=None) as resp:
        if resp.status_code >= 400:
            die(f"http {resp.status_code}: {resp.read().decode('utf-8', 'replace').strip()}")
        for line in resp.iter_lines():
            if not line:
                continue
            if line.startswith("data: "):
                payload = line[6:]
                try:
                    ev = json.loads(payload)
                    print_event(ev)
                except Exception:
                    print(payload)


def render_tree(items: List[Dict[str, Any]], depth: int = 0) -> List[str]:
    out: List[str] = []
    for item in items:
        if item.get("type") == "folder":
            out.append(f"{'  ' * depth}{item['name']}/")
            out.extend(render_tree(item.get("children") or [], depth + 1))
        else:
            out.append(f"{'  ' * depth}{item['name']}")
    return out


def status_mark(status: str) -> str:
    if status == "completed":
        return "x"
    if status in ("active", "current"):
        return ">"
    return " "


def print_event(ev: Dict[str, Any]) -> None:
    ts = ev.get("ts", "")
    typ = ev.get("type", "")
    msg = ev.get("message") or (json.dumps(ev["data"]) if ev.get("data") else "-")
    print(f"{ts}  {str(typ).ljust(20)}  {msg}")


def die(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
