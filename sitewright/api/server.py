from __future__ import annotations

import asyncio
import json
import time
from dataclasses import asdict
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from sitewright.builder import ChatMessage, TemplateRejected, TextProducer, template_prompts
from sitewright.buildstore import Build, BuildStore
from sitewright.project import ProjectTree, item_to_dict, merge_steps
from sitewright.steps import parse_steps, step_from_dict, step_to_dict


def error_response(message: str, status: int = 400) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status)


class BuildStarter:
    def start_build(self, build_id: str) -> None:
        raise NotImplementedError


class Server:
    def __init__(
        self,
        store: BuildStore,
        auth_token: str,
        runner: Optional[BuildStarter] = None,
        producer: Optional[TextProducer] = None,
        cors_origins: Optional[List[str]] = None,
    ) -> None:
        self._store = store
        self._auth_token = auth_token
        self._runner = runner
        self._producer = producer
        self._cors_origins = cors_origins if cors_origins is not None else ["http://localhost:5173"]
        self._app = FastAPI()
        self._configure_middleware()
        self._configure_routes()

    def handler(self) -> FastAPI:
        return self._app

    def _configure_middleware(self) -> None:
        self._app.add_middleware(
            CORSMiddleware,
            allow_origins=self._cors_origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type"],
        )

        @self._app.middleware("http")
        async def recover_middleware(request: Request, call_next):
            try:
                return await call_next(request)
            except Exception as err:
                print("http handler crashed", {"path": request.url.path, "err": str(err)})
                return Response(status_code=500)

        @self._app.middleware("http")
        async def auth_middleware(request: Request, call_next):
            if not self._auth_token.strip() or request.url.path in ("/", "/healthz"):
                return await call_next(request)
            auth = request.headers.get("authorization") or ""
            prefix = "Bearer "
            if not auth.startswith(prefix) or auth[len(prefix) :].strip() != self._auth_token:
                return Response(status_code=401)
            return await call_next(request)

        @self._app.middleware("http")
        async def logging_middleware(request: Request, call_next):
            start = time.time()
            response = await call_next(request)
            duration = int((time.time() - start) * 1000)
            print(
                "http",
                {
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": duration,
                },
            )
            return response

    def _configure_routes(self) -> None:
        @self._app.get("/")
        async def welcome():
            return PlainTextResponse("Welcome to the sitewright API!")

        @self._app.get("/healthz")
        async def healthz():
            return {"ok": True}

        @self._app.post("/template")
        async def template(request: Request):
            try:
                body = await _parse_json(request)
            except ValueError:
                return error_response("invalid json", 400)
            prompt = str(body.get("prompt") or "")
            if not prompt.strip():
                return error_response("prompt required", 400)
            if not self._producer:
                return error_response("model is not configured", 500)
            try:
                kind = await asyncio.to_thread(self._producer.classify, prompt)
                prompts = template_prompts(kind)
            except TemplateRejected as err:
                print("template rejected", {"answer": err.answer})
                return error_response("You cant access this", 403)
            except Exception as err:
                print("template failed", {"err": str(err)})
                return error_response("Internal Analytical Issue", 500)
            return {"prompts": prompts.prompts, "uiPrompts": prompts.ui_prompts}

        @self._app.post("/chat")
        async def chat(request: Request):
            try:
                body = await _parse_json(request)
                messages = [
                    ChatMessage(role=str(msg.get("role", "user")), content=str(msg.get("content", "")))
                    for msg in body.get("messages") or []
                ]
            except (ValueError, AttributeError):
                return error_response("invalid json", 400)
            if not messages:
                return error_response("messages required", 400)
            if not self._producer:
                return error_response("model is not configured", 500)
            try:
                text = await asyncio.to_thread(self._producer.generate, messages)
            except Exception as err:
                print("chat failed", {"err": str(err)})
                return error_response("model error occurred", 500)
            return {"response": text}

        @self._app.post("/v1/parse")
        async def parse(request: Request):
            try:
                body = await _parse_json(request)
                first_id = int(body.get("first_id") or 1)
            except (ValueError, TypeError):
                return error_response("invalid json", 400)
            steps = await asyncio.to_thread(parse_steps, str(body.get("text") or ""), first_id)
            return {"steps": [step_to_dict(step) for step in steps]}

        @self._app.post("/v1/merge")
        async def merge(request: Request):
            try:
                body = await _parse_json(request)
                files = ProjectTree.from_list(body.get("files") or []).items()
                steps = [step_from_dict(item) for item in body.get("steps") or []]
                batch = [step_from_dict(item) for item in body.get("batch") or []]
            except (ValueError, TypeError, AttributeError) as err:
                return error_response(str(err), 400)
            result = await asyncio.to_thread(merge_steps, files, steps, batch)
            return {
                "files": [item_to_dict(item) for item in result.files],
                "steps": [step_to_dict(step) for step in result.steps],
                "selected_path": result.selected_path,
                "rejected": result.rejected,
            }

        @self._app.get("/v1/builds")
        async def list_builds():
            return [_build_summary(build) for build in self._store.list_builds()]

        @self._app.post("/v1/builds")
        async def create_build(request: Request):
            try:
                body = await _parse_json(request)
            except ValueError:
                return error_response("invalid json", 400)
            try:
                build = self._store.create_build(str(body.get("prompt") or ""))
            except ValueError as err:
                return error_response(str(err), 400)
            if self._runner:
                self._runner.start_build(build.id)
            return {"build_id": build.id}

        @self._app.get("/v1/builds/{build_id}")
        async def get_build(build_id: str):
            try:
                return _build_to_dict(self._store.get_build(build_id))
            except KeyError:
                return error_response(f"build not found: {build_id}", 404)

        @self._app.get("/v1/builds/{build_id}/files/{file_path:path}")
        async def get_build_file(build_id: str, file_path: str):
            try:
                build = self._store.get_build(build_id)
            except KeyError:
                return error_response(f"build not found: {build_id}", 404)
            node = ProjectTree.from_items(build.files).get(file_path)
            if node is None or node.type != "file":
                return error_response(f"file not found: {file_path}", 404)
            return PlainTextResponse(node.content or "")

        @self._app.get("/v1/builds/{build_id}/events")
        async def build_events(request: Request, build_id: str):
            try:
                self._store.get_build(build_id)
            except KeyError:
                return error_response(f"build not found: {build_id}", 404)

            async def stream():
                queue: asyncio.Queue[str] = asyncio.Queue()
                loop = asyncio.get_running_loop()

                def handler(ev):
                    loop.call_soon_threadsafe(queue.put_nowait, _format_sse("message", asdict(ev)))

                unsubscribe = self._store.subscribe(build_id, handler)
                for ev in self._store.read_events(build_id, 200):
                    yield _format_sse("message", asdict(ev))
                keepalive = asyncio.create_task(_keepalive(queue))
                try:
                    while True:
                        if await request.is_disconnected():
                            break
                        payload = await queue.get()
                        yield payload
                finally:
                    unsubscribe()
                    keepalive.cancel()

            return StreamingResponse(
                stream(),
                media_type="text/event-stream",
                headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
            )


async def _keepalive(queue: asyncio.Queue[str]) -> None:
    while True:
        await asyncio.sleep(15)
        queue.put_nowait(": keep-alive\n\n")


def _format_sse(event: str, data: object) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


def _build_summary(build: Build) -> dict:
    return {
        "id": build.id,
        "created_at": build.created_at,
        "updated_at": build.updated_at,
        "status": build.status,
        "prompt": build.prompt,
        "template": build.template,
        "error": build.error,
    }


def _build_to_dict(build: Build) -> dict:
    data = _build_summary(build)
    data["files"] = [item_to_dict(item) for item in build.files]
    data["steps"] = [step_to_dict(step) for step in build.steps]
    data["selected_path"] = build.selected_path
    return data


async def _parse_json(request: Request) -> dict:
    body = await request.body()
    try:
        data = json.loads(body)
    except Exception as err:
        raise ValueError("invalid json") from err
    if not isinstance(data, dict):
        raise ValueError("invalid json")
    return data
