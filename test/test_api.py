from __future__ import annotations

from fastapi.testclient import TestClient

from sitewright.api.server import Server
from sitewright.builder.templates import NODE_BASE_ARTIFACT
from sitewright.buildstore import BuildStore
from sitewright.project import ProjectTree


class DummyRunner:
    def __init__(self) -> None:
        self.started = []

    def start_build(self, build_id: str) -> None:
        self.started.append(build_id)


class DummyProducer:
    def __init__(self, kind: str = "node", response: str = "ok", fail: bool = False) -> None:
        self.kind = kind
        self.response = response
        self.fail = fail

    def classify(self, prompt: str) -> str:
        return self.kind

    def generate(self, messages) -> str:
        if self.fail:
            raise RuntimeError("provider down")
        return self.response + ":" + messages[-1].content


def test_parse_endpoint() -> None:
    client = TestClient(Server(BuildStore(), "").handler())
    text = '<boltArtifact title="Demo"><boltAction type="file" filePath="a.txt">hello</boltAction></boltArtifact>'
    res = client.post("/v1/parse", json={"text": text})
    assert res.status_code == 200
    steps = res.json()["steps"]
    assert steps[0] == {"id": 1, "title": "Demo", "type": "CreateFolder", "status": "pending", "description": ""}
    assert steps[1]["path"] == "a.txt"
    assert steps[1]["code"] == "hello"


def test_merge_endpoint() -> None:
    client = TestClient(Server(BuildStore(), "").handler())
    batch = [{"id": 1, "title": "Create src/app.js", "type": "CreateFile", "path": "src/app.js", "code": "v1"}]
    res = client.post("/v1/merge", json={"files": [], "steps": [], "batch": batch})
    assert res.status_code == 200
    body = res.json()
    assert body["files"] == [
        {
            "name": "src",
            "path": "src",
            "type": "folder",
            "children": [{"name": "app.js", "path": "src/app.js", "type": "file", "content": "v1"}],
        }
    ]
    assert body["steps"][0]["status"] == "completed"
    assert body["selected_path"] == "src/app.js"

    batch[0]["code"] = "v2"
    res = client.post("/v1/merge", json={"files": body["files"], "steps": body["steps"], "batch": batch})
    body = res.json()
    assert body["files"][0]["children"][0]["content"] == "v2"
    assert [step["id"] for step in body["steps"]] == [1, 2]


def test_merge_endpoint_rejects_bad_step() -> None:
    client = TestClient(Server(BuildStore(), "").handler())
    res = client.post("/v1/merge", json={"batch": [{"id": 1, "type": "Explode"}]})
    assert res.status_code == 400


def test_template_endpoint() -> None:
    client = TestClient(Server(BuildStore(), "", producer=DummyProducer("node")).handler())
    res = client.post("/template", json={"prompt": "an express api"})
    assert res.status_code == 200
    body = res.json()
    assert body["uiPrompts"] == [NODE_BASE_ARTIFACT]
    assert len(body["prompts"]) == 1


def test_template_endpoint_rejects_unknown_answer() -> None:
    client = TestClient(Server(BuildStore(), "", producer=DummyProducer("vue")).handler())
    res = client.post("/template", json={"prompt": "something"})
    assert res.status_code == 403
    assert res.json() == {"error": "You cant access this"}


def test_chat_endpoint() -> None:
    client = TestClient(Server(BuildStore(), "", producer=DummyProducer(response="answer")).handler())
    res = client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})
    assert res.status_code == 200
    assert res.json() == {"response": "answer:hi"}


def test_chat_endpoint_reports_model_failure() -> None:
    client = TestClient(Server(BuildStore(), "", producer=DummyProducer(fail=True)).handler())
    res = client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})
    assert res.status_code == 500


def test_create_and_get_build() -> None:
    store = BuildStore()
    runner = DummyRunner()
    client = TestClient(Server(store, "", runner).handler())
    res = client.post("/v1/builds", json={"prompt": "a portfolio site"})
    assert res.status_code == 200
    build_id = res.json()["build_id"]
    assert runner.started == [build_id]

    res = client.get(f"/v1/builds/{build_id}")
    assert res.status_code == 200
    assert res.json()["status"] == "queued"
    assert res.json()["files"] == []

    res = client.get("/v1/builds")
    assert [item["id"] for item in res.json()] == [build_id]


def test_create_build_requires_prompt() -> None:
    client = TestClient(Server(BuildStore(), "", DummyRunner()).handler())
    res = client.post("/v1/builds", json={"prompt": " "})
    assert res.status_code == 400


def test_get_missing_build() -> None:
    client = TestClient(Server(BuildStore(), "").handler())
    assert client.get("/v1/builds/build_nope").status_code == 404


def test_get_build_file() -> None:
    store = BuildStore()
    build = store.create_build("x")
    tree = ProjectTree()
    tree.upsert_file("src/app.js", "console.log(1)")
    build.files = tree.items()
    store.update_build(build)

    client = TestClient(Server(store, "").handler())
    res = client.get(f"/v1/builds/{build.id}/files/src/app.js")
    assert res.status_code == 200
    assert res.text == "console.log(1)"
    assert client.get(f"/v1/builds/{build.id}/files/src").status_code == 404


def test_auth_token_required() -> None:
    client = TestClient(Server(BuildStore(), "secret").handler())
    assert client.get("/healthz").status_code == 200
    assert client.get("/v1/builds").status_code == 401
    res = client.get("/v1/builds", headers={"Authorization": "Bearer secret"})
    assert res.status_code == 200
