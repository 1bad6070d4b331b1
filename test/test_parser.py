import time

from sitewright.steps import Step, parse_steps, sanitize, tokenize
from sitewright.steps import parser


def test_parse_single_file_artifact() -> None:
    text = '<boltArtifact title="Demo"><boltAction type="file" filePath="a.txt">hello</boltAction></boltArtifact>'
    steps = parse_steps(text)
    assert steps == [
        Step(id=1, title="Demo", type="CreateFolder"),
        Step(id=2, title="Create a.txt", type="CreateFile", path="a.txt", code="hello"),
    ]


def test_parse_shell_action() -> None:
    text = '<boltArtifact id="x" title="Setup">\n<boltAction type="shell">\n  npm install\n</boltAction>\n</boltArtifact>'
    steps = parse_steps(text)
    assert len(steps) == 2
    shell = steps[1]
    assert shell.type == "RunScript"
    assert shell.title == "Run command"
    assert shell.code == "npm install"
    assert shell.path is None


def test_parse_mixed_actions_keeps_order_and_ignores_stray_text() -> None:
    text = (
        "Sure, here is your project.\n"
        '<boltArtifact id="todo" title="Todo App">\n'
        "Some chatter the model added.\n"
        '<boltAction type="file" filePath="src/App.tsx">\n'
        "export default function App() {\n"
        "  return <div className=\"app\"><p>{a < b ? 'x' : 'y'}</p></div>;\n"
        "}\n"
        "</boltAction>\n"
        "more chatter\n"
        '<boltAction type="shell">npm run dev</boltAction>\n'
        '<boltAction type="file" filePath="README.md">  # Todo  </boltAction>\n'
        "</boltArtifact>\n"
        "Let me know if you need anything else."
    )
    steps = parse_steps(text)
    assert [step.id for step in steps] == [1, 2, 3, 4]
    assert [step.type for step in steps] == ["CreateFolder", "CreateFile", "RunScript", "CreateFile"]
    assert steps[0].title == "Todo App"
    assert steps[1].code.startswith("export default function App()")
    assert steps[1].code.endswith("}")
    assert "<p>" in steps[1].code
    assert steps[3].code == "# Todo"


def test_parse_defaults_title_when_missing() -> None:
    text = '<boltArtifact><boltAction type="shell">ls</boltAction></boltArtifact>'
    steps = parse_steps(text)
    assert steps[0].title == "Project Files"
    assert steps[0].status == "pending"


def test_parse_without_envelope_extracts_one_action() -> None:
    text = 'The model forgot the wrapper: type="file" filePath="x/y.txt"'
    steps = parse_steps(text)
    assert len(steps) == 2
    assert steps[0].type == "CreateFolder"
    assert steps[1].type == "CreateFile"
    assert steps[1].path == "x/y.txt"
    assert steps[1].id == 2


def test_parse_bare_action_tag_without_envelope() -> None:
    text = '<boltAction type="file" filePath="x/y.txt">\ncontent\n</boltAction><boltAction type="shell">ls</boltAction>'
    steps = parse_steps(text)
    assert len(steps) == 2
    assert steps[1].path == "x/y.txt"
    assert steps[1].code == "content"


def test_parse_empty_input() -> None:
    assert parse_steps("") == []


def test_parse_plain_prose_returns_leading_step_only() -> None:
    steps = parse_steps("I cannot help with that.")
    assert steps == [Step(id=1, title="Project Files", type="CreateFolder")]


def test_parse_drops_file_action_without_path() -> None:
    text = '<boltArtifact title="T"><boltAction type="file">orphan</boltAction></boltArtifact>'
    steps = parse_steps(text)
    assert [step.type for step in steps] == ["CreateFolder"]


def test_parse_drops_empty_shell_and_unknown_types() -> None:
    text = (
        '<boltArtifact title="T">'
        '<boltAction type="shell">   </boltAction>'
        '<boltAction type="deploy">now</boltAction>'
        '<boltAction type="file" filePath="keep.txt">k</boltAction>'
        "</boltArtifact>"
    )
    steps = parse_steps(text)
    assert [step.path for step in steps[1:]] == ["keep.txt"]
    assert steps[1].id == 2


def test_parse_drops_unterminated_action_inside_envelope() -> None:
    text = (
        '<boltArtifact title="T">'
        '<boltAction type="file" filePath="a.txt">a</boltAction>'
        '<boltAction type="shell">npm start'
        "</boltArtifact>"
    )
    steps = parse_steps(text)
    assert len(steps) == 2
    assert steps[1].path == "a.txt"


def test_parse_self_closing_file_action_keeps_empty_code() -> None:
    text = '<boltArtifact title="T"><boltAction type="file" filePath=".env"/></boltArtifact>'
    steps = parse_steps(text)
    assert steps[1].path == ".env"
    assert steps[1].code == ""


def test_parse_strips_control_characters() -> None:
    clean = '<boltArtifact title="Demo"><boltAction type="file" filePath="a.txt">hello</boltAction></boltArtifact>'
    dirty = '<boltArtifact title="De\x00mo"><boltAction type="file" file\x00Path="a.t\x07xt">hel\x1flo</boltAction></boltArtifact>'
    assert sanitize(dirty) == clean
    assert parse_steps(dirty) == parse_steps(clean)


def test_parse_first_id_continues_numbering() -> None:
    first = parse_steps('<boltArtifact title="A"><boltAction type="shell">a</boltAction></boltArtifact>')
    second = parse_steps(
        '<boltArtifact title="B"><boltAction type="shell">b</boltAction></boltArtifact>',
        first_id=max(step.id for step in first) + 1,
    )
    assert [step.id for step in first + second] == [1, 2, 3, 4]


def test_parse_recovers_from_internal_failure(monkeypatch) -> None:
    def boom(text: str) -> str:
        raise RuntimeError("boom")

    monkeypatch.setattr(parser, "sanitize", boom)
    steps = parse_steps('<boltAction type="shell">npm test</boltAction>')
    assert steps == [Step(id=1, title="Run command", type="RunScript", code="npm test")]


def test_parse_returns_empty_when_recovery_fails(monkeypatch) -> None:
    def boom(text: str):
        raise RuntimeError("boom")

    monkeypatch.setattr(parser, "sanitize", boom)
    monkeypatch.setattr(parser, "tokenize", boom)
    assert parse_steps('<boltAction type="shell">npm test</boltAction>') == []


def test_tokenize_reads_attributes_and_self_closing() -> None:
    tokens = tokenize('<a href="x" data-id="1"/>text</b>')
    assert [tok.kind for tok in tokens] == ["open", "text", "close"]
    assert tokens[0].attrs == {"href": "x", "data-id": "1"}
    assert tokens[0].self_closing
    assert tokens[2].name == "b"


def test_tokenize_self_closing_without_attributes() -> None:
    tokens = tokenize("<br/><hr /><img src=\"a.png\" />")
    assert [(tok.name, tok.self_closing) for tok in tokens] == [("br", True), ("hr", True), ("img", True)]
    assert tokens[2].attrs == {"src": "a.png"}


def test_parse_unclosed_tag_followed_by_whitespace_is_fast() -> None:
    text = (
        '<boltArtifact title="x"><boltAction type="file" filePath="a.js">let q = a <b'
        + " " * 3000
        + "c\n</boltAction></boltArtifact>"
    )
    started = time.monotonic()
    steps = parse_steps(text)
    assert time.monotonic() - started < 1.0
    assert [step.path for step in steps[1:]] == ["a.js"]
    assert steps[1].code.startswith("let q = a <b")
    assert steps[1].code.endswith("c")
