"""Turn a model's artifact response into an ordered list of build steps.

A well-formed response looks like::

    <boltArtifact id="project-import" title="Project Files">
      <boltAction type="file" filePath="eslint.config.js">
        import js from '@eslint/js';
      </boltAction>
      <boltAction type="shell">
        node index.js
      </boltAction>
    </boltArtifact>

and becomes a leading ``CreateFolder`` step titled after the artifact followed
by one step per action. Models do not always answer like that, so parsing runs
a ladder of progressively looser strategies and never raises.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from .models import Step
from .tokens import Token, find_attr, find_attr_match, find_close, sanitize, tokenize

ARTIFACT_TAG = "boltArtifact"
ACTION_TAG = "boltAction"
DEFAULT_ARTIFACT_TITLE = "Project Files"

_ACTION_MARKERS = ('type="file"', 'type="shell"')

# (type attribute, filePath attribute, raw content)
RawAction = Tuple[str, Optional[str], str]
Strategy = Callable[[str, List[Token]], Optional[List[RawAction]]]


def parse_steps(text: str, first_id: int = 1) -> List[Step]:
    if not text or not isinstance(text, str):
        return []
    try:
        clean = sanitize(text)
        tokens = tokenize(clean)
        leading = Step(
            id=first_id,
            title=_artifact_title(clean, tokens),
            type="CreateFolder",
        )
        for name, strategy in _LADDER:
            raw = strategy(clean, tokens)
            if raw is None:
                continue
            actions = _build_steps(raw, first_id + 1)
            if actions:
                return [leading] + actions
            print("parse: strategy recovered no actions", {"strategy": name})
        return [leading]
    except Exception as err:
        print("parse: failed, retrying on raw text", {"err": str(err), "bytes": len(text)})
        return _recover(text, first_id)


def step_title(action_type: str, file_path: Optional[str] = None) -> str:
    if action_type == "file" and file_path:
        return f"Create {file_path}"
    if action_type == "shell":
        return "Run command"
    return "Unknown step"


def _artifact_title(text: str, tokens: List[Token]) -> str:
    for token in tokens:
        if token.is_open(ARTIFACT_TAG):
            title = token.attrs.get("title")
            if title:
                return title
            break
    return find_attr(text, "title") or DEFAULT_ARTIFACT_TITLE


def _scan_envelope(text: str, tokens: List[Token]) -> Optional[List[RawAction]]:
    start = next((idx for idx, tok in enumerate(tokens) if tok.is_open(ARTIFACT_TAG)), -1)
    if start < 0:
        return None
    end = find_close(tokens, ARTIFACT_TAG, start)
    if end < 0:
        return None
    out: List[RawAction] = []
    idx = start + 1
    while idx < end:
        token = tokens[idx]
        if not token.is_open(ACTION_TAG) or "type" not in token.attrs:
            idx += 1
            continue
        if token.self_closing:
            out.append((token.attrs["type"], token.attrs.get("filePath"), ""))
            idx += 1
            continue
        close = find_close(tokens, ACTION_TAG, idx)
        if close < 0 or close > end:
            # unterminated action inside the artifact
            idx += 1
            continue
        body = text[token.end : tokens[close].start]
        out.append((token.attrs["type"], token.attrs.get("filePath"), body))
        idx = close + 1
    return out


def _scan_unanchored(text: str, tokens: List[Token]) -> Optional[List[RawAction]]:
    if any(tok.is_open(ARTIFACT_TAG) for tok in tokens):
        return None
    if not any(marker in text for marker in _ACTION_MARKERS):
        return None
    return _single_action(text, tokens)


def _scan_whole_text(text: str, tokens: List[Token]) -> Optional[List[RawAction]]:
    if find_attr(text, "type") is None:
        return None
    return _single_action(text, tokens)


def _single_action(text: str, tokens: List[Token]) -> List[RawAction]:
    """Best-effort extraction of one action from unanchored text."""
    type_match = find_attr_match(text, "type")
    if type_match is None:
        return []
    path_match = find_attr_match(text, "filePath")
    file_path = path_match.group(1) if path_match else None
    opener = next((idx for idx, tok in enumerate(tokens) if tok.kind == "open" and "type" in tok.attrs), -1)
    if opener >= 0:
        body_start = tokens[opener].end
    else:
        # bare attributes: whatever follows the last one is the payload
        body_start = max(type_match.end(), path_match.end() if path_match else 0)
    close = next(
        (
            idx
            for idx, tok in enumerate(tokens)
            if tok.kind == "close" and tok.name in (ACTION_TAG, ARTIFACT_TAG) and tok.start >= body_start
        ),
        -1,
    )
    body_end = tokens[close].start if close >= 0 else len(text)
    return [(type_match.group(1), file_path, text[body_start:body_end])]


def _build_steps(raw: List[RawAction], next_id: int) -> List[Step]:
    steps: List[Step] = []
    for action_type, file_path, body in raw:
        step = _action_step(action_type, file_path, body, next_id)
        if step is None:
            continue
        steps.append(step)
        next_id += 1
    return steps


def _action_step(action_type: str, file_path: Optional[str], body: str, step_id: int) -> Optional[Step]:
    code = body.strip()
    if action_type == "file":
        if not file_path:
            print("parse: skipping file action without filePath", {"bytes": len(code)})
            return None
        return Step(
            id=step_id,
            title=step_title(action_type, file_path),
            type="CreateFile",
            path=file_path,
            code=code,
        )
    if action_type == "shell":
        if not code:
            return None
        return Step(id=step_id, title=step_title(action_type), type="RunScript", code=code)
    print("parse: skipping action with unknown type", {"type": action_type})
    return None


def _recover(text: str, first_id: int) -> List[Step]:
    try:
        raw = _single_action(text, tokenize(text))
    except Exception as err:
        print("parse: recovery failed", {"err": str(err)})
        return []
    return _build_steps(raw, first_id)


_LADDER: List[Tuple[str, Strategy]] = [
    ("envelope", _scan_envelope),
    ("unanchored", _scan_unanchored),
    ("whole-text", _scan_whole_text),
]
