from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple


TokenKind = Literal["open", "close", "text"]

# Attribute values may not contain "<" or ">" so a stray comparison inside
# generated code never swallows a real closing tag. The name and the attribute
# run share no characters, so a "<name" with no ">" fails in linear time.
_TAG_RE = re.compile(r"<(/?)([A-Za-z][\w:.-]*)([\s/][^<>]*)?>")
_ATTR_RE = re.compile(r"([A-Za-z_][\w:.-]*)\s*=\s*\"([^\"]*)\"")
_CONTROL_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f]")


@dataclass
class Token:
    kind: TokenKind
    start: int
    end: int
    name: str = ""
    attrs: Dict[str, str] = field(default_factory=dict)
    self_closing: bool = False

    def is_open(self, name: str) -> bool:
        return self.kind == "open" and self.name == name

    def is_close(self, name: str) -> bool:
        return self.kind == "close" and self.name == name


def sanitize(text: str) -> str:
    """Drop control characters that break structural matching."""
    return _CONTROL_RE.sub("", text)


def parse_attrs(raw: str) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    for key, value in _ATTR_RE.findall(raw):
        attrs.setdefault(key, value)
    return attrs


def find_attr_match(text: str, name: str) -> Optional["re.Match[str]"]:
    return re.search(r"\b" + re.escape(name) + r"\s*=\s*\"([^\"]*)\"", text)


def find_attr(text: str, name: str) -> Optional[str]:
    """First ``name="value"`` anywhere in ``text``, tagged or not."""
    match = find_attr_match(text, name)
    if not match:
        return None
    return match.group(1)


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    for match in _TAG_RE.finditer(text):
        if match.start() > pos:
            tokens.append(Token(kind="text", start=pos, end=match.start()))
        closing, name, raw_attrs = match.groups()
        raw_attrs = (raw_attrs or "").rstrip()
        self_closing = raw_attrs.endswith("/")
        if self_closing:
            raw_attrs = raw_attrs[:-1]
        if closing:
            tokens.append(Token(kind="close", start=match.start(), end=match.end(), name=name))
        else:
            tokens.append(
                Token(
                    kind="open",
                    start=match.start(),
                    end=match.end(),
                    name=name,
                    attrs=parse_attrs(raw_attrs),
                    self_closing=self_closing,
                )
            )
        pos = match.end()
    if pos < len(text):
        tokens.append(Token(kind="text", start=pos, end=len(text)))
    return tokens


def find_close(tokens: List[Token], name: str, after: int) -> int:
    """Index of the first ``</name>`` token past index ``after``, or -1."""
    return find_first_close(tokens, (name,), after)


def find_first_close(tokens: List[Token], names: Tuple[str, ...], after: int) -> int:
    for idx in range(after + 1, len(tokens)):
        if tokens[idx].kind == "close" and tokens[idx].name in names:
            return idx
    return -1
