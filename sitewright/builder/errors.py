from __future__ import annotations


class BuildError(RuntimeError):
    pass


class TemplateRejected(BuildError):
    def __init__(self, answer: str) -> None:
        super().__init__(f"template classifier returned {answer!r}")
        self.answer = answer
