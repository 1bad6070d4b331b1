from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from sitewright.project import ProjectState
from sitewright.steps import parse_steps
from sitewright.steps.models import Step
from sitewright.project.tree import FileItem
from .errors import BuildError
from .model_client import ChatMessage
from .templates import template_prompts

EventHandler = Callable[[str, Dict[str, object]], None]


class TextProducer:
    def classify(self, prompt: str) -> str:
        raise NotImplementedError

    def generate(self, messages: List[ChatMessage]) -> str:
        raise NotImplementedError


@dataclass
class BuildOutcome:
    template: str
    files: List[FileItem]
    steps: List[Step]
    selected_path: Optional[str] = None
    rejected: List[int] = field(default_factory=list)


class Builder:
    """Runs the two model calls of a build and folds both answers into one state.

    The second call is only issued once the template answer has been parsed
    and folded, since the chat history is built from it.
    """

    def __init__(self, producer: TextProducer) -> None:
        self._producer = producer

    def build(
        self,
        prompt: str,
        state: Optional[ProjectState] = None,
        on_event: Optional[EventHandler] = None,
    ) -> BuildOutcome:
        if not prompt.strip():
            raise BuildError("prompt is empty")
        state = state if state is not None else ProjectState()
        emit = on_event or _discard

        try:
            kind = self._producer.classify(prompt)
            prompts = template_prompts(kind)
            emit("template_selected", {"template": kind})

            template_steps = parse_steps(prompts.ui_prompts[0])
            result = state.merge(template_steps)
            emit(
                "steps_merged",
                {"stage": "template", "steps": len(template_steps), "selected_path": result.selected_path},
            )
            rejected = list(result.rejected)

            messages = [ChatMessage(role="user", content=text) for text in prompts.prompts]
            messages.append(ChatMessage(role="user", content=prompt))
            response = self._producer.generate(messages)
            if not response or not response.strip():
                raise BuildError("build did not complete")
            emit("generation_received", {"bytes": len(response)})

            chat_steps = parse_steps(response)
            if not chat_steps:
                raise BuildError("build did not complete")
            result = state.merge(chat_steps)
            rejected.extend(result.rejected)
            emit(
                "steps_merged",
                {"stage": "chat", "steps": len(chat_steps), "selected_path": result.selected_path},
            )
        except BuildError as err:
            print("build failed", {"err": str(err)})
            emit("build_failed", {"error": str(err)})
            raise
        except Exception as err:
            print("build failed", {"err": str(err)})
            emit("build_failed", {"error": str(err)})
            raise BuildError("build did not complete") from err

        return BuildOutcome(
            template=kind,
            files=state.tree.items(),
            steps=state.steps,
            selected_path=state.selected_path,
            rejected=rejected,
        )


def _discard(event_type: str, data: Dict[str, object]) -> None:
    return None
