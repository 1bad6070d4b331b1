from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from sitewright.config import ModelPolicy
from .errors import BuildError, TemplateRejected
from .prompts import CLASSIFY_PROMPT, system_prompt
from .templates import TEMPLATE_KINDS

if TYPE_CHECKING:
    from ai_kit import Kit, ModelRecord
    from ai_kit.router import ModelRouter


@dataclass
class ChatMessage:
    role: str
    content: str


class ModelClient:
    """Opaque text producer backed by ai-kit."""

    def __init__(
        self,
        kit: "Kit",
        policy: ModelPolicy,
        router: "ModelRouter",
    ) -> None:
        self._kit = kit
        self._policy = policy
        self._router = router

    def classify(self, prompt: str) -> str:
        answer = self._generate(
            [
                ChatMessage(role="assistant", content=CLASSIFY_PROMPT),
                ChatMessage(role="user", content=prompt),
            ]
        ).strip()
        if answer not in TEMPLATE_KINDS:
            raise TemplateRejected(answer)
        return answer

    def generate(self, messages: List[ChatMessage]) -> str:
        history = [ChatMessage(role="user", content=system_prompt())]
        history.extend(
            ChatMessage(role="user" if msg.role == "user" else "assistant", content=msg.content)
            for msg in messages
        )
        return self._generate(history)

    def _generate(self, messages: List[ChatMessage]) -> str:
        if not self._kit:
            raise BuildError("kit is nil")
        model = self._resolve_model()
        from ai_kit import ContentPart, GenerateInput, Message

        output = self._kit.generate(
            GenerateInput(
                provider=model.provider,
                model=model.providerModelId,
                messages=[
                    Message(role=msg.role, content=[ContentPart(type="text", text=msg.content)])
                    for msg in messages
                ],
            )
        )
        return output.text or ""

    def _resolve_model(self) -> "ModelRecord":
        from ai_kit import ModelConstraints, ModelResolutionRequest

        records = self._kit.list_model_records()
        resolved = self._router.resolve(
            records,
            ModelResolutionRequest(
                constraints=ModelConstraints(
                    requireTools=self._policy.require_tools,
                    requireVision=self._policy.require_vision,
                    maxCostUsd=self._policy.max_cost_usd,
                ),
                preferredModels=self._policy.preferred_models,
            ),
        )
        return resolved.primary
