from .errors import BuildError, TemplateRejected
from .model_client import ChatMessage, ModelClient
from .prompts import BASE_PROMPT, CLASSIFY_PROMPT, project_context_prompt, system_prompt
from .runner import BuildRunner
from .session import BuildOutcome, Builder, TextProducer
from .templates import TEMPLATE_KINDS, TemplatePrompts, template_prompts

__all__ = [
    "BuildError",
    "TemplateRejected",
    "ChatMessage",
    "ModelClient",
    "BASE_PROMPT",
    "CLASSIFY_PROMPT",
    "project_context_prompt",
    "system_prompt",
    "BuildRunner",
    "BuildOutcome",
    "Builder",
    "TextProducer",
    "TEMPLATE_KINDS",
    "TemplatePrompts",
    "template_prompts",
]
