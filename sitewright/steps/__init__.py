from .models import STEP_TYPES, Step, StepStatus, StepType, step_from_dict, step_to_dict
from .parser import DEFAULT_ARTIFACT_TITLE, parse_steps, step_title
from .tokens import Token, sanitize, tokenize

__all__ = [
    "STEP_TYPES",
    "Step",
    "StepStatus",
    "StepType",
    "step_from_dict",
    "step_to_dict",
    "DEFAULT_ARTIFACT_TITLE",
    "parse_steps",
    "step_title",
    "Token",
    "sanitize",
    "tokenize",
]
