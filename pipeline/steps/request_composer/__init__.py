"""Prompt building, input sanitization and the model-call collaborator."""

from .main import RequestComposer
from .prompts import create_correction_prompt, create_generation_prompt
from .utils import format_stay_dates, parse_model_output, sanitize_input

__all__ = [
    "RequestComposer",
    "create_correction_prompt",
    "create_generation_prompt",
    "format_stay_dates",
    "parse_model_output",
    "sanitize_input",
]
