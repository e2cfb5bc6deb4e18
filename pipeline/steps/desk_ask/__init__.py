"""Desk-ask UI copy generation with a static fallback card."""

from .main import DESK_ASK_FALLBACK, generate_desk_ask_copy
from .models import DeskAskCopy

__all__ = ["DESK_ASK_FALLBACK", "DeskAskCopy", "generate_desk_ask_copy"]
