"""Repair engine: deterministic patches for near-miss payloads."""

from .main import repair_output

__all__ = ["repair_output"]
