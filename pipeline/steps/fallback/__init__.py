"""Fallback payloads for the terminal FALLBACK state."""

from .main import build_emergency_payload, get_fallback_payload, resolve_fallback

__all__ = ["build_emergency_payload", "get_fallback_payload", "resolve_fallback"]
