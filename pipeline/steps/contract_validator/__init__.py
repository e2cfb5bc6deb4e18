"""Contract validator: pure checks of generated payloads."""

from .main import validate_output

__all__ = ["validate_output"]
