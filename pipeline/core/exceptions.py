"""
Custom exceptions for request generation.

Contract violations are not exceptions: they are ValidationResult values
that drive the state machine. Only the caller-visible failures (input
validation, rate limiting) and the upstream model failures absorbed by the
runner are modelled here.
"""

from typing import List, Optional


class PipelineExecutionError(Exception):
    """
    Base exception for generation failures.

    All pipeline-specific exceptions inherit from this.
    """
    pass


class InputValidationError(PipelineExecutionError):
    """
    Raised when required booking/context fields are missing or malformed.

    Never retried. The pipeline is not invoked.

    Attributes:
        errors: One message per missing or malformed field
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Input validation failed: {'; '.join(self.errors)}")


class RateLimitExceeded(PipelineExecutionError):
    """
    Raised when a client exceeds its request budget for the current window.

    Attributes:
        retry_after: Seconds until the client's window rolls over
        limiter_name: Which limiter rejected the call
    """

    def __init__(self, retry_after: int, limiter_name: str = "default", client_id: Optional[str] = None):
        self.retry_after = retry_after
        self.limiter_name = limiter_name
        self.client_id = client_id
        super().__init__(f"Rate limit '{limiter_name}' exceeded, retry after {retry_after}s")


class UpstreamGenerationFailure(PipelineExecutionError):
    """
    Raised when the external model call fails or times out.

    Absorbed by the runner, which falls through to the fallback payload.
    """
    pass


class MalformedModelOutput(UpstreamGenerationFailure):
    """
    Raised when the model answers with text that is not a JSON object with
    the four expected string fields.
    """
    pass


class FallbackUnavailableError(PipelineExecutionError):
    """
    Raised when the static fallback payload fails contract validation.

    This is a programming error, never a runtime condition.
    """

    def __init__(self, reasons: List[str]):
        self.reasons = list(reasons)
        super().__init__(f"Static fallback payload is invalid: {'; '.join(self.reasons)}")
