"""
Logfire configuration and initialization.

Logfire provides structured logging and tracing for the request pipeline,
the rate limiters and the pydantic-ai model calls.

Environment Variables:
    LOGFIRE_TOKEN: Logfire project token (optional; without it logs stay local)
    ENVIRONMENT: deployment environment (development, staging, production)
"""
import os
from typing import Optional

import logfire


class LogfireConfig:
    """
    Logfire configuration singleton.

    Ensures Logfire is initialized only once. Without a token, spans and
    logs are still produced but nothing is sent to Logfire.
    """

    _initialized = False

    @classmethod
    def initialize(cls, token: Optional[str] = None) -> None:
        """
        Initialize Logfire and instrument pydantic-ai.

        Args:
            token: Logfire project token (or set LOGFIRE_TOKEN env var)
        """
        if cls._initialized:
            return

        token = token or os.getenv("LOGFIRE_TOKEN") or None

        logfire.configure(
            token=token,
            service_name="stay-request-api",
            environment=os.getenv("ENVIRONMENT", "development"),
            send_to_logfire="if-token-present",
        )
        logfire.instrument_pydantic_ai()

        cls._initialized = True

    @classmethod
    def is_initialized(cls) -> bool:
        """
        Check if Logfire has been initialized.

        Returns:
            True if initialized, False otherwise
        """
        return cls._initialized
