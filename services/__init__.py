"""
Services module for shared state and external integrations.
"""

from services.delivery import DeliveryBackend, DeliveryNotFound
from services.rate_limiter import FixedWindowRateLimiter, RateWindow

__all__ = ["DeliveryBackend", "DeliveryNotFound", "FixedWindowRateLimiter", "RateWindow"]
