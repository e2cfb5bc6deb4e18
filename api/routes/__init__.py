"""
API route handlers.
"""

from api.routes.delivery import router as delivery_router
from api.routes.desk_ask import router as desk_ask_router
from api.routes.generation import router as generation_router

__all__ = ["delivery_router", "desk_ask_router", "generation_router"]
