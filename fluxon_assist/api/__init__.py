# HTTP API for Fluxon completion

from .completion import router

__all__ = ["router"]
