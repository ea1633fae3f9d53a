# Terminal frontend for Fluxon completion

from .completer import FluxonCompleter
from .console_app import ConsoleApp
from .main import main

__all__ = [
    "ConsoleApp",
    "FluxonCompleter",
    "main",
]
