"""NAVI lending protocol."""
from . import calls, parser

__all__ = ["calls", "parser"]
