# Vesslo Launcher Utilities Package
"""
Shared utility functions and helpers for the Vesslo launcher.
"""

from .helpers import build_router, close_launcher, load_settings

__all__ = ["build_router", "close_launcher", "load_settings"]
