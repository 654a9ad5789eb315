# Vesslo Launcher Panels Package
"""
Panel implementations for the Vesslo launcher.

The palette window renders routed results and runs their actions.
"""

from .palette import PalettePanel

__all__ = ["PalettePanel"]
