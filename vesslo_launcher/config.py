"""
Vesslo Launcher - Main Ignis Configuration

This file is the entry point for Ignis. It creates the palette window,
which stays hidden until toggled.

Usage:
  ignis toggle-window vesslo-palette
"""

import os

from ignis.app import IgnisApp
from loguru import logger

from vesslo_launcher.panels.palette import PalettePanel

config_dir = os.path.dirname(os.path.realpath(__file__))

# Get Ignis app instance
app = IgnisApp.get_default()

# Load CSS styling from the package's styles directory
styles_dir = os.path.join(config_dir, "styles")
for stylesheet in ("colors.css", "main.css"):
    try:
        app.apply_css(os.path.join(styles_dir, stylesheet))
    except Exception:
        logger.warning(f"Could not load {stylesheet}")

palette_panel = PalettePanel()
palette_window = palette_panel.create_window()

# Keep a reference for other Ignis modules
palette_window.panel = palette_panel

logger.info("Vesslo palette initialized, toggle with: ignis toggle-window vesslo-palette")
