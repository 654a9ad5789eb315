# Vesslo Launcher Services Package
"""
Backend services for the Vesslo launcher.

Services read the Vesslo snapshot, search and group it, and run the
external commands behind palette actions.
"""

from .data import VessloDataStore, get_data_store, is_vesslo_running, load_vesslo_data

__all__ = ["VessloDataStore", "get_data_store", "is_vesslo_running", "load_vesslo_data"]
