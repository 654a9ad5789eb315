# Vesslo Launcher Package
"""
Command palette integration for the Vesslo app manager.

Views:
  - Search (default): Apps by name, developer, tag, or memo
  - Tags (#): Browse apps grouped by tag
  - Updates (u:): Pending updates grouped by source or sorted
  - Homebrew (brew:): Bulk Homebrew cask updates
"""

__version__ = "0.1.0-dev"
