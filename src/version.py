"""
Central version management for Game Dictionary Manager.
"""

from __future__ import annotations

__all__ = ["__app_name__", "__version__", "__release_date__", "__author__", "__license__"]

__app_name__ = "Game Dictionary Manager"
__version__ = "0.3.0"
__release_date__ = "2026-10-19"
__author__ = "Game Dictionary Manager contributors"
__license__ = "MIT"
