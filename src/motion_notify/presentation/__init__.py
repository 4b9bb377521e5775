"""Presentation layer package."""

from motion_notify.presentation.cli import main

__all__ = ["main"]
