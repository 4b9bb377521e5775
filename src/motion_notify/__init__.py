"""Queue picture uploads through an on-demand background worker."""

__version__ = "1.0.0"
