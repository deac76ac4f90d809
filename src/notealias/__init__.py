"""notealias — document identity and alias management for a note service."""

__version__ = "0.1.0"
