"""Tag classification rule compiler."""

__version__ = "0.1.0"
