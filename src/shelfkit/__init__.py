"""shelfkit — a small book catalog organized into named collections."""

__version__ = "0.1.0"
