"""Stats-tracking backend for tabletop game nights"""

__version__ = "1.0.0"
