"""Inline content directives: deferred deletion, scheduled publishing and comment sort defaults."""

__version__ = "0.1.0"
