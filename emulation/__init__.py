"""Classroom behaviour and points tracker."""

__version__ = "0.1.0"
