"""Local host for the task and focus insight engine."""

__version__ = "0.1.0"
