"""Single-user task list with priority ordering and durable storage."""

__version__ = "1.0.0"
