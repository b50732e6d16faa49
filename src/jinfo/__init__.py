"""jinfo: a simple memo tool with daily logs and tag search."""

__version__ = "1.0.0"
