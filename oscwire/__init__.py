"""OSC messages and bundles, pattern matching, time tags, a thread link and an undo history."""

__version__ = "0.1.0"

__all__ = ["message", "bundle", "matching", "timetag", "thread_link", "undo"]