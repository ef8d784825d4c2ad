"""Testing utilities for code that logs through spanlog."""

from .mock import CapturedStream, MockTransport, Post

__all__ = ["CapturedStream", "MockTransport", "Post"]
