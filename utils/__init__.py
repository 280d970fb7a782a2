"""
Utility functions for the MCQ Extractor client.

This package contains pure utility functions:
- core: clamping and other numeric helpers
"""

from .core import clamp

__all__ = ["clamp"]
