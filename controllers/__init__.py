"""
Controllers for route handlers.

Controllers:
- Take request data as parameters
- Drive the SetupGate and return FT components
- Don't use @rt decorators (those stay in main.py)
"""

from .job_progress import PanelController

__all__ = ["PanelController"]
