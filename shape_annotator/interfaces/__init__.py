"""
Interfaces module - UI adapters for the annotation core.

Provides adapters to connect the core interaction logic
with different UI frameworks (OpenCV, Qt, Web, etc).
"""

from .gui_adapter import CanvasAdapter

__all__ = ['CanvasAdapter']
