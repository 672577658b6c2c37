"""
Line management: named roll configurations, bulk rolling and snapshots.
"""

from .line import Line, LineConfigView, LineSummary
from .line_manager import LineManager
from .line_serializer import LineSerializer, SnapshotError

__all__ = [
    "Line",
    "LineConfigView",
    "LineSummary",
    "LineManager",
    "LineSerializer",
    "SnapshotError",
]
