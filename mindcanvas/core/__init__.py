"""Core: MindMap orchestrator and undo/redo history."""
from .history import MAX_HISTORY, History, HistoryRecord
from .mindmap import MindMap

__all__ = ["MAX_HISTORY", "History", "HistoryRecord", "MindMap"]
