"""Analysis Service client and the preview dataset."""

from .client import AnalysisClient
from .dataset import PreviewDataset, PreviewStats
from .models import NotificationRow, PreviewItem, build_subject

__all__ = ["AnalysisClient", "PreviewDataset", "PreviewStats", "NotificationRow", "PreviewItem", "build_subject"]
