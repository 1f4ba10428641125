"""Image and media understanding calls."""

from .fit import FitAnalyzer, image_part_from_locator
from .media import MediaAnalyzer

__all__ = ['FitAnalyzer', 'image_part_from_locator', 'MediaAnalyzer']
