"""Whole-document passes run after rendering."""

from .links import LinkInjector
from .overview import OverviewSummarizer
from .repair import StructuralRepair

__all__ = ["LinkInjector", "OverviewSummarizer", "StructuralRepair"]
