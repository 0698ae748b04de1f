"""Persistence of sheets"""

from .json_store import JsonSheetStore

__all__ = ["JsonSheetStore"]
