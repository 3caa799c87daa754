"""
Blob Storage Domain

Contract for the stores that hold file bytes outside the metadata record.
"""

from .storage_repository import IBlobStorage

__all__ = ["IBlobStorage"]
