"""
Application Services Layer

Orchestrates the content domain: lifecycle engine and expiry sweeper.
"""

from .content_results import ConsumeResult, CreateContentRequest, CreateResult, SweepStats, UploadedFile
from .content_service import ContentService
from .dependency_container import DependencyContainer, DependencyNotFoundError
from .expiry_sweeper import ExpirySweeper

__all__ = [
    'ConsumeResult',
    'ContentService',
    'CreateContentRequest',
    'CreateResult',
    'DependencyContainer',
    'DependencyNotFoundError',
    'ExpirySweeper',
    'SweepStats',
    'UploadedFile',
]
