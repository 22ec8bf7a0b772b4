"""
Application services built on the database utility layer.
"""

from .listing_service import PaginatedQueryService

__all__ = ["PaginatedQueryService"]
