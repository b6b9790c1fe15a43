"""
Database models for the QR link shortener.
"""

from .short_link import ShortLink

__all__ = ["ShortLink"]
