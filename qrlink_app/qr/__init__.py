"""
QR rendering module: content payload models and the rendering service client.
"""

from .content import (
    ContentType,
    QrContent,
    UrlContent,
    VCardContent,
    WifiContent,
    EmailContent,
    SmsContent,
    QrColors,
    QrCustomization,
    build_content,
)
from .client import QrClient, QrRenderResult, QrStatus

__all__ = [
    "ContentType",
    "QrContent",
    "UrlContent",
    "VCardContent",
    "WifiContent",
    "EmailContent",
    "SmsContent",
    "QrColors",
    "QrCustomization",
    "build_content",
    "QrClient",
    "QrRenderResult",
    "QrStatus",
]
