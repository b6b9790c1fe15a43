"""
QR content payloads and rendering customization.

Each content type has its own payload model. Only the fields a QR schema
cannot do without are required; anything else the caller sends is kept
and forwarded to the QR backend untouched.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class ContentType(str, Enum):
    """Semantic schema encoded in the QR image"""
    URL = "url"
    VCARD = "vcard"
    WIFI = "wifi"
    EMAIL = "email"
    SMS = "sms"


class QrContent(BaseModel):
    """Base payload: unknown fields are allowed and preserved"""
    model_config = ConfigDict(extra="allow")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class UrlContent(QrContent):
    url: str = Field(..., min_length=1)


class VCardContent(QrContent):
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    organization: Optional[str] = None


class WifiContent(QrContent):
    ssid: str = Field(..., min_length=1)
    password: Optional[str] = None
    encryption: Optional[str] = None  # WPA, WEP or nopass


class EmailContent(QrContent):
    to: str = Field(..., min_length=1)
    subject: Optional[str] = None
    body: Optional[str] = None


class SmsContent(QrContent):
    number: str = Field(..., min_length=1)
    message: Optional[str] = None


CONTENT_MODELS: Dict[ContentType, Type[QrContent]] = {
    ContentType.URL: UrlContent,
    ContentType.VCARD: VCardContent,
    ContentType.WIFI: WifiContent,
    ContentType.EMAIL: EmailContent,
    ContentType.SMS: SmsContent,
}


def build_content(content_type: ContentType, data: Optional[Mapping[str, Any]]) -> QrContent:
    """
    Validate raw content data against the model for its content type.

    Raises:
        pydantic.ValidationError: if a required field is missing or empty
    """
    model = CONTENT_MODELS[ContentType(content_type)]
    return model.model_validate(dict(data or {}))


class QrColors(BaseModel):
    model_config = ConfigDict(extra="allow")

    foreground: Optional[str] = None
    background: Optional[str] = None


class QrCustomization(BaseModel):
    """
    Rendering hints for the QR image.

    Accepts both ``errorCorrection`` and ``error_correction``; the backend
    always receives camelCase keys. Values are passed through as given, the
    QR backend decides what it can render.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    colors: Optional[QrColors] = None
    error_correction: Optional[str] = Field(None, alias="errorCorrection")  # L, M, Q or H
    size: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# Sent when the caller gives no customization at all
DEFAULT_CUSTOMIZATION: Dict[str, Any] = {"errorCorrection": "M", "size": 300}
