from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Dict, Optional
from datetime import datetime

from qrlink_app.qr.content import ContentType, QrCustomization
from qrlink_app.qr.client import QrStatus


class ShortLinkRecord(BaseModel):
    """Persisted short link as seen by the services.

    from_attributes=True lets repositories build it straight from ORM rows.
    """
    short_code: str
    long_url: str
    alias: Optional[str] = None
    expires_at: Optional[datetime] = None
    content_type: ContentType = ContentType.URL
    qr_status: QrStatus = QrStatus.FAILED
    qr_url: Optional[str] = None
    qr_config: Optional[Dict[str, Any]] = None
    click_count: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def _failed_qr_has_no_url(self):
        if self.qr_status == QrStatus.FAILED and self.qr_url is not None:
            raise ValueError("qr_url must be empty when qr_status is failed")
        return self


class ShortenRequest(BaseModel):
    # long_url stays optional here so a missing value is reported by the
    # service as a 400 together with malformed URLs
    long_url: Optional[str] = Field(None, description="The original URL to be shortened")
    alias: Optional[str] = Field(None, description="Caller-chosen short code")
    expires_at: Optional[datetime] = Field(None, description="Resolution stops after this instant")
    content_type: Optional[ContentType] = Field(None, description="QR content schema (default: url)")
    qr_data: Optional[Dict[str, Any]] = Field(None, description="QR payload for non-url content types")
    qr_customization: Optional[QrCustomization] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "long_url": "https://example.com/a/b",
                "alias": "promo",
                "content_type": "url",
                "qr_customization": {"errorCorrection": "H", "size": 400},
            }
        }
    )


class ShortenResponse(BaseModel):
    code: str
    short_url: str
    qr_url: Optional[str] = None
    content_type: ContentType

    @classmethod
    def from_record(cls, record: ShortLinkRecord, base_url: str) -> "ShortenResponse":
        return cls(
            code=record.short_code,
            short_url=f"{base_url.rstrip('/')}/{record.short_code}",
            qr_url=record.qr_url,
            content_type=record.content_type,
        )


class ResolveResponse(BaseModel):
    long_url: str


class HitRequest(BaseModel):
    code: Optional[str] = None


class HitResponse(BaseModel):
    ok: bool = True
