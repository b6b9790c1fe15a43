from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from qrlink_app.database.connection import Base


class ShortLink(Base):
    """
    Short link row.

    short_code is the public identifier and carries the uniqueness constraint
    that alias conflicts and generated-code collisions are detected against.
    Rows are never updated except for click_count.
    """
    __tablename__ = "short_links"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # Note: unique=True automatically creates an index
    short_code = Column(String(64), unique=True, nullable=False, index=True)
    long_url = Column(String, nullable=False)
    alias = Column(String(64), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    content_type = Column(String(16), nullable=False, default="url")
    qr_status = Column(String(16), nullable=False, default="failed")
    qr_url = Column(String, nullable=True)
    qr_config = Column(JSON, nullable=True)  # Customization snapshot, not re-validated
    click_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
