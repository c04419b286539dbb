"""SQLAlchemy model for file metadata records."""
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class FileRecord(Base):
    """One row per stored file. attachment_uuid and file_url are both unique lookup keys."""
    __tablename__ = "files"

    # BigInteger on Postgres; plain INTEGER elsewhere so SQLite still autoincrements.
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    attachment_uuid: Mapped[str] = mapped_column(String(50), nullable=False)
    directory: Mapped[str | None] = mapped_column(String(400), nullable=True)
    file_url: Mapped[str] = mapped_column(String(512), nullable=False)
    file_type: Mapped[str | None] = mapped_column(String(240), nullable=True)
    file_name: Mapped[str | None] = mapped_column(String(240), nullable=True)
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    bucket_name: Mapped[str | None] = mapped_column(String(63), nullable=True)
    source_type: Mapped[str | None] = mapped_column(String(60), nullable=True)
    is_encrypted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    encryption_algorithm: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("uq_files_attachment_uuid", "attachment_uuid", unique=True),
        Index("uq_files_file_url", "file_url", unique=True),
    )
