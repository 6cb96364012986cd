"""ORM model for admitted documents (normalized text ready for chunking)."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, func

from supportdesk.models.account import new_id
from supportdesk.models.base import Base


class DocumentRecord(Base):
    """
    One row per admitted upload. Raw bytes are never stored, only the
    normalized text. chunk_count and external_index_id are reserved for the
    chunking/embedding stage and are not populated at admission.
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_uploaded_by_uploaded_at", "uploaded_by", "uploaded_at"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    filename = Column(String(512), nullable=False)
    original_name = Column(String(512), nullable=False)
    file_type = Column(String(8), nullable=False, index=True)
    file_size = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    chunk_count = Column(Integer, nullable=False, default=0)
    external_index_id = Column(String(255), nullable=True)
    uploaded_by = Column(
        String(32),
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    )
    uploaded_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
