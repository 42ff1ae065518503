from sqlalchemy import Column, String, Date, Time, DateTime, BigInteger, ForeignKey, Text, Index, func
from sqlalchemy.orm import relationship
import uuid

from .database import Base


class CashbookEntry(Base):
    __tablename__ = "cashbook_entries"
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    cashbook_id = Column(String, nullable=False)
    entry_type = Column(String, nullable=False)  # 'cash_in', 'cash_out'
    amount_minor = Column(BigInteger, nullable=False)  # Integer minor units, always positive
    occurred_on = Column(Date, nullable=False)
    occurred_at = Column(Time, nullable=True)
    party_id = Column(String, nullable=True)
    party_name = Column(String, nullable=True)
    category_id = Column(String, nullable=True)
    category_name = Column(String, nullable=True)
    payment_mode = Column(String, nullable=True)
    remarks = Column(Text, nullable=True)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    attachments = relationship(
        "EntryAttachment",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="EntryAttachment.position",
    )

    __table_args__ = (
        Index('ix_entries_cashbook_date', 'cashbook_id', 'occurred_on'),
    )

    @property
    def attachment_ids(self):
        return [a.attachment_id for a in self.attachments]


class EntryAttachment(Base):
    """Links an entry to an attachment record held by the file store."""
    __tablename__ = "entry_attachments"
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    entry_id = Column(String, ForeignKey("cashbook_entries.id", ondelete="CASCADE"), nullable=False)
    attachment_id = Column(String, nullable=False)
    position = Column(BigInteger, nullable=False, default=0)

    entry = relationship("CashbookEntry", back_populates="attachments")

    __table_args__ = (
        Index('ix_entry_attachments_entry', 'entry_id'),
    )
