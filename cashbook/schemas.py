from pydantic import BaseModel, field_validator, Field, ConfigDict
from typing import List, Optional
from datetime import date, datetime, time
from decimal import Decimal

from cashbook.engine.entry import EntryType


# ============================================================================
# Entry Schemas
# ============================================================================

class EntryBase(BaseModel):
    entry_type: EntryType
    amount: Decimal
    occurred_on: Optional[date] = None
    occurred_at: Optional[time] = None
    party_id: Optional[str] = None
    party_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    payment_mode: Optional[str] = None
    remarks: Optional[str] = None
    attachment_ids: List[str] = Field(default_factory=list)

    @field_validator('entry_type', mode='before')
    @classmethod
    def normalize_entry_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('party_id', 'party_name', 'category_id', 'category_name', 'payment_mode')
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator('remarks')
    @classmethod
    def validate_remarks(cls, v):
        if v is None:
            return v
        if len(v) > 1000:
            raise ValueError('Remarks too long (max 1000 characters)')
        return v.strip() or None

    @field_validator('attachment_ids')
    @classmethod
    def unique_attachments(cls, v):
        seen = []
        for attachment_id in v:
            if attachment_id and attachment_id not in seen:
                seen.append(attachment_id)
        return seen


class EntryCreate(EntryBase):
    pass


class EntryUpdate(EntryBase):
    """Full replacement of an entry's mutable fields"""
    pass


class EntryResponse(BaseModel):
    id: str
    cashbook_id: str
    entry_type: EntryType
    amount: Decimal
    occurred_on: date
    occurred_at: Optional[time] = None
    party_id: Optional[str] = None
    party_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    payment_mode: Optional[str] = None
    remarks: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    attachment_ids: List[str] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)


class MoveEntryRequest(BaseModel):
    target_cashbook_id: str

    @field_validator('target_cashbook_id')
    @classmethod
    def validate_target(cls, v):
        if not v or not v.strip():
            raise ValueError('Target cashbook cannot be empty')
        return v.strip()


class CopyEntryRequest(MoveEntryRequest):
    opposite: bool = False


# ============================================================================
# Ledger & Report Schemas
# ============================================================================

class LedgerRow(BaseModel):
    entry: EntryResponse
    running_balance: Decimal


class GroupSummaryResponse(BaseModel):
    key: str
    label: str
    cash_in: Decimal
    cash_out: Decimal
    balance: Decimal
    entry_count: int


class GrandSummaryResponse(BaseModel):
    total_cash_in: Decimal
    total_cash_out: Decimal
    final_balance: Decimal
    entry_count: int


class FilterEcho(BaseModel):
    duration: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: str
    party: str
    category: str
    payment_modes: List[str]
    member: str
    search: Optional[str] = None


class LedgerResponse(BaseModel):
    cashbook_id: str
    group_by: str
    groups: List[GroupSummaryResponse]
    grand: GrandSummaryResponse
    entries: List[LedgerRow]
    filter_echo: FilterEcho
    page: Optional[int] = None
    page_size: Optional[int] = None
    total_entries: int


class ReportResponse(BaseModel):
    cashbook_id: str
    group_by: str
    is_summary: bool
    title_suffix: Optional[str] = None
    balance_caption: str
    currency_code: str
    groups: List[GroupSummaryResponse]
    grand: GrandSummaryResponse
    entries: List[LedgerRow]
    total_entries: int
    filter_echo: FilterEcho
    generated_at: datetime
    generated_by: Optional[str] = None
