"""
Cashbook entries router
"""
from fastapi import APIRouter, Depends, status, Response

from cashbook import schemas
from cashbook.core.dependencies import get_current_member, get_entry_service
from cashbook.services.entry_service import EntryService
from cashbook.services.ledger_service import entry_model_response
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cashbooks/{cashbook_id}/entries", tags=["entries"])


@router.post("", response_model=schemas.EntryResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    cashbook_id: str,
    entry_data: schemas.EntryCreate,
    member_id: str = Depends(get_current_member),
    entry_service: EntryService = Depends(get_entry_service)
):
    """Record a cash-in or cash-out entry"""
    entry = entry_service.create_entry(cashbook_id, entry_data, member_id)
    return entry_model_response(entry)


@router.get("/{entry_id}", response_model=schemas.EntryResponse)
def get_entry(
    cashbook_id: str,
    entry_id: str,
    member_id: str = Depends(get_current_member),
    entry_service: EntryService = Depends(get_entry_service)
):
    return entry_model_response(entry_service.get_entry(cashbook_id, entry_id))


@router.put("/{entry_id}", response_model=schemas.EntryResponse)
def update_entry(
    cashbook_id: str,
    entry_id: str,
    entry_data: schemas.EntryUpdate,
    member_id: str = Depends(get_current_member),
    entry_service: EntryService = Depends(get_entry_service)
):
    """Replace every mutable field of an entry"""
    entry = entry_service.update_entry(cashbook_id, entry_id, entry_data)
    return entry_model_response(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    cashbook_id: str,
    entry_id: str,
    member_id: str = Depends(get_current_member),
    entry_service: EntryService = Depends(get_entry_service)
):
    entry_service.delete_entry(cashbook_id, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{entry_id}/move", response_model=schemas.EntryResponse)
def move_entry(
    cashbook_id: str,
    entry_id: str,
    request: schemas.MoveEntryRequest,
    member_id: str = Depends(get_current_member),
    entry_service: EntryService = Depends(get_entry_service)
):
    """Move an entry to another cashbook"""
    entry = entry_service.move_entry(cashbook_id, entry_id, request.target_cashbook_id)
    return entry_model_response(entry)


@router.post("/{entry_id}/copy", response_model=schemas.EntryResponse, status_code=status.HTTP_201_CREATED)
def copy_entry(
    cashbook_id: str,
    entry_id: str,
    request: schemas.CopyEntryRequest,
    member_id: str = Depends(get_current_member),
    entry_service: EntryService = Depends(get_entry_service)
):
    """Copy an entry to another cashbook, optionally flipping cash in and cash out"""
    entry = entry_service.copy_entry(
        cashbook_id, entry_id, request.target_cashbook_id, member_id, request.opposite
    )
    return entry_model_response(entry)
