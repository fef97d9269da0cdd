# fastapi dependency injection
# shared id parsing and service construction for the routers

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status

from mindtrack.services.journal_service import JournalService
from mindtrack.services.store import MemoryStore, get_store

logger = logging.getLogger(__name__)


def parse_id(raw: Optional[str], label: str) -> int:
    """parse a path/query id, 400 'Invalid <label> ID' when it is not a positive integer"""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = 0
    if value < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} ID",
        )
    return value


async def get_journal_service(store: MemoryStore = Depends(get_store)) -> JournalService:
    """journal persistence boundary bound to the process store"""
    return JournalService(store)
