import logging
from typing import List

from fastapi import APIRouter, Depends, status

from mindjournal import schemas
from mindjournal.auth import get_current_user, get_journal_service
from mindjournal.models.models import User
from mindjournal.services.journal_service import JournalService

logger = logging.getLogger("routes.journal")
router = APIRouter(tags=["Journal"])


@router.post("", response_model=schemas.JournalOut, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: schemas.JournalCreate,
    user: User = Depends(get_current_user),
    service: JournalService = Depends(get_journal_service),
):
    """Classify the entry, attach a coping suggestion and store it."""
    return await service.create_entry(user.id, body.content)


@router.get("", response_model=List[schemas.JournalOut])
async def list_entries(
    user: User = Depends(get_current_user),
    service: JournalService = Depends(get_journal_service),
):
    return await service.list_entries(user.id)


@router.get("/ai-status", response_model=schemas.AIStatus)
async def ai_status(
    user: User = Depends(get_current_user),
    service: JournalService = Depends(get_journal_service),
):
    """Which AI features call a live model and which answer with fallbacks."""
    return service.ai_status()


@router.get("/{entry_id}", response_model=schemas.JournalOut)
async def get_entry(
    entry_id: str,
    user: User = Depends(get_current_user),
    service: JournalService = Depends(get_journal_service),
):
    return await service.get_entry(entry_id, user.id)
