import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from evalservice.core.db import get_db
from evalservice.schemas.item import (
    EvaluationItemResponse,
    EvaluationItemSync,
    EvaluationItemSyncResult,
)
from evalservice.services.item_service import item_service

router = APIRouter(prefix="/evaluation-items", tags=["evaluation-items"])


@router.put("/sync/{group_id}", response_model=EvaluationItemSyncResult)
def sync_items(group_id: uuid.UUID, payload: EvaluationItemSync, db: Session = Depends(get_db)):
    """
    Bring the items of a group to the submitted list.

    Rows with an ``id`` update that item, rows without one are created and
    stored items left out are deleted. ``createdCount`` reflects what was
    actually written.
    """
    result = item_service.sync(db, group_id, payload.items)
    return EvaluationItemSyncResult.model_validate(result)


@router.get("/by-group/{group_id}", response_model=list[EvaluationItemResponse])
def list_items_by_group(group_id: uuid.UUID, db: Session = Depends(get_db)):
    return item_service.list_by_group(db, group_id)
