import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from evalservice.core.db import get_db
from evalservice.schemas.common import DeleteResponse
from evalservice.schemas.system import (
    EvaluationSystemCreate,
    EvaluationSystemResponse,
    EvaluationSystemUpdate,
)
from evalservice.services.system_service import system_service

router = APIRouter(prefix="/evaluation-systems", tags=["evaluation-systems"])


@router.post("", response_model=EvaluationSystemResponse, status_code=status.HTTP_201_CREATED)
def create_system(payload: EvaluationSystemCreate, db: Session = Depends(get_db)):
    return system_service.create(
        db,
        payload.course_id,
        payload.evaluation_groups,
        academic_year_id=payload.academic_year_id,
        active=payload.active,
    )


@router.get("/by-course/{course_id}", response_model=EvaluationSystemResponse)
def get_system_by_course(course_id: uuid.UUID, db: Session = Depends(get_db)):
    return system_service.get_by_course(db, course_id)


@router.get("/{system_id}", response_model=EvaluationSystemResponse)
def get_system(system_id: uuid.UUID, db: Session = Depends(get_db)):
    return system_service.get(db, system_id)


@router.put("/{system_id}", response_model=EvaluationSystemResponse)
def update_system(
    system_id: uuid.UUID,
    payload: EvaluationSystemUpdate,
    db: Session = Depends(get_db),
):
    # validated is owned by the policy check, an echoed value is ignored
    return system_service.update(
        db,
        system_id,
        payload.evaluation_groups,
        course_id=payload.course_id,
        academic_year_id=payload.academic_year_id,
        active=payload.active,
    )


@router.delete("/{system_id}", response_model=DeleteResponse)
def delete_system(system_id: uuid.UUID, db: Session = Depends(get_db)):
    system_service.delete(db, system_id)
    return DeleteResponse()
