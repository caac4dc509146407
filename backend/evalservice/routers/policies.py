import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from evalservice.core.db import get_db
from evalservice.schemas.common import DeleteResponse
from evalservice.schemas.policy import (
    EvaluationPolicyCreate,
    EvaluationPolicyResponse,
    EvaluationPolicyUpdate,
)
from evalservice.services.policy_service import policy_service

router = APIRouter(prefix="/evaluation-policies", tags=["evaluation-policies"])


@router.post("", response_model=EvaluationPolicyResponse, status_code=status.HTTP_201_CREATED)
def create_policy(payload: EvaluationPolicyCreate, db: Session = Depends(get_db)):
    return policy_service.create(db, payload.subject_id, payload.policy_rules)


@router.get("/by-subject/{subject_id}", response_model=EvaluationPolicyResponse)
def get_policy_by_subject(subject_id: uuid.UUID, db: Session = Depends(get_db)):
    return policy_service.get_by_subject(db, subject_id)


@router.get("/{policy_id}", response_model=EvaluationPolicyResponse)
def get_policy(policy_id: uuid.UUID, db: Session = Depends(get_db)):
    return policy_service.get(db, policy_id)


@router.put("/{policy_id}", response_model=EvaluationPolicyResponse)
def update_policy(
    policy_id: uuid.UUID,
    payload: EvaluationPolicyUpdate,
    db: Session = Depends(get_db),
):
    return policy_service.update(db, policy_id, payload.policy_rules, subject_id=payload.subject_id)


@router.delete("/{policy_id}", response_model=DeleteResponse)
def delete_policy(policy_id: uuid.UUID, db: Session = Depends(get_db)):
    policy_service.delete(db, policy_id)
    return DeleteResponse()
