"""
Hooks called by the ownership side when subjects and courses change.

``PUT`` creates the configuration record and links it (201) the first time,
and replaces it afterwards (200). ``DELETE`` removes it and clears the link.
"""

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from evalservice.core.db import get_db
from evalservice.models.owner import Course, Subject
from evalservice.schemas.common import DeleteResponse
from evalservice.schemas.owner import CourseSystemPut, SubjectPolicyPut
from evalservice.schemas.policy import EvaluationPolicyResponse
from evalservice.schemas.system import EvaluationSystemResponse
from evalservice.services.backref_service import backref_service

router = APIRouter(tags=["owners"])


@router.get("/subjects/{subject_id}/evaluation-policy", response_model=EvaluationPolicyResponse)
def get_subject_policy(subject_id: uuid.UUID, db: Session = Depends(get_db)):
    return backref_service.get_subject_policy(db, subject_id)


@router.put("/subjects/{subject_id}/evaluation-policy", response_model=EvaluationPolicyResponse)
def put_subject_policy(
    subject_id: uuid.UUID,
    payload: SubjectPolicyPut,
    response: Response,
    db: Session = Depends(get_db),
):
    subject = db.get(Subject, subject_id)
    if subject is not None and subject.evaluation_policy_id is None:
        response.status_code = status.HTTP_201_CREATED
        return backref_service.attach_policy(db, subject_id, payload.policy_rules)
    return backref_service.replace_policy(db, subject_id, payload.policy_rules)


@router.delete("/subjects/{subject_id}/evaluation-policy", response_model=DeleteResponse)
def delete_subject_policy(subject_id: uuid.UUID, db: Session = Depends(get_db)):
    backref_service.detach_policy(db, subject_id)
    return DeleteResponse()


@router.get("/courses/{course_id}/evaluation-system", response_model=EvaluationSystemResponse)
def get_course_system(course_id: uuid.UUID, db: Session = Depends(get_db)):
    return backref_service.get_course_system(db, course_id)


@router.put("/courses/{course_id}/evaluation-system", response_model=EvaluationSystemResponse)
def put_course_system(
    course_id: uuid.UUID,
    payload: CourseSystemPut,
    response: Response,
    db: Session = Depends(get_db),
):
    course = db.get(Course, course_id)
    if course is not None and course.evaluation_system_id is None:
        response.status_code = status.HTTP_201_CREATED
        return backref_service.attach_system(
            db, course_id, payload.evaluation_groups, payload.academic_year_id
        )
    return backref_service.replace_system(
        db, course_id, payload.evaluation_groups, payload.academic_year_id
    )


@router.delete("/courses/{course_id}/evaluation-system", response_model=DeleteResponse)
def delete_course_system(course_id: uuid.UUID, db: Session = Depends(get_db)):
    backref_service.detach_system(db, course_id)
    return DeleteResponse()
