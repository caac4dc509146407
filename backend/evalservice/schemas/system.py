import uuid
from datetime import datetime

from pydantic import Field

from evalservice.schemas.common import CamelModel, RequestModel, Weight


class EvaluationGroupCreate(RequestModel):
    evaluation_type_id: uuid.UUID
    total_weight: Weight
    id: uuid.UUID | None = None


class EvaluationSystemCreate(RequestModel):
    course_id: uuid.UUID
    evaluation_groups: list[EvaluationGroupCreate] = Field(..., min_length=1)
    academic_year_id: uuid.UUID | None = None
    active: bool = False


class EvaluationSystemUpdate(RequestModel):
    evaluation_groups: list[EvaluationGroupCreate] = Field(..., min_length=1)
    course_id: uuid.UUID | None = None
    academic_year_id: uuid.UUID | None = None
    active: bool | None = None
    id: uuid.UUID | None = None
    validated: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EvaluationGroupResponse(CamelModel):
    id: uuid.UUID
    evaluation_type_id: uuid.UUID
    total_weight: float


class EvaluationSystemResponse(CamelModel):
    id: uuid.UUID
    course_id: uuid.UUID
    academic_year_id: uuid.UUID | None = None
    active: bool = False
    validated: bool = False
    evaluation_groups: list[EvaluationGroupResponse] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
