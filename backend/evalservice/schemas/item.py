import uuid
from datetime import datetime

from pydantic import Field

from evalservice.schemas.common import CamelModel, Grade, RequestModel, Weight


class EvaluationItemPayload(RequestModel):
    """
    One row of the desired state for a group.

    An ``id`` marks an existing item to keep (and update); rows without one
    are created. The group comes from the path, so a row cannot carry one.
    """

    id: uuid.UUID | None = None
    evaluation_system_id: uuid.UUID
    evaluation_type_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=100)
    weight: Weight
    min_grade: Grade | None = None


class EvaluationItemSync(RequestModel):
    items: list[EvaluationItemPayload]


class EvaluationItemResponse(CamelModel):
    id: uuid.UUID
    evaluation_system_id: uuid.UUID
    group_id: uuid.UUID
    evaluation_type_id: uuid.UUID
    name: str
    weight: float
    min_grade: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EvaluationItemSyncResult(CamelModel):
    created_count: int
    updated_count: int
    deleted_count: int
    items: list[EvaluationItemResponse] = []
