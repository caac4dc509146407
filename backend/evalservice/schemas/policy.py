import uuid
from datetime import datetime

from pydantic import Field, model_validator

from evalservice.schemas.common import CamelModel, Percentage, RequestModel


class PolicyRuleBase(RequestModel):
    evaluation_type_id: uuid.UUID
    min_percentage: Percentage
    max_percentage: Percentage

    @model_validator(mode="after")
    def check_range(self):
        if self.min_percentage > self.max_percentage:
            raise ValueError("minPercentage must not exceed maxPercentage")
        return self


class PolicyRuleCreate(PolicyRuleBase):
    # Echoed back by clients that resubmit a fetched policy
    id: uuid.UUID | None = None


class EvaluationPolicyCreate(RequestModel):
    subject_id: uuid.UUID
    policy_rules: list[PolicyRuleCreate] = Field(..., min_length=1)


class EvaluationPolicyUpdate(RequestModel):
    policy_rules: list[PolicyRuleCreate] = Field(..., min_length=1)
    subject_id: uuid.UUID | None = None
    id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PolicyRuleResponse(CamelModel):
    id: uuid.UUID
    evaluation_type_id: uuid.UUID
    min_percentage: float
    max_percentage: float


class EvaluationPolicyResponse(CamelModel):
    id: uuid.UUID
    subject_id: uuid.UUID
    policy_rules: list[PolicyRuleResponse] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
