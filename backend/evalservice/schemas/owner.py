import uuid

from pydantic import Field

from evalservice.schemas.common import RequestModel
from evalservice.schemas.policy import PolicyRuleCreate
from evalservice.schemas.system import EvaluationGroupCreate


class SubjectPolicyPut(RequestModel):
    policy_rules: list[PolicyRuleCreate] = Field(..., min_length=1)


class CourseSystemPut(RequestModel):
    evaluation_groups: list[EvaluationGroupCreate] = Field(..., min_length=1)
    academic_year_id: uuid.UUID | None = None
