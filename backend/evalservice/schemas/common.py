from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CENTS = Decimal("0.01")


def _to_cents(value: float) -> float:
    # Same rounding as a numeric(_, 2) column, so stored and submitted values compare equal
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _to_positive_cents(value: float) -> float:
    value = _to_cents(value)
    if value <= 0:
        raise ValueError("must be at least 0.01")
    return value


Percentage = Annotated[float, Field(ge=0, le=100), AfterValidator(_to_cents)]
Weight = Annotated[float, Field(gt=0, le=100), AfterValidator(_to_positive_cents)]
Grade = Annotated[float, Field(ge=0, le=10), AfterValidator(_to_cents)]


class CamelModel(BaseModel):
    """Base for response models: camelCase on the wire, read from ORM rows."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class RequestModel(BaseModel):
    """Base for request payloads. Unknown fields reject the whole payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class DeleteResponse(CamelModel):
    success: bool = True
