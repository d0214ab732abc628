import math

from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from app.core.exceptions import ValidationFailed


class PaginationParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, params: PaginationParams, total: int) -> "PaginationMeta":
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=math.ceil(total / params.limit),
        )


def get_pagination_params(
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(10, description="Items per page (max 100)"),
) -> PaginationParams:
    """Query-string pagination; out of range values are a validation failure"""
    try:
        return PaginationParams(page=page, limit=limit)
    except ValidationError as e:
        issues = [
            {"loc": ["query", *error["loc"]], "msg": error["msg"], "type": error["type"]}
            for error in e.errors()
        ]
        raise ValidationFailed(issues=issues)
