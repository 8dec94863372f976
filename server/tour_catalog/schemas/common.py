"""Common Pydantic schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response base that serializes field names in camelCase."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class Violation(BaseModel):
    """Validation error violation."""

    path: str = Field(..., description="Name of the invalid parameter")
    message: str = Field(..., description="Validation error message")


class Problem(BaseModel):
    """RFC 9457 Problem Details response."""

    type: Optional[str] = Field(None, description="Problem type URI")
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(None, description="Human-readable explanation")
    instance: Optional[str] = Field(None, description="URI reference for this occurrence")
    retryable: Optional[bool] = Field(None, description="Whether the operation can be retried")
    error_id: Optional[str] = Field(None, description="Identifier for correlating server errors")
    violations: Optional[List[Violation]] = Field(None, description="Validation errors")
