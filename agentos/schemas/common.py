"""
Common/Shared Pydantic schemas
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class ResponseBase(BaseModel):
    """Base response schema"""
    ok: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response schema"""
    ok: bool = False
    error: str
    detail: Optional[str] = None


# Documents are stored and served camelCase, Python attributes stay snake_case
CamelConfig = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
)
