"""Shared schema building blocks"""

from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

DataT = TypeVar("DataT")

class BaseSchema(BaseModel):
    """Base schema with common configuration"""

    class Config:
        from_attributes = True

class StdResponse(BaseModel, Generic[DataT]):
    """Envelope wrapped around every API response"""
    data: Optional[DataT] = None
    message: Optional[str] = None
