"""
Database and API Schemas for the Course Storefront

Course documents live in the "courses" collection and orders in "Orders".
Use these models to validate incoming data and to keep a consistent structure in the DB.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

# BSON integers are signed 64-bit
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class Course(BaseModel):
    """A bookable lesson with a limited number of spaces"""
    id: int = Field(..., description="Catalogue number")
    title: str = Field(..., description="Course title, unique")
    description: str = Field("", description="Short description")
    location: str = Field("", description="Where the lessons take place")
    subject: str = Field("", description="Subject area e.g. Music, Maths")
    spaces: int = Field(..., description="Remaining spaces, may go negative")


class OrderLine(BaseModel):
    id: Union[int, float] = Field(..., description="Course id")
    count: int = Field(..., ge=1, description="How many times the course was ordered")


class Order(BaseModel):
    """Checkout record, written once"""
    name: str
    phone: str
    courses: List[OrderLine]
    surname: Optional[str] = None
    totalPrice: Optional[float] = None
    orderId: Optional[Union[str, int]] = None
    createdAt: Optional[datetime] = None


class OrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ada",
                    "phone": "07700900123",
                    "courses": [{"id": 1}, {"id": 1}, {"id": 4}],
                }
            ]
        }
    }

    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    # Entries are folded into OrderLine items; anything without a usable id is dropped
    courses: List[Any]
    surname: Optional[str] = None
    totalPrice: Optional[float] = None
    orderId: Optional[Union[str, int]] = None


class OrderCreatedResponse(BaseModel):
    message: str = "Order created successfully"
    orderId: str


class LessonQuantity(BaseModel):
    title: str = Field(..., min_length=1)
    # -quantity is what gets written, so both signs must stay in range
    quantity: int = Field(..., ge=-INT64_MAX, le=INT64_MAX)

    @field_validator("quantity")
    @classmethod
    def quantity_not_zero(cls, value: int) -> int:
        if value == 0:
            raise ValueError("quantity must not be zero")
        return value


class UpdateSpaceRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"lessons": [{"title": "Guitar", "quantity": 2}]}]
        }
    }

    lessons: List[LessonQuantity]


class UpdateSpaceResponse(BaseModel):
    message: str = "Product availability updated successfully"
    updated: List[str] = Field(default_factory=list)
    notFound: List[str] = Field(default_factory=list)


class SortKey(str, Enum):
    id = "id"
    title = "title"
    description = "description"
    location = "location"
    subject = "subject"
    spaces = "spaces"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"
