"""
Order placement.

An order request is validated, its course entries are folded into
``{id, count}`` line items and the result is written as a single document.
The store is never touched when validation fails.
"""

import math
from numbers import Number
from typing import Any, Dict, Iterable, List, Sequence

from database import Database, store_errors
from errors import InvalidRequest
from logging_config import get_logger
from schemas import INT64_MAX, INT64_MIN, Order, OrderLine, OrderRequest

logger = get_logger(__name__)

INVALID_FIELDS_MESSAGE = "Invalid or missing fields in the request body"


def _usable_id(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    course_id = entry.get("id")
    # bool is a Number subclass but never a course id; zero, NaN and infinities are treated as absent
    if not isinstance(course_id, Number) or isinstance(course_id, bool):
        return False
    if isinstance(course_id, float) and not math.isfinite(course_id):
        return False
    return bool(course_id)


def normalize_line_items(courses: Iterable[Any]) -> List[OrderLine]:
    """Fold raw course entries into line items counted by id, in first-seen order."""
    counts: Dict[Any, int] = {}
    for entry in courses:
        if not _usable_id(entry):
            continue
        course_id = entry["id"]
        if isinstance(course_id, int) and not INT64_MIN <= course_id <= INT64_MAX:
            raise InvalidRequest(f"{INVALID_FIELDS_MESSAGE}: courses")
        counts[course_id] = counts.get(course_id, 0) + 1
    return [OrderLine(id=course_id, count=count) for course_id, count in counts.items()]


class OrderService:
    def __init__(self, database: Database, collection_name: str = "Orders",
                 required_fields: Sequence[str] = ()):
        self.database = database
        self.collection_name = collection_name
        self.required_fields = tuple(required_fields)

    def validate(self, request: OrderRequest) -> None:
        # name, phone and courses are enforced by OrderRequest itself
        missing = [f for f in self.required_fields if getattr(request, f) in (None, "")]
        if missing:
            raise InvalidRequest(f"{INVALID_FIELDS_MESSAGE}: {', '.join(missing)}")

    def place_order(self, request: OrderRequest) -> str:
        """Validate and persist an order, returning the store-assigned id."""
        self.validate(request)

        order = Order(
            name=request.name,
            phone=request.phone,
            courses=normalize_line_items(request.courses),
            surname=request.surname,
            totalPrice=request.totalPrice,
            orderId=request.orderId,
        )
        with store_errors("Failed to create order"):
            order_id = self.database.create_document(
                self.collection_name, order.model_dump(exclude_none=True)
            )

        logger.info("order_created", order_id=order_id, lines=len(order.courses))
        return order_id
