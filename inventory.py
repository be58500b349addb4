"""
Inventory adjustment for courses.

Each requested ``{title, quantity}`` pair decrements the matching course's
``spaces`` with one ``$inc`` update. Items are applied one after another in
request order so repeated titles compound. There is no transaction around
the batch: if the store fails part way, the items already applied stay
applied.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from database import Database, store_errors
from logging_config import get_logger
from schemas import LessonQuantity

logger = get_logger(__name__)


@dataclass
class AdjustmentResult:
    updated: List[str] = field(default_factory=list)
    not_found: List[str] = field(default_factory=list)


class InventoryService:
    def __init__(self, database: Database, collection_name: str = "courses"):
        self.database = database
        self.collection_name = collection_name

    def adjust_spaces(self, lessons: Sequence[LessonQuantity]) -> AdjustmentResult:
        result = AdjustmentResult()
        collection = self.database[self.collection_name]

        for lesson in lessons:
            with store_errors("Failed to update product availability"):
                update = collection.update_one(
                    {"title": lesson.title},
                    {"$inc": {"spaces": -lesson.quantity}},
                )
            if update.matched_count == 0:
                logger.warning("course_not_found", title=lesson.title)
                result.not_found.append(lesson.title)
            else:
                result.updated.append(lesson.title)

        logger.info("spaces_adjusted", updated=len(result.updated), not_found=len(result.not_found))
        return result
