"""Read-only listing and search over the courses collection."""

import re
from typing import Any, Dict, List

from database import Database, store_errors
from logging_config import get_logger
from schemas import SortKey, SortOrder

logger = get_logger(__name__)

SEARCH_FIELDS = ("title", "description", "location", "subject")


def build_search_filter(search: str) -> Dict[str, Any]:
    if not search:
        return {}
    pattern = re.escape(search)
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS]}


class CourseCatalog:
    def __init__(self, database: Database, collection_name: str = "courses"):
        self.database = database
        self.collection_name = collection_name

    def list_courses(self) -> List[Dict[str, Any]]:
        with store_errors("Failed to fetch courses"):
            courses = self.database.get_documents(self.collection_name)
        logger.debug("courses_listed", count=len(courses))
        return courses

    def search_courses(self, search: str = "", sort_key: SortKey = SortKey.title,
                       sort_order: SortOrder = SortOrder.asc) -> List[Dict[str, Any]]:
        direction = 1 if sort_order == SortOrder.asc else -1
        # _id breaks ties so equal keys keep insertion order
        sort = [(sort_key.value, direction), ("_id", 1)]
        with store_errors("Failed to fetch courses"):
            courses = self.database.get_documents(self.collection_name, build_search_filter(search), sort)
        logger.debug("courses_searched", search=search, sort_key=sort_key.value,
                     sort_order=sort_order.value, count=len(courses))
        return courses
