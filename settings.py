"""Application settings read from the environment (and a local .env file)."""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Fields an order may be configured to require on top of name/phone/courses
OPTIONAL_ORDER_FIELDS = ("surname", "totalPrice", "orderId")


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class Settings:
    db_prefix: str = "mongodb://"
    db_user: str = ""
    db_password: str = ""
    db_host: str = "localhost:27017"
    db_name: str = "storefront"
    db_params: str = ""
    database_url: Optional[str] = None
    db_timeout_ms: int = 30000
    courses_collection: str = "courses"
    orders_collection: str = "Orders"
    order_required_fields: List[str] = field(default_factory=list)
    cors_origin: str = "http://localhost:3000"
    static_dir: Optional[str] = None
    environment: str = "development"
    log_level: Optional[str] = None
    log_dir: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000

    def __post_init__(self):
        unknown = [f for f in self.order_required_fields if f not in OPTIONAL_ORDER_FIELDS]
        if unknown:
            raise ValueError(f"Unsupported required order fields: {', '.join(unknown)}")

    @property
    def mongo_uri(self) -> str:
        """Connection string, either given whole or assembled from its parts."""
        if self.database_url:
            return self.database_url
        credentials = ""
        if self.db_user:
            credentials = f"{quote_plus(self.db_user)}:{quote_plus(self.db_password)}@"
        uri = f"{self.db_prefix}{credentials}{self.db_host}/{self.db_name}"
        if self.db_params:
            uri = f"{uri}?{self.db_params.lstrip('?')}"
        return uri

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            db_prefix=os.getenv("DB_PREFIX", "mongodb://"),
            db_user=os.getenv("DB_USER", ""),
            db_password=os.getenv("DB_PASSWORD", ""),
            db_host=os.getenv("DB_HOST", "localhost:27017"),
            db_name=os.getenv("DB_NAME") or os.getenv("DATABASE_NAME") or "storefront",
            db_params=os.getenv("DB_PARAMS", ""),
            database_url=os.getenv("DATABASE_URL") or None,
            db_timeout_ms=int(os.getenv("DB_TIMEOUT_MS") or 30000),
            courses_collection=os.getenv("COURSES_COLLECTION", "courses"),
            orders_collection=os.getenv("ORDERS_COLLECTION", "Orders"),
            order_required_fields=_split(os.getenv("ORDER_REQUIRED_FIELDS")),
            cors_origin=os.getenv("CORS_ORIGIN", "http://localhost:3000"),
            static_dir=os.getenv("STATIC_DIR") or None,
            environment=(os.getenv("ENVIRONMENT") or "development").lower(),
            log_level=os.getenv("LOG_LEVEL") or None,
            log_dir=os.getenv("LOG_DIR") or None,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT") or 3000),
        )
