from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog import CourseCatalog
from database import Database, store_errors
from errors import ApiError
from inventory import InventoryService
from logging_config import add_context, clear_context, configure_logging, get_logger
from orders import INVALID_FIELDS_MESSAGE, OrderService
from schemas import (
    Course,
    OrderCreatedResponse,
    OrderRequest,
    SortKey,
    SortOrder,
    UpdateSpaceRequest,
    UpdateSpaceResponse,
)
from settings import Settings

logger = get_logger(__name__)

SEED_COURSES = [
    {"id": 1, "title": "Guitar", "description": "Chords, strumming and your first songs.",
     "location": "Hendon", "subject": "Music", "spaces": 5},
    {"id": 2, "title": "Algebra", "description": "Equations, inequalities and graphs.",
     "location": "Colindale", "subject": "Maths", "spaces": 5},
    {"id": 3, "title": "Yoga", "description": "Breathing and flexibility for beginners.",
     "location": "Brent Cross", "subject": "Fitness", "spaces": 5},
    {"id": 4, "title": "Creative Writing", "description": "Short stories and poetry workshops.",
     "location": "Golders Green", "subject": "English", "spaces": 5},
    {"id": 5, "title": "Chess", "description": "Openings, tactics and endgames.",
     "location": "Mill Hill", "subject": "Games", "spaces": 5},
    {"id": 6, "title": "Painting", "description": "Watercolour and acrylic techniques.",
     "location": "Edgware", "subject": "Art", "spaces": 5},
]


# Dependencies

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_catalog(settings: Settings = Depends(get_settings),
                database: Database = Depends(get_database)) -> CourseCatalog:
    return CourseCatalog(database, settings.courses_collection)


def get_order_service(settings: Settings = Depends(get_settings),
                      database: Database = Depends(get_database)) -> OrderService:
    return OrderService(database, settings.orders_collection, settings.order_required_fields)


def get_inventory_service(settings: Settings = Depends(get_settings),
                          database: Database = Depends(get_database)) -> InventoryService:
    return InventoryService(database, settings.courses_collection)


# Error handlers

def _field_name(loc) -> str:
    return ".".join(str(part) for part in loc[1:]) or str(loc[0])


async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    body_fields, query_fields = [], []
    for error in exc.errors():
        loc = error.get("loc", ())
        target = query_fields if loc and loc[0] in ("query", "path") else body_fields
        name = _field_name(loc) if loc else ""
        if name and name not in target:
            target.append(name)
    if query_fields:
        message = f"Invalid query parameters: {', '.join(query_fields)}"
    else:
        message = f"{INVALID_FIELDS_MESSAGE}: {', '.join(body_fields)}"
    logger.info("invalid_request", path=request.url.path, error=message)
    return JSONResponse(status_code=400, content={"error": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)},
                        headers=getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "An error occurred"})


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.environment, settings.log_level, settings.log_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.database is None:
            app.state.database = Database.connect(settings)
        yield
        app.state.database.close()

    app = FastAPI(title="Course Storefront API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        clear_context()
        add_context(method=request.method, path=request.url.path)
        response = await call_next(request)
        logger.info("request_completed", status=response.status_code)
        return response

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    register_routes(app)

    if settings.static_dir:
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    return app


def register_routes(app: FastAPI) -> None:

    @app.get("/")
    def root():
        return {"message": "Course Storefront API running"}

    # Seed sample courses (idempotent)
    @app.post("/seed")
    def seed(settings: Settings = Depends(get_settings), database: Database = Depends(get_database)):
        with store_errors("Failed to seed courses"):
            if database[settings.courses_collection].count_documents({}) == 0:
                database[settings.courses_collection].insert_many(
                    [Course(**data).model_dump() for data in SEED_COURSES]
                )
        return {"message": "Seed complete"}

    @app.get("/collections/courses")
    def list_courses(catalog: CourseCatalog = Depends(get_catalog)) -> List[dict]:
        return catalog.list_courses()

    @app.get("/collections/courses/search")
    def search_courses(search: str = "", sortKey: SortKey = SortKey.title, sortOrder: SortOrder = SortOrder.asc,
                       catalog: CourseCatalog = Depends(get_catalog)) -> List[dict]:
        return catalog.search_courses(search, sortKey, sortOrder)

    @app.post("/collections/orders", status_code=201, response_model=OrderCreatedResponse)
    def create_order(payload: OrderRequest, service: OrderService = Depends(get_order_service)):
        order_id = service.place_order(payload)
        return OrderCreatedResponse(orderId=order_id)

    @app.put("/collections/products/updateSpace", response_model=UpdateSpaceResponse)
    def update_space(payload: UpdateSpaceRequest, service: InventoryService = Depends(get_inventory_service)):
        result = service.adjust_spaces(payload.lessons)
        return UpdateSpaceResponse(updated=result.updated, notFound=result.not_found)


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
