"""
FastAPI Application Entry Point

Restaurant directory and menu-management backend.

Endpoints:
    - POST /api/restaurants: Create a restaurant
    - GET  /api/restaurants: List restaurants (rebuilds external identifiers)
    - GET  /api/restaurants/{id}: Get one restaurant
    - PUT  /api/restaurants/{id}: Partially update a restaurant
    - PUT  /api/restaurants/{id}/menu-status: Mark the menu as uploaded
    - GET  /api/restaurants/{id}/menu: Get a restaurant's menu
    - PUT  /api/restaurants/{id}/menu: Replace a restaurant's menu
    - POST /api/upload: Upload a menu item image
    - POST /api/openai/chat: Relay a chat completion
    - GET  /health: System health check

``{id}`` is an external identifier from the latest listing; anything the
registry does not know is tried as a durable identity.
"""

import logging
from datetime import datetime
from typing import Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, Query, Request, File, Form, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings, setup_logging
from app.core.exceptions import ServiceError, RestaurantNotFoundError
from app.database import get_db, init_db, engine
from app.models import Restaurant, RestaurantMenu
from app.schemas import (
    ApiResponse,
    ChatRequest,
    ErrorResponse,
    HealthResponse,
    MenuDocumentOut,
    MenuRestaurant,
    MenuUpsertRequest,
    MenuWithRestaurant,
    RestaurantCreate,
    RestaurantCreated,
    RestaurantDetail,
    RestaurantSummary,
    RestaurantUpdate,
    UploadResponse,
)
from app.services.chat import BaseChatService, get_chat_service
from app.services.identifiers import IdentifierRegistry
from app.services.menu_merge import merge_menu_items
from app.services.menu_store import MenuStore
from app.services.restaurant_store import RestaurantStore
from app.services.storage import BaseStorageService, build_object_key, get_storage_service

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    logger.info("✅ Database initialized")

    # One registry per process, shared by every request
    app.state.id_registry = IdentifierRegistry()

    logger.info(f"✅ Storage Service: {get_storage_service().provider_name}")
    logger.info(f"✅ Chat Service: {get_chat_service().provider_name}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Restaurant directory and menu management: restaurant profiles, "
        "per-item menus with add-on customisation and image uploads."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_id_registry(request: Request) -> IdentifierRegistry:
    registry = getattr(request.app.state, "id_registry", None)
    if registry is None:
        raise RuntimeError("id_registry not initialized. Check app startup wiring.")
    return registry


def get_restaurant_store(db: AsyncSession = Depends(get_db)) -> RestaurantStore:
    return RestaurantStore(db)


def get_menu_store(db: AsyncSession = Depends(get_db)) -> MenuStore:
    return MenuStore(db)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def restaurant_summary(restaurant: Restaurant, external_id: Optional[int]) -> RestaurantSummary:
    return RestaurantSummary(
        id=external_id,
        name=restaurant.name,
        menu_summary=restaurant.menu_summary,
        location=restaurant.location,
        is_online=restaurant.is_online,
    )


def restaurant_detail(restaurant: Restaurant, external_id: Optional[int]) -> RestaurantDetail:
    return RestaurantDetail(
        id=external_id,
        name=restaurant.name,
        contact_no=restaurant.contact_no,
        address=restaurant.address,
        menu_summary=restaurant.menu_summary,
        is_online=restaurant.is_online,
        menu_uploaded=restaurant.menu_uploaded,
        location=restaurant.location,
        created_at=restaurant.created_at,
        updated_at=restaurant.updated_at,
    )


def menu_document(menu: RestaurantMenu, external_id: Optional[int]) -> MenuDocumentOut:
    """Menu as exposed to callers, with the durable identity swapped out."""
    return MenuDocumentOut(
        restaurant_id=external_id,
        restaurant_name=menu.restaurant_name,
        items=menu.items or [],
        last_updated=menu.last_updated,
        created_at=menu.created_at,
        updated_at=menu.updated_at,
    )


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db),
    storage: BaseStorageService = Depends(get_storage_service),
    chat: BaseChatService = Depends(get_chat_service),
) -> HealthResponse:
    """Verify all system components are operational."""

    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    storage_status = "healthy" if await storage.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [db_status, storage_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        storage_service=f"{storage.provider_name}: {storage_status}",
        chat_service=chat.provider_name,
        timestamp=datetime.now(),
    )


# =============================================================================
# RESTAURANT ENDPOINTS
# =============================================================================

@app.post(
    "/api/restaurants",
    response_model=ApiResponse[RestaurantCreated],
    response_model_exclude_none=True,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Restaurants"],
    summary="Create Restaurant",
)
async def create_restaurant(
    payload: RestaurantCreate,
    store: RestaurantStore = Depends(get_restaurant_store),
    registry: IdentifierRegistry = Depends(get_id_registry),
) -> ApiResponse[RestaurantCreated]:
    """
    Create a restaurant under a new durable identity.

    ``id`` is provisional: the restaurant only gets a resolvable external
    identifier once restaurants are listed again. ``restaurantId`` can be
    used in the meantime.
    """
    logger.info(f"Creating restaurant: {payload.name}")

    try:
        restaurant = await store.create(payload.model_dump())
    except ServiceError:
        raise
    except Exception as e:
        logger.exception(f"Error creating restaurant: {e}")
        raise HTTPException(status_code=500, detail="Error creating restaurant")

    return ApiResponse(
        message="Restaurant created successfully",
        data=RestaurantCreated(
            id=registry.size + 1,
            restaurant_id=restaurant.restaurant_id,
            name=restaurant.name,
            menu_summary=restaurant.menu_summary,
            location=restaurant.location,
        ),
    )


@app.get(
    "/api/restaurants",
    response_model=ApiResponse[list[RestaurantSummary]],
    response_model_exclude_none=True,
    tags=["Restaurants"],
    summary="List Restaurants",
)
async def list_restaurants(
    online: Optional[str] = Query(None, description="'true' to list only online restaurants"),
    store: RestaurantStore = Depends(get_restaurant_store),
    registry: IdentifierRegistry = Depends(get_id_registry),
) -> ApiResponse[list[RestaurantSummary]]:
    """
    List restaurants and hand out fresh external identifiers.

    Identifiers from any earlier listing stop resolving.
    """
    try:
        restaurants = await store.list_all(online_only=online == "true")
    except Exception as e:
        logger.exception(f"Error fetching restaurants: {e}")
        raise HTTPException(status_code=500, detail="Error fetching restaurants")

    registry.rebuild(restaurants)

    return ApiResponse(
        data=[
            restaurant_summary(restaurant, index + 1)
            for index, restaurant in enumerate(restaurants)
        ],
    )


@app.get(
    "/api/restaurants/{restaurant_id}",
    response_model=ApiResponse[RestaurantDetail],
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}},
    tags=["Restaurants"],
    summary="Get Restaurant",
)
async def get_restaurant(
    restaurant_id: str,
    store: RestaurantStore = Depends(get_restaurant_store),
    registry: IdentifierRegistry = Depends(get_id_registry),
) -> ApiResponse[RestaurantDetail]:
    """Get a restaurant by external identifier or durable identity."""
    try:
        restaurant = await store.get(registry.resolve(restaurant_id))
    except ServiceError:
        raise
    except Exception as e:
        logger.exception(f"Error fetching restaurant: {e}")
        raise HTTPException(status_code=500, detail="Error fetching restaurant")

    return ApiResponse(
        data=restaurant_detail(restaurant, registry.reverse_lookup(restaurant.restaurant_id)),
    )


@app.put(
    "/api/restaurants/{restaurant_id}",
    response_model=ApiResponse[RestaurantSummary],
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Restaurants"],
    summary="Update Restaurant",
)
async def update_restaurant(
    restaurant_id: str,
    payload: RestaurantUpdate,
    store: RestaurantStore = Depends(get_restaurant_store),
    registry: IdentifierRegistry = Depends(get_id_registry),
) -> ApiResponse[RestaurantSummary]:
    """Replace only the fields present in the request body."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    try:
        restaurant = await store.update(registry.resolve(restaurant_id), changes)
    except ServiceError:
        raise
    except Exception as e:
        logger.exception(f"Error updating restaurant: {e}")
        raise HTTPException(status_code=500, detail="Error updating restaurant")

    return ApiResponse(
        data=restaurant_summary(restaurant, registry.reverse_lookup(restaurant.restaurant_id)),
    )


@app.put(
    "/api/restaurants/{restaurant_id}/menu-status",
    response_model=ApiResponse[RestaurantDetail],
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}},
    tags=["Restaurants"],
    summary="Mark Menu Uploaded",
)
async def update_menu_status(
    restaurant_id: str,
    store: RestaurantStore = Depends(get_restaurant_store),
    registry: IdentifierRegistry = Depends(get_id_registry),
) -> ApiResponse[RestaurantDetail]:
    """Set ``menuUploaded`` without touching the menu itself."""
    try:
        restaurant = await store.mark_menu_uploaded(registry.resolve(restaurant_id))
    except ServiceError:
        raise
    except Exception as e:
        logger.exception(f"Error updating menu status: {e}")
        raise HTTPException(status_code=500, detail="Error updating menu status")

    return ApiResponse(
        data=restaurant_detail(restaurant, registry.reverse_lookup(restaurant.restaurant_id)),
    )


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@app.get(
    "/api/restaurants/{restaurant_id}/menu",
    response_model=ApiResponse[MenuWithRestaurant],
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}},
    tags=["Menus"],
    summary="Get Menu",
)
async def get_menu(
    restaurant_id: str,
    store: RestaurantStore = Depends(get_restaurant_store),
    menus: MenuStore = Depends(get_menu_store),
    registry: IdentifierRegistry = Depends(get_id_registry),
) -> ApiResponse[MenuWithRestaurant]:
    """Get the menu of a restaurant together with its header."""
    try:
        durable_id = registry.resolve(restaurant_id)
        restaurant = await store.find(durable_id)
        if restaurant is None:
            raise RestaurantNotFoundError(
                durable_id, message=f"Restaurant not found with ID: {restaurant_id}"
            )
        menu = await menus.get(restaurant.restaurant_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.exception(f"Error fetching menu: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch menu")

    external_id = registry.reverse_lookup(restaurant.restaurant_id)
    return ApiResponse(
        data=MenuWithRestaurant(
            restaurant=MenuRestaurant(
                id=external_id,
                name=restaurant.name,
                menu_summary=restaurant.menu_summary,
                location=restaurant.location,
            ),
            menu=menu_document(menu, external_id),
        ),
    )


@app.put(
    "/api/restaurants/{restaurant_id}/menu",
    response_model=ApiResponse[MenuDocumentOut],
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Menus"],
    summary="Replace Menu",
)
async def upsert_menu(
    restaurant_id: str,
    payload: MenuUpsertRequest,
    store: RestaurantStore = Depends(get_restaurant_store),
    menus: MenuStore = Depends(get_menu_store),
    registry: IdentifierRegistry = Depends(get_id_registry),
) -> ApiResponse[MenuDocumentOut]:
    """
    Merge the submitted items with their customisations and replace the
    restaurant's menu.

    Malformed item fields fall back to defaults; the only failure specific
    to this endpoint is an unknown restaurant.
    """
    try:
        durable_id = registry.resolve(restaurant_id)
        restaurant = await store.find(durable_id)
        if restaurant is None:
            raise RestaurantNotFoundError(
                durable_id, message=f"Restaurant not found with ID: {restaurant_id}"
            )

        items = merge_menu_items(payload.menu_items, payload.customisations)
        menu = await menus.upsert(restaurant, items)
    except ServiceError:
        raise
    except Exception as e:
        logger.exception(f"Error updating menu: {e}")
        raise HTTPException(status_code=500, detail="Failed to update menu")

    return ApiResponse(
        message="Menu updated successfully",
        data=menu_document(menu, registry.reverse_lookup(restaurant.restaurant_id)),
    )


# =============================================================================
# UPLOAD & CHAT ENDPOINTS
# =============================================================================

@app.post(
    "/api/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Uploads"],
    summary="Upload Menu Item Image",
)
async def upload_image(
    file: Optional[UploadFile] = File(None),
    restaurant_name: Optional[str] = Form(None, alias="restaurantName"),
    item_name: Optional[str] = Form(None, alias="itemName"),
    storage: BaseStorageService = Depends(get_storage_service),
) -> UploadResponse:
    """Store an image under ``<restaurant>/<item>-<uuid><ext>`` and return its URL."""
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not restaurant_name or not item_name:
        raise HTTPException(status_code=400, detail="Missing required fields")

    key = build_object_key(restaurant_name, item_name, file.filename)
    data = await file.read()

    result = await storage.upload(data, key, file.content_type)
    if not result.success:
        logger.error(f"Upload failed for {key}: {result.error_message}")
        raise HTTPException(status_code=500, detail="Failed to upload image")

    return UploadResponse(file_url=result.url)


@app.post(
    "/api/openai/chat",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Chat"],
    summary="Relay Chat Completion",
)
async def chat_completion(
    payload: ChatRequest,
    chat: BaseChatService = Depends(get_chat_service),
) -> dict[str, Any]:
    """Forward ``messages`` with the fixed model configuration and relay the reply."""
    if not isinstance(payload.messages, list):
        raise HTTPException(
            status_code=400,
            detail="Invalid request. 'messages' must be an array.",
        )

    result = await chat.complete(payload.messages)
    if not result.success:
        raise HTTPException(status_code=500, detail="Failed to fetch response from OpenAI")

    return result.data


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Not-found and validation failures raised by the stores."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as 400."""
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap HTTP errors in the standard envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.api_host, port=settings.api_port)
