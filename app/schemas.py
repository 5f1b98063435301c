"""
Pydantic Schemas for Request/Response Validation

The wire format is camelCase (``contactNo``, ``menuSummary``, ``isOnline``);
fields are declared in snake_case and aliased through ``to_camel``.
Every endpoint answers with the ``{success, data?, error?}`` envelope.
"""

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# SHARED
# =============================================================================

class LocationIn(CamelModel):
    """Location as submitted by callers."""
    latitude: Optional[float] = Field(None, ge=-90, le=90, examples=[12.9716])
    longitude: Optional[float] = Field(None, ge=-180, le=180, examples=[77.5946])

    @property
    def is_complete(self) -> bool:
        return self.latitude is not None and self.longitude is not None


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RestaurantCreate(CamelModel):
    """Request schema for creating a restaurant."""
    name: str = Field(..., min_length=1, max_length=200, examples=["Spice Route"])
    contact_no: str = Field(..., pattern=r"^\d{10}$", examples=["9876543210"])
    address: str = Field(..., min_length=1, max_length=500, examples=["12 MG Road, Bengaluru"])
    menu_summary: str = Field(..., min_length=1, examples=["South Indian breakfast and filter coffee"])
    is_online: Optional[bool] = Field(None, examples=[True])
    location: Optional[LocationIn] = None


class RestaurantUpdate(CamelModel):
    """Partial update: only the fields present in the body are written."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    contact_no: Optional[str] = Field(None, pattern=r"^\d{10}$")
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    menu_summary: Optional[str] = Field(None, min_length=1)
    is_online: Optional[bool] = None
    location: Optional[LocationIn] = None


class MenuUpsertRequest(CamelModel):
    """
    Raw menu submission.

    Items and customisations are kept as loose JSON objects: the merge
    engine coerces individual fields instead of rejecting the request.
    """
    menu_items: List[Any] = Field(default_factory=list)
    customisations: List[Any] = Field(default_factory=list)


class ChatRequest(BaseModel):
    """Chat relay payload; ``messages`` is checked by the handler."""
    messages: Optional[Any] = None


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class RestaurantCreated(CamelModel):
    """Returned after creating a restaurant."""
    id: int
    restaurant_id: str
    name: str
    menu_summary: str
    location: Optional[dict[str, Any]] = None


class RestaurantSummary(CamelModel):
    """Restaurant as shown in listings and after updates."""
    id: Optional[int] = None
    name: str
    menu_summary: str
    location: Optional[dict[str, Any]] = None
    is_online: bool


class RestaurantDetail(CamelModel):
    """Full restaurant profile."""
    id: Optional[int] = None
    name: str
    contact_no: str
    address: str
    menu_summary: str
    is_online: bool
    menu_uploaded: bool
    location: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class MenuRestaurant(CamelModel):
    """Restaurant header embedded in a menu response."""
    id: Optional[int] = None
    name: str
    menu_summary: str
    location: Optional[dict[str, Any]] = None


class MenuDocumentOut(CamelModel):
    """
    Menu document as exposed to callers.

    ``restaurant_id`` carries the external identifier, never the durable
    identity.
    """
    restaurant_id: Optional[int] = None
    restaurant_name: str
    items: List[dict[str, Any]]
    last_updated: datetime
    created_at: datetime
    updated_at: datetime


class MenuWithRestaurant(CamelModel):
    restaurant: MenuRestaurant
    menu: MenuDocumentOut


class ApiResponse(CamelModel, Generic[T]):
    """Standard response envelope."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    error: Optional[str] = None


class UploadResponse(CamelModel):
    """Response after storing an image."""
    success: bool = True
    file_url: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    storage_service: str
    chat_service: str
    timestamp: datetime
