"""FastAPI server exposing restaurant search, details, menus and photos."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as PydanticValidationError

from foodfinder.config import get_config, setup_logging
from foodfinder.exceptions import NotFoundError, ProviderError, ValidationError
from foodfinder.providers import GooglePlacesClient, create_provider
from foodfinder.services import SearchQuery, SearchService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan manager."""
    config = get_config()
    logger.info(
        f"Starting FoodFinder API on {config.server_host}:{config.server_port}"
    )

    provider = create_provider(config)

    # Address geocoding needs a Google key regardless of the search provider
    geocoder = None
    if isinstance(provider, GooglePlacesClient):
        geocoder = provider
    elif config.google_maps_api_key:
        geocoder = GooglePlacesClient(
            config.google_maps_api_key, timeout=config.http_timeout
        )

    _app.state.search_service = SearchService(
        provider, config=config, geocoder=geocoder
    )
    logger.info(
        f"✓ Search service ready (provider: {provider.kind}, default location: "
        f"{config.default_lat}, {config.default_lng})"
    )

    yield

    await provider.aclose()
    if geocoder is not None and geocoder is not provider:
        await geocoder.aclose()
    logger.info("Shutting down FoodFinder API")


app = FastAPI(
    title="FoodFinder API",
    description="Restaurant discovery for food delivery",
    version="0.1.0",
    lifespan=lifespan,
)

# Web and mobile clients call the API from other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(_request: Request, exc: ValidationError):
    return _error(400, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError):
    # Malformed query values such as lat=abc share the 400 envelope
    messages = [
        f"{err['loc'][-1]}: {err['msg']}" if err.get("loc") else err["msg"]
        for err in exc.errors()
    ]
    return _error(400, "; ".join(messages))


@app.exception_handler(NotFoundError)
async def not_found_handler(_request: Request, exc: NotFoundError):
    return _error(404, exc.message)


@app.exception_handler(ProviderError)
async def provider_error_handler(_request: Request, exc: ProviderError):
    logger.error(f"Provider error ({exc.provider}): {exc.message}")
    return _error(502, "Restaurant data provider is unavailable")


def get_search_service(request: Request) -> SearchService:
    """Dependency to get the search service from app state.

    Raises:
        HTTPException: If the service is not initialized
    """
    service = getattr(request.app.state, "search_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Search service not initialized")
    return service


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": "foodfinder-api"}


@app.get("/api/restaurants")
async def list_restaurants(
    lat: float | None = Query(None, description="Latitude of the search center"),
    lng: float | None = Query(None, description="Longitude of the search center"),
    address: str | None = Query(None, description="Address to geocode"),
    radius: int | None = Query(None, description="Search radius in meters"),
    term: str | None = Query(None, description="Keyword passed to the provider"),
    limit: int | None = Query(None, description="Maximum number of results"),
    min_price: int | None = Query(None, alias="minPrice"),
    max_price: int | None = Query(None, alias="maxPrice"),
    rating: float | None = Query(None, description="Minimum rating"),
    cuisine: list[str] | None = Query(None, description="Cuisine (repeatable)"),
    open_now: bool = Query(False, alias="openNow"),
    service: SearchService = Depends(get_search_service),
):
    """Search restaurants around a location.

    Returns:
        {
            "success": true,
            "count": 20,
            "fallback": false,       # true when sample data replaced live data
            "message": null,         # advisory text to show when fallback is true
            "location": {"lat": 37.7749, "lng": -122.4194},
            "data": [Restaurant, ...]
        }
    """
    try:
        query = SearchQuery(
            lat=lat,
            lng=lng,
            address=address,
            radius=radius,
            keyword=term,
            limit=limit,
            min_price=min_price,
            max_price=max_price,
            rating=rating,
            cuisines=cuisine or [],
            open_now=open_now,
        )
    except PydanticValidationError as e:
        raise ValidationError(
            "; ".join(err["msg"] for err in e.errors(include_url=False))
        ) from e

    result = await service.search_results(query)
    return {
        "success": True,
        "count": len(result.restaurants),
        "fallback": result.fallback,
        "message": result.message,
        "location": result.location.model_dump(mode="json"),
        "data": [r.model_dump(mode="json", by_alias=True) for r in result.restaurants],
    }


@app.get("/api/restaurants/{restaurant_id}")
async def get_restaurant(
    restaurant_id: str,
    service: SearchService = Depends(get_search_service),
):
    """Get one restaurant with reviews, photos, hours and a menu."""
    detail = await service.get_details(restaurant_id)
    return {"success": True, "data": detail.model_dump(mode="json", by_alias=True)}


@app.get("/api/restaurants/{restaurant_id}/menu")
async def get_restaurant_menu(
    restaurant_id: str,
    cuisine: str | None = Query(None, description="Cuisine hint for the menu"),
    service: SearchService = Depends(get_search_service),
):
    """Get a generated menu for a restaurant."""
    menu = service.get_menu(restaurant_id, cuisine=cuisine)
    return {
        "success": True,
        "data": [category.model_dump(mode="json", by_alias=True) for category in menu],
    }


@app.get("/api/photos/{photo_reference}")
async def get_photo(
    photo_reference: str,
    service: SearchService = Depends(get_search_service),
):
    """Proxy a provider photo, adding the provider key server-side."""
    content, content_type = await service.get_photo(photo_reference)
    return Response(
        content=content,
        media_type=content_type,
        headers={"Cache-Control": "public, max-age=86400"},
    )


def run_server():
    """Run the FastAPI server using uvicorn.

    This is the main entry point for the server.
    """
    setup_logging()
    config = get_config()

    uvicorn.run(
        "foodfinder.server:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run_server()
