"""API routes for the city directory."""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Query, status

from city_manager.cities.schemas import City, CityListResponse, CityWrite, MessageResponse
from city_manager.cities.service import CitiesService
from city_manager.core.exceptions import (
    AppException,
    BadRequestException,
    StoreUnavailableException,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cities", tags=["Cities"])
search_router = APIRouter(prefix="/api/cities", tags=["Cities"])

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_page(raw: Optional[str]) -> int:
    """
    Lenient page parsing: leading digits win ("2abc" -> 2).

    Missing, unparsable or non-positive values fall back to page 1.
    """
    match = _LEADING_INT.match(raw or "")
    if not match:
        return 1
    page = int(match.group(1))
    return page if page > 0 else 1


@search_router.get("", response_model=CityListResponse)
async def search_cities(
    search: str = Query("", description="Case-insensitive substring of the city name"),
    page: Optional[str] = Query(None, description="1-indexed page number"),
):
    """List cities matching `search`, five per page."""
    try:
        return await CitiesService.search(term=search, page=parse_page(page))
    except Exception as e:
        logger.error(f"City search failed: {e}")
        raise StoreUnavailableException("Server Error", key="message")


@router.post("", response_model=City, status_code=status.HTTP_201_CREATED)
async def create_city(body: CityWrite):
    """Create a city. Names are unique ignoring case."""
    try:
        return await CitiesService.create(body.cityName, body.count)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to create city {body.cityName!r}: {e}")
        raise BadRequestException("Failed to create city")


@router.get("/{city_id}", response_model=City)
async def get_city(city_id: str):
    try:
        return await CitiesService.get_by_id(city_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch city {city_id}: {e}")
        raise StoreUnavailableException("Failed to fetch city")


@router.put("/{city_id}", response_model=City)
async def update_city(city_id: str, body: CityWrite):
    """Update name and count. Fails with 409 if another city has the name."""
    try:
        return await CitiesService.update(city_id, body.cityName, body.count)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to update city {city_id}: {e}")
        raise BadRequestException("Failed to update city")


@router.delete("/{city_id}", response_model=MessageResponse)
async def delete_city(city_id: str):
    try:
        await CitiesService.delete(city_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete city {city_id}: {e}")
        raise StoreUnavailableException("Failed to delete city")
    return MessageResponse(message="City deleted successfully")
