"""Service layer for the city directory."""

import logging
import math
import re
from typing import Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, OperationFailure

from city_manager.cities.schemas import City, CityListResponse
from city_manager.core.documents import DocumentStore, to_object_id
from city_manager.core.exceptions import ConflictException, NotFoundException

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "City with this name already exists."
NOT_FOUND = "City not found"


class CitiesService:
    """Paginated search plus case-insensitively unique CRUD over cities."""

    COLLECTION_NAME = "cities"
    PAGE_SIZE = 5

    @staticmethod
    def get_store() -> DocumentStore:
        return DocumentStore(CitiesService.COLLECTION_NAME)

    @staticmethod
    def _search_filter(term: str) -> dict:
        # Substring match; the term is literal text, not a pattern.
        return {"cityName": {"$regex": re.escape(term or ""), "$options": "i"}}

    @staticmethod
    def _to_document(name: str, count: int) -> dict:
        return {"cityName": name, "count": count, "name_lower": name.lower()}

    @classmethod
    async def _find_conflict(cls, name: str, exclude_id: Optional[ObjectId] = None) -> Optional[dict]:
        """Another city whose full name equals `name` ignoring case."""
        query = {"name_lower": name.lower()}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return await cls.get_store().find_one(query)

    @classmethod
    async def search(cls, term: str = "", page: int = 1) -> CityListResponse:
        """
        Case-insensitive substring search over city names, 5 per page.

        Pages are 1-indexed; a page past the end returns no cities but the
        same total.
        """
        skip = (page - 1) * cls.PAGE_SIZE
        docs, total = await cls.get_store().find_page(
            cls._search_filter(term), skip=skip, limit=cls.PAGE_SIZE
        )
        return CityListResponse(
            cities=[City.from_document(d) for d in docs],
            total=total,
            page=page,
            totalPages=math.ceil(total / cls.PAGE_SIZE),
        )

    @classmethod
    async def create(cls, name: str, count: int) -> City:
        """Create a city unless one with the same name (ignoring case) exists."""
        if await cls._find_conflict(name):
            raise ConflictException(DUPLICATE_NAME)

        try:
            doc = await cls.get_store().insert(cls._to_document(name, count))
        except DuplicateKeyError:
            # Lost the race against a concurrent create
            raise ConflictException(DUPLICATE_NAME)

        logger.info(f"Created city {doc['_id']}: {name}")
        return City.from_document(doc)

    @classmethod
    async def get_by_id(cls, city_id: str) -> City:
        doc = await cls.get_store().find_by_id(city_id)
        if not doc:
            raise NotFoundException(NOT_FOUND)
        return City.from_document(doc)

    @classmethod
    async def update(cls, city_id: str, name: str, count: int) -> City:
        """
        Replace name and count of an existing city.

        The name may keep its own spelling in any case; it may not match
        any other city's name ignoring case.
        """
        oid = to_object_id(city_id)
        if oid is None:
            raise NotFoundException(NOT_FOUND)

        if await cls._find_conflict(name, exclude_id=oid):
            raise ConflictException(DUPLICATE_NAME)

        try:
            doc = await cls.get_store().update_by_id(city_id, cls._to_document(name, count))
        except DuplicateKeyError:
            raise ConflictException(DUPLICATE_NAME)

        if not doc:
            raise NotFoundException(NOT_FOUND)

        logger.info(f"Updated city {city_id}: {name}")
        return City.from_document(doc)

    @classmethod
    async def delete(cls, city_id: str) -> None:
        removed = await cls.get_store().delete_by_id(city_id)
        if not removed:
            raise NotFoundException(NOT_FOUND)
        logger.info(f"Deleted city {city_id}")

    @classmethod
    async def backfill_name_keys(cls) -> int:
        """Set name_lower on documents written without it. Returns how many were fixed."""
        collection = cls.get_store().collection
        fixed = 0
        async for doc in collection.find({"name_lower": {"$exists": False}}, {"cityName": 1}):
            name = str(doc.get("cityName") or "")
            await collection.update_one({"_id": doc["_id"]}, {"$set": {"name_lower": name.lower()}})
            fixed += 1
        return fixed

    @classmethod
    async def ensure_indexes(cls):
        """
        Create indexes; the unique name index closes the check-then-insert race.

        Existing documents are backfilled first. If stored names already
        collide ignoring case the index cannot be built; startup continues
        and the read-side check still rejects new duplicates.
        """
        fixed = await cls.backfill_name_keys()
        if fixed:
            logger.info(f"Backfilled name_lower on {fixed} cities")

        collection = cls.get_store().collection
        try:
            await collection.create_index("name_lower", unique=True, name="name_lower_unique")
        except OperationFailure as e:
            if e.code != 11000 and not isinstance(e, DuplicateKeyError):
                raise
            logger.error(f"Unique city name index not created, stored names collide ignoring case: {e}")
