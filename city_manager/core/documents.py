"""Collection adapter: id-addressed CRUD and counted, paginated queries."""

from typing import List, Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument

from city_manager.core.database import Database


def to_object_id(id_str: str) -> Optional[ObjectId]:
    """Convert a string id to ObjectId, or None if it is malformed."""
    if not ObjectId.is_valid(id_str):
        return None
    return ObjectId(id_str)


class DocumentStore:
    """Thin wrapper over one Motor collection."""

    def __init__(self, collection_name: str):
        self.collection_name = collection_name

    @property
    def collection(self):
        return Database.get_collection(self.collection_name)

    async def find_page(
        self,
        query: dict,
        skip: int,
        limit: int,
        sort_field: str = "_id",
    ) -> Tuple[List[dict], int]:
        """
        Return one window of matching documents plus the total match count.

        The total ignores skip/limit. A window past the end is an empty list.
        """
        total = await self.collection.count_documents(query)
        cursor = (
            self.collection.find(query)
            .sort(sort_field, 1)
            .skip(max(skip, 0))
            .limit(limit)
        )
        docs = await cursor.to_list(length=limit)
        return docs, total

    async def find_one(self, query: dict) -> Optional[dict]:
        return await self.collection.find_one(query)

    async def find_by_id(self, id_str: str) -> Optional[dict]:
        oid = to_object_id(id_str)
        if oid is None:
            return None
        return await self.collection.find_one({"_id": oid})

    async def insert(self, doc: dict) -> dict:
        """Insert a document and return it with its assigned _id."""
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def update_by_id(self, id_str: str, fields: dict) -> Optional[dict]:
        """Apply fields to a document; returns the updated doc or None if missing."""
        oid = to_object_id(id_str)
        if oid is None:
            return None
        return await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_by_id(self, id_str: str) -> bool:
        """Returns True if a document was removed."""
        oid = to_object_id(id_str)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0
