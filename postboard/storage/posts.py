import logging
from contextlib import contextmanager
from typing import List, Optional

from bson.objectid import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, ExecutionTimeout, PyMongoError

from ..errors import StorageError, StorageUnavailableError

logger = logging.getLogger(__name__)


def to_object_id(value: str) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


@contextmanager
def translate_errors(operation: str):
    """Turn pymongo failures into StorageUnavailableError / StorageError."""
    try:
        yield
    except (ConnectionFailure, ExecutionTimeout) as exc:
        logger.exception("MongoDB unreachable during %s", operation)
        raise StorageUnavailableError() from exc
    except PyMongoError as exc:
        logger.exception("MongoDB error during %s", operation)
        raise StorageError() from exc


class PostStore:
    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        with translate_errors("ensure_indexes"):
            self.collection.create_index([("date", DESCENDING)])

    def find_all(self) -> List[dict]:
        with translate_errors("find_all"):
            return list(self.collection.find().sort("date", DESCENDING))

    def find_by_id(self, post_id: str) -> Optional[dict]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        with translate_errors("find_by_id"):
            return self.collection.find_one({"_id": oid})

    def insert(self, doc: dict) -> dict:
        with translate_errors("insert"):
            result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def delete_owned(self, post_id: str, user_id: str) -> bool:
        oid = to_object_id(post_id)
        if oid is None:
            return False
        with translate_errors("delete_owned"):
            result = self.collection.delete_one({"_id": oid, "user": user_id})
        return result.deleted_count == 1

    def _update(self, operation: str, query: dict, update: dict) -> Optional[dict]:
        with translate_errors(operation):
            return self.collection.find_one_and_update(
                query, update, return_document=ReturnDocument.AFTER
            )

    def add_like(self, post_id: str, user_id: str) -> Optional[dict]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        return self._update(
            "add_like",
            {"_id": oid, "likes.user": {"$ne": user_id}},
            {"$push": {"likes": {"$each": [{"user": user_id}], "$position": 0}}},
        )

    def remove_like(self, post_id: str, user_id: str) -> Optional[dict]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        return self._update(
            "remove_like",
            {"_id": oid, "likes.user": user_id},
            {"$pull": {"likes": {"user": user_id}}},
        )

    def add_comment(self, post_id: str, comment: dict) -> Optional[dict]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        return self._update(
            "add_comment",
            {"_id": oid},
            {"$push": {"comments": {"$each": [comment], "$position": 0}}},
        )

    def remove_comment(self, post_id: str, comment_id: str) -> Optional[dict]:
        oid = to_object_id(post_id)
        cid = to_object_id(comment_id)
        if oid is None or cid is None:
            return None
        return self._update(
            "remove_comment",
            {"_id": oid, "comments._id": cid},
            {"$pull": {"comments": {"_id": cid}}},
        )
