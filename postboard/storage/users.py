from typing import Optional

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from .posts import to_object_id, translate_errors


class UserStore:
    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        with translate_errors("ensure_indexes"):
            self.collection.create_index([("email", ASCENDING)], unique=True)

    def find_by_id(self, user_id: str) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        with translate_errors("find_user"):
            return self.collection.find_one({"_id": oid})

    def find_by_email(self, email: str) -> Optional[dict]:
        with translate_errors("find_user_by_email"):
            return self.collection.find_one({"email": email})

    def insert(self, doc: dict) -> Optional[dict]:
        """Store a new user. Returns ``None`` when the email is taken."""
        with translate_errors("insert_user"):
            try:
                result = self.collection.insert_one(doc)
            except DuplicateKeyError:
                return None
        doc["_id"] = result.inserted_id
        return doc
