"""
Shared fixtures.

The MongoDB-backed stores are replaced by in-memory doubles with the same
method contract (including the conditional array updates), so route and
service tests run without a database server.
"""

import copy
import os
from typing import List, Optional

import pytest
from bson.objectid import ObjectId
from fastapi.testclient import TestClient

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from postboard.database import get_post_store, get_user_store  # noqa: E402
from postboard.main import app  # noqa: E402
from postboard.routes.auth import create_access_token  # noqa: E402
from postboard.services.post_service import PostService  # noqa: E402
from postboard.storage.posts import to_object_id  # noqa: E402


class InMemoryPostStore:
    def __init__(self):
        self.docs = {}

    def find_all(self) -> List[dict]:
        docs = sorted(self.docs.values(), key=lambda d: d["date"], reverse=True)
        return copy.deepcopy(docs)

    def find_by_id(self, post_id: str) -> Optional[dict]:
        oid = to_object_id(post_id)
        doc = self.docs.get(oid)
        return copy.deepcopy(doc) if doc else None

    def insert(self, doc: dict) -> dict:
        doc["_id"] = ObjectId()
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return doc

    def delete_owned(self, post_id: str, user_id: str) -> bool:
        oid = to_object_id(post_id)
        doc = self.docs.get(oid)
        if doc is None or doc["user"] != user_id:
            return False
        del self.docs[oid]
        return True

    def add_like(self, post_id: str, user_id: str) -> Optional[dict]:
        doc = self.docs.get(to_object_id(post_id))
        if doc is None or any(like["user"] == user_id for like in doc["likes"]):
            return None
        doc["likes"].insert(0, {"user": user_id})
        return copy.deepcopy(doc)

    def remove_like(self, post_id: str, user_id: str) -> Optional[dict]:
        doc = self.docs.get(to_object_id(post_id))
        if doc is None or not any(like["user"] == user_id for like in doc["likes"]):
            return None
        doc["likes"] = [like for like in doc["likes"] if like["user"] != user_id]
        return copy.deepcopy(doc)

    def add_comment(self, post_id: str, comment: dict) -> Optional[dict]:
        doc = self.docs.get(to_object_id(post_id))
        if doc is None:
            return None
        doc["comments"].insert(0, copy.deepcopy(comment))
        return copy.deepcopy(doc)

    def remove_comment(self, post_id: str, comment_id: str) -> Optional[dict]:
        doc = self.docs.get(to_object_id(post_id))
        cid = to_object_id(comment_id)
        if doc is None or not any(c["_id"] == cid for c in doc["comments"]):
            return None
        doc["comments"] = [c for c in doc["comments"] if c["_id"] != cid]
        return copy.deepcopy(doc)


class InMemoryUserStore:
    def __init__(self):
        self.docs = {}

    def find_by_id(self, user_id: str) -> Optional[dict]:
        return self.docs.get(to_object_id(user_id))

    def find_by_email(self, email: str) -> Optional[dict]:
        for doc in self.docs.values():
            if doc["email"] == email:
                return doc
        return None

    def insert(self, doc: dict) -> Optional[dict]:
        if self.find_by_email(doc["email"]):
            return None
        doc["_id"] = ObjectId()
        self.docs[doc["_id"]] = doc
        return doc


@pytest.fixture
def post_store():
    return InMemoryPostStore()


@pytest.fixture
def user_store():
    store = InMemoryUserStore()
    store.insert({"name": "Alice", "email": "alice@example.com", "avatar": "http://a/img.png"})
    store.insert({"name": "Bob", "email": "bob@example.com", "avatar": None})
    return store


@pytest.fixture
def alice(user_store):
    return user_store.find_by_email("alice@example.com")


@pytest.fixture
def bob(user_store):
    return user_store.find_by_email("bob@example.com")


@pytest.fixture
def service(post_store):
    return PostService(post_store)


@pytest.fixture
def auth_header():
    def make(user: dict) -> dict:
        return {"Authorization": f"Bearer {create_access_token(str(user['_id']))}"}

    return make


@pytest.fixture
def client(post_store, user_store):
    app.dependency_overrides[get_post_store] = lambda: post_store
    app.dependency_overrides[get_user_store] = lambda: user_store
    yield TestClient(app)
    app.dependency_overrides.clear()
