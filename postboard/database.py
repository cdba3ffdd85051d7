import logging

from fastapi import Depends
from pymongo import MongoClient

from .config import MONGO_URI, DB_NAME, MONGO_TIMEOUT_MS
from .storage.posts import PostStore
from .storage.users import UserStore

logger = logging.getLogger(__name__)

# MongoClient connects lazily, so importing this module never blocks on the server.
client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=MONGO_TIMEOUT_MS, tz_aware=True)
db = client[DB_NAME]

logger.debug("Using MongoDB database %s", DB_NAME)


def get_db():
    return db


def get_post_store(database=Depends(get_db)) -> PostStore:
    return PostStore(database.posts)


def get_user_store(database=Depends(get_db)) -> UserStore:
    return UserStore(database.users)
