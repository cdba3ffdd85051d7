import logging
from datetime import datetime, timezone
from typing import List, Optional, Type

from bson.objectid import ObjectId

from ..errors import (
    AlreadyLikedError,
    CommentNotFoundError,
    NotAuthorizedError,
    NotLikedError,
    PostboardError,
    PostNotFoundError,
    ValidationError,
)
from ..models.post import PostInput, PostOut, post_from_doc
from ..storage.posts import PostStore
from ..validation.post import validate_post_input

logger = logging.getLogger(__name__)

# Comment routes report a missing post without the "with that ID" suffix.
COMMENT_POST_NOT_FOUND = "Post was not found"


def _has_like(post: dict, user_id: str) -> bool:
    return any(str(like["user"]) == user_id for like in post.get("likes", []))


def _find_comment(post: dict, comment_id: str):
    for comment in post.get("comments", []):
        if str(comment["_id"]) == comment_id:
            return comment
    return None


class PostService:
    def __init__(self, store: PostStore):
        self.store = store

    def _get_doc(self, post_id: str, not_found: Optional[str] = None) -> dict:
        post = self.store.find_by_id(post_id)
        if post is None:
            raise PostNotFoundError(not_found)
        return post

    def _lost_race(
        self, post_id: str, error: Type[PostboardError], not_found: Optional[str] = None
    ) -> PostboardError:
        # The conditional update matched nothing: either the post is gone or
        # its state no longer satisfies the precondition.
        if self.store.find_by_id(post_id) is None:
            return PostNotFoundError(not_found)
        return error()

    def _validate(self, body: PostInput) -> None:
        errors, is_valid = validate_post_input(body)
        if not is_valid:
            logger.info("Rejected post input: %s", errors)
            raise ValidationError(errors)

    def list_posts(self) -> List[PostOut]:
        return [post_from_doc(doc) for doc in self.store.find_all()]

    def get_post(self, post_id: str) -> PostOut:
        return post_from_doc(self._get_doc(post_id))

    def create_post(self, author_id: str, body: PostInput) -> PostOut:
        self._validate(body)
        doc = {
            "user": author_id,
            "text": body.text,
            "name": body.name,
            "avatar": body.avatar,
            "likes": [],
            "comments": [],
            "date": datetime.now(timezone.utc),
        }
        doc = self.store.insert(doc)
        logger.info("User %s created post %s", author_id, doc["_id"])
        return post_from_doc(doc)

    def delete_post(self, post_id: str, requester_id: str) -> None:
        post = self._get_doc(post_id)
        if str(post["user"]) != requester_id:
            logger.warning("User %s tried to delete post %s", requester_id, post_id)
            raise NotAuthorizedError()
        if not self.store.delete_owned(post_id, requester_id):
            raise PostNotFoundError()
        logger.info("User %s deleted post %s", requester_id, post_id)

    def like_post(self, post_id: str, requester_id: str) -> PostOut:
        post = self._get_doc(post_id)
        if _has_like(post, requester_id):
            raise AlreadyLikedError()
        updated = self.store.add_like(post_id, requester_id)
        if updated is None:
            raise self._lost_race(post_id, AlreadyLikedError)
        return post_from_doc(updated)

    def unlike_post(self, post_id: str, requester_id: str) -> PostOut:
        post = self._get_doc(post_id)
        if not _has_like(post, requester_id):
            raise NotLikedError()
        updated = self.store.remove_like(post_id, requester_id)
        if updated is None:
            raise self._lost_race(post_id, NotLikedError)
        return post_from_doc(updated)

    def add_comment(self, post_id: str, author_id: str, body: PostInput) -> PostOut:
        self._validate(body)
        self._get_doc(post_id, COMMENT_POST_NOT_FOUND)
        comment = {
            "_id": ObjectId(),
            "user": author_id,
            "text": body.text,
            "name": body.name,
            "avatar": body.avatar,
            "date": datetime.now(timezone.utc),
        }
        updated = self.store.add_comment(post_id, comment)
        if updated is None:
            raise PostNotFoundError(COMMENT_POST_NOT_FOUND)
        return post_from_doc(updated)

    def remove_comment(self, post_id: str, comment_id: str, requester_id: str) -> PostOut:
        post = self._get_doc(post_id, COMMENT_POST_NOT_FOUND)
        comment = _find_comment(post, comment_id)
        if comment is None:
            raise CommentNotFoundError()
        if str(post["user"]) != requester_id:
            logger.warning(
                "User %s tried to remove comment %s on post %s", requester_id, comment_id, post_id
            )
            raise NotAuthorizedError()
        updated = self.store.remove_comment(post_id, comment_id)
        if updated is None:
            raise self._lost_race(post_id, CommentNotFoundError, COMMENT_POST_NOT_FOUND)
        return post_from_doc(updated)
