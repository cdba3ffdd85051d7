from fastapi import APIRouter, Depends
from typing import List

from ..database import get_post_store
from ..errors import NoPostsError, PostNotFoundError, StorageError
from ..models.post import PostInput, PostOut
from ..services.post_service import PostService
from ..storage.posts import PostStore
from .auth import get_current_user

router = APIRouter(prefix="/api/posts", tags=["posts"])


def get_post_service(store: PostStore = Depends(get_post_store)) -> PostService:
    return PostService(store)


def with_author_defaults(body: PostInput, current_user: dict) -> PostInput:
    """Fill a missing display name or avatar from the author's profile."""
    return PostInput(
        text=body.text,
        name=body.name if body.name is not None else current_user.get("name"),
        avatar=body.avatar if body.avatar is not None else current_user.get("avatar"),
    )


@router.get("/test")
def test():
    return {"msg": "posts works"}


# --- Read ---
@router.get("/", response_model=List[PostOut])
def get_posts(service: PostService = Depends(get_post_service)):
    try:
        return service.list_posts()
    except StorageError as exc:
        raise NoPostsError(internal_error=exc.message) from exc


@router.get("/{post_id}", response_model=PostOut)
def get_post(post_id: str, service: PostService = Depends(get_post_service)):
    try:
        return service.get_post(post_id)
    except PostNotFoundError as exc:
        raise PostNotFoundError(status_code=400) from exc


# --- Create / Delete ---
@router.post("/", response_model=PostOut)
def create_post(
    body: PostInput,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.create_post(str(current_user["_id"]), with_author_defaults(body, current_user))


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    service.delete_post(post_id, str(current_user["_id"]))
    return {"success": True}


# --- Like/Unlike Posts ---
@router.post("/like/{post_id}", response_model=PostOut)
def like_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.like_post(post_id, str(current_user["_id"]))


@router.post("/unlike/{post_id}", response_model=PostOut)
def unlike_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.unlike_post(post_id, str(current_user["_id"]))


# --- Comments ---
@router.post("/comment/{post_id}", response_model=PostOut)
def add_comment(
    post_id: str,
    body: PostInput,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.add_comment(
        post_id, str(current_user["_id"]), with_author_defaults(body, current_user)
    )


@router.delete("/comment/{post_id}/{comment_id}", response_model=PostOut)
def delete_comment(
    post_id: str,
    comment_id: str,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return service.remove_comment(post_id, comment_id, str(current_user["_id"]))
