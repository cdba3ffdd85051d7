from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class PostInput(BaseModel):
    # Everything optional so missing fields surface as field errors, not 422s.
    text: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None


class Like(BaseModel):
    user: str


class Comment(BaseModel):
    id: str
    user: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    date: datetime


class PostOut(BaseModel):
    id: str
    user: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    likes: List[Like] = []
    comments: List[Comment] = []
    date: datetime


def comment_from_doc(doc: dict) -> Comment:
    return Comment(
        id=str(doc["_id"]),
        user=str(doc["user"]),
        text=doc["text"],
        name=doc.get("name"),
        avatar=doc.get("avatar"),
        date=doc["date"],
    )


def post_from_doc(doc: dict) -> PostOut:
    return PostOut(
        id=str(doc["_id"]),
        user=str(doc["user"]),
        text=doc["text"],
        name=doc.get("name"),
        avatar=doc.get("avatar"),
        likes=[Like(user=str(like["user"])) for like in doc.get("likes", [])],
        comments=[comment_from_doc(c) for c in doc.get("comments", [])],
        date=doc["date"],
    )
