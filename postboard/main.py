import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from postboard.config import CORS_ORIGINS, LOG_LEVEL
from postboard.database import db
from postboard.errors import PostboardError, StorageError
from postboard.routes import auth, ping, posts
from postboard.storage.posts import PostStore
from postboard.storage.users import UserStore
from postboard.utils.logging_config import setup_logging

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        PostStore(db.posts).ensure_indexes()
        UserStore(db.users).ensure_indexes()
    except StorageError:
        logger.warning("Could not create indexes; continuing without them")
    yield


app = FastAPI(title="Postboard API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PostboardError)
async def postboard_error_handler(request: Request, exc: PostboardError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(ping.router)
app.include_router(auth.router)
app.include_router(posts.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
