"""HTTP API for the browser editor.

Five endpoints, each a thin handler over the services:

    POST /api/create-post          create or update a post
    GET  /api/get-post-content     read one post for editing
    GET  /api/get-posts            list posts, newest first
    POST /api/upload-image         upload an image on its own
    POST /api/guestbook-entry      sign the guestbook

Every error is answered as ``{"error": "<message>"}`` with the status code the
exception carries. Handlers are plain ``def`` functions, so FastAPI runs them
in its thread pool and a slow GitHub round trip only holds up its own request.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .client import GitHubClient
from .config import Settings, load_settings
from .exceptions import ConfigError, GitQuillError
from .guestbook import GuestbookService
from .images import upload_image
from .models.guestbook import GuestbookEntryRequest
from .models.image import ImageUploadRequest
from .models.post import PostRequest
from .posts import PostService, parse_page
from .utils.exceptions import INTERNAL_ERROR_MESSAGE, public_message, status_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_settings(request: Request) -> Settings:
    """Settings validated at startup; a broken configuration fails every request."""
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise getattr(request.app.state, "config_error", None) or ConfigError("Settings not loaded")
    return settings


def get_client(settings: Settings = Depends(get_settings)) -> GitHubClient:
    return GitHubClient.from_settings(settings)


def get_post_service(
    settings: Settings = Depends(get_settings),
    client: GitHubClient = Depends(get_client),
) -> PostService:
    return PostService(settings, client=client)


def get_guestbook_service(
    settings: Settings = Depends(get_settings),
    client: GitHubClient = Depends(get_client),
) -> GuestbookService:
    return GuestbookService(settings, client=client)


@router.post("/create-post")
def create_post(
    body: PostRequest,
    service: PostService = Depends(get_post_service),
) -> JSONResponse:
    """Create a post (201) or update one when ``path`` and ``sha`` are sent (200)."""
    logger.info(
        "Save request: update=%s, has_image=%s",
        body.is_update,
        bool(body.image_data),
    )
    result = service.save_post(body)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        content=result.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/get-post-content")
def get_post_content(
    path: Optional[str] = None,
    service: PostService = Depends(get_post_service),
) -> dict:
    return service.get_post(path).model_dump()


@router.get("/get-posts")
def get_posts(
    page: Optional[str] = None,
    service: PostService = Depends(get_post_service),
) -> dict:
    return service.list_posts(page=parse_page(page)).model_dump(by_alias=True)


@router.post("/upload-image", status_code=status.HTTP_201_CREATED)
def upload_image_endpoint(
    body: ImageUploadRequest,
    settings: Settings = Depends(get_settings),
    client: GitHubClient = Depends(get_client),
) -> dict:
    return upload_image(body, settings, client=client).model_dump(by_alias=True, exclude_none=True)


@router.post("/guestbook-entry", status_code=status.HTTP_201_CREATED)
def guestbook_entry(
    body: GuestbookEntryRequest,
    service: GuestbookService = Depends(get_guestbook_service),
) -> dict:
    return service.sign(body).model_dump()


async def gitquill_exception_handler(request: Request, exc: GitQuillError) -> JSONResponse:
    status_code = status_for(exc)
    if isinstance(exc, ConfigError):
        logger.error("Configuration error: %s", exc.message)
    elif status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, status_code, exc.message)

    return JSONResponse(status_code=status_code, content={"error": public_message(exc)})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Validation error: %s", exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body."},
    )


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Deployment settings; loaded from the environment when omitted.
            A configuration that fails to load is logged once here and every
            request is then answered with 500.
    """
    app = FastAPI(title="gitquill", version=__version__)

    app.state.settings = settings
    app.state.config_error = None
    if settings is None:
        try:
            app.state.settings = load_settings()
        except ConfigError as e:
            logger.error("Configuration error: %s", e.message)
            app.state.config_error = e

    app.add_exception_handler(GitQuillError, gitquill_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
    app.include_router(router)

    @app.get("/ping")
    def ping() -> dict:
        return {"status": "ok"}

    return app
