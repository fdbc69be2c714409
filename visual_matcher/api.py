"""
HTTP API for the visual product matcher.

Routes:
    GET  /                     Liveness message and catalog size
    GET  /api/products         Catalog listing, optionally by category
    GET  /api/categories       Category ids and display labels
    POST /api/search           Rank the catalog for an upload or image URL
    POST /api/catalog/reload   Re-read the catalog file

Only the search route is async, because it reads the upload. Scoring
itself is handed to the threadpool like the plain routes.
"""

import os
import logging
from typing import List, Optional

from fastapi import FastAPI, File, Form, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .engine import MatchEngine
from .filtering import ALL_CATEGORIES, category_labels
from .query import MissingQueryInputError, UploadTooLargeError, check_upload_size, derive_query_key
from .schemas import (
    CategoryListResponse, ErrorResponse, ProductListResponse, ReloadResponse,
    SearchResponse, StatusResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:3001"
UPLOAD_CHUNK_BYTES = 64 * 1024

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def cors_origins() -> List[str]:
    """Allowed CORS origins from VISUAL_MATCHER_CORS_ORIGINS (comma separated)."""
    raw = os.environ.get("VISUAL_MATCHER_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(ErrorResponse(error=message)),
    )


async def measure_upload(upload: UploadFile, chunk_size: int = UPLOAD_CHUNK_BYTES) -> int:
    """
    Measure an upload without holding it in memory.

    The declared size is checked first when the server knows it. The
    body is then read chunk by chunk and reading stops as soon as the
    running total passes the limit.

    Args:
        upload: Uploaded file.
        chunk_size: Bytes read per step.

    Returns:
        Size of the upload in bytes.

    Raises:
        UploadTooLargeError: If the upload exceeds the size limit.
    """
    declared = getattr(upload, "size", None)
    if declared is not None:
        check_upload_size(declared)

    total = 0
    while True:
        chunk = await upload.read(chunk_size)
        if not chunk:
            return total
        total += len(chunk)
        check_upload_size(total)


def create_app(engine: MatchEngine = None) -> FastAPI:
    """
    Build the FastAPI application around a match engine.

    Args:
        engine: Engine serving the routes. Defaults to one over the
                configured catalog path.

    Returns:
        Configured FastAPI app with CORS enabled.
    """
    engine = engine if engine is not None else MatchEngine()

    app = FastAPI(title="Visual Product Matcher", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.state.engine = engine

    @app.get("/", response_model=StatusResponse)
    def root() -> dict:
        return {
            "message": "Visual Product Matcher API is running!",
            "loadedProducts": len(engine.store.catalog),
        }

    @app.get("/api/products", response_model=ProductListResponse)
    def products(category: str = ALL_CATEGORIES) -> dict:
        return engine.list_products(category=category)

    @app.get("/api/categories", response_model=CategoryListResponse)
    def categories() -> dict:
        return {"success": True, "categories": category_labels()}

    @app.post("/api/search", response_model=SearchResponse, responses=ERROR_RESPONSES)
    async def search(
        image: Optional[UploadFile] = File(default=None),
        imageUrl: Optional[str] = Form(default=None),
        minSimilarity: int = Query(default=0, ge=0, le=100),
        category: str = Query(default=ALL_CATEGORIES),
    ):
        try:
            if image is not None:
                await measure_upload(image)
                query_key = derive_query_key(
                    filename=image.filename,
                    content_type=image.content_type,
                    has_upload=True,
                )
            else:
                query_key = derive_query_key(image_url=imageUrl)
        except MissingQueryInputError as exc:
            return _error(400, str(exc))
        except UploadTooLargeError as exc:
            return _error(413, str(exc))

        try:
            return await run_in_threadpool(
                engine.search, query_key,
                min_similarity=minSimilarity, category=category,
            )
        except Exception as exc:
            logger.exception(f"Search error for {query_key!r}")
            return _error(500, str(exc))

    @app.post("/api/catalog/reload", response_model=ReloadResponse)
    def reload_catalog() -> dict:
        count = engine.reload()
        return {"success": True, "loadedProducts": count}

    return app
