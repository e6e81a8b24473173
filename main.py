"""SauceNAO Search Service

A FastAPI service wrapping the SauceNAO client.
Supports both:
1. Search by image URL
2. Search by uploaded image file
"""

import logging
from typing import Optional
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, HttpUrl

from saucenao import ErrType, HandlerBuilder, Sauce, SauceError, load_settings

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

app = FastAPI(
    title="SauceNAO Search API",
    description="Find the source of an image via SauceNAO",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shared so rate-limit counters survive between requests
handler = HandlerBuilder.from_settings(load_settings()).build()


class SearchRequest(BaseModel):
    """Request model for search by URL"""
    # pydantic normalizes the link (trailing slash, percent-encoding) before it is forwarded
    image_url: HttpUrl
    num_results: Optional[int] = None
    min_similarity: Optional[float] = None


class SauceResponseItem(BaseModel):
    ext_urls: list[str] = []
    title: str = ""
    site: str
    index: int
    index_id: int
    similarity: float
    thumbnail: str = ""
    additional_fields: Optional[dict] = None


class LimitsResponse(BaseModel):
    short_limit: int
    long_limit: int
    short_remaining: int
    long_remaining: int


class SearchResponse(BaseModel):
    """Response model for both search endpoints"""
    found: bool
    results: list[SauceResponseItem]
    limits: LimitsResponse


@app.get("/")
async def root():
    """Service description"""
    return {
        "status": "healthy",
        "service": "saucenao-search",
        "version": "1.0.0",
        "endpoints": {
            "/sauce": "Search by image URL",
            "/sauce/upload": "Search by uploading an image file",
            "/limits": "Current SauceNAO rate-limit counters"
        },
        "env_vars_needed": ["SAUCENAO_API_KEY"]
    }


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "api_key_configured": bool(handler.api_key),
        "limits": handler.limits()
    }


@app.get("/limits", response_model=LimitsResponse)
async def limits():
    return LimitsResponse(**handler.limits())


@app.post("/sauce", response_model=SearchResponse)
async def search(request: SearchRequest):
    image_url = str(request.image_url)
    logger.info(f"Search for URL: {image_url}")

    return await _perform_search(image_url, request.num_results, request.min_similarity)


@app.post("/sauce/upload", response_model=SearchResponse)
async def search_upload(
    file: UploadFile = File(...),
    num_results: Optional[int] = Form(default=None),
    min_similarity: Optional[float] = Form(default=None)
):
    logger.info(f"Search for uploaded file: {file.filename}")

    image_bytes = await file.read()

    if len(image_bytes) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File too large (max 10MB)")

    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="File must be an image")

    return await _perform_search(image_bytes, num_results, min_similarity)


async def _perform_search(image, num_results: Optional[int], min_similarity: Optional[float]) -> SearchResponse:
    try:
        results = await handler.get_sauce(image, num_results, min_similarity)
    except SauceError as e:
        logger.error(f"Search failed: {e}")
        raise HTTPException(status_code=_status_for(e), detail=str(e))

    return SearchResponse(
        found=len(results) > 0,
        results=[_to_item(sauce) for sauce in results],
        limits=LimitsResponse(**handler.limits())
    )


def _status_for(error: SauceError) -> int:
    if error.kind is ErrType.INVALID_PARAMETER:
        return 400
    if error.kind is ErrType.INVALID_CODE:
        return 502
    return 500


def _to_item(sauce: Sauce) -> SauceResponseItem:
    return SauceResponseItem(**sauce.to_dict())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
