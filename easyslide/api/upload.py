from __future__ import annotations

import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import PlainTextResponse, Response


logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_PATH = "/upload"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.api_route("/health", methods=["GET", "HEAD"])
def health() -> PlainTextResponse:
    return PlainTextResponse("OK")


@router.options(UPLOAD_PATH)
def upload_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route(UPLOAD_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"])
def upload_method_not_allowed() -> PlainTextResponse:
    return PlainTextResponse(
        "Method not allowed",
        status_code=405,
        headers={**CORS_HEADERS, "Allow": "POST, OPTIONS"},
    )


@router.post(UPLOAD_PATH)
async def upload_slides(request: Request, file: UploadFile = File(...)) -> PlainTextResponse:
    """Accept a markdown upload and make it the current presentation."""
    filename = file.filename or "slide.md"
    limit = request.app.state.settings.max_upload_bytes

    contents = await file.read(limit + 1)
    if len(contents) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: over {limit} bytes",
            headers=CORS_HEADERS,
        )

    markdown = contents.decode("utf-8", errors="replace")
    try:
        await request.app.state.publish(markdown)
    except OSError as e:
        logger.error(f"Failed to store upload {filename!r}: {e}")
        raise HTTPException(status_code=500, detail=str(e), headers=CORS_HEADERS)

    logger.info(f"Uploaded {filename!r} ({len(contents)} bytes)")
    return PlainTextResponse(f"File uploaded successfully: {filename}", headers=CORS_HEADERS)


async def reject_oversized_upload(request: Request, call_next):
    """Answer 413 before the form is parsed when the declared body is over the limit."""
    if request.url.path == UPLOAD_PATH and request.method == "POST":
        limit = request.app.state.settings.max_upload_bytes
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > limit:
            logger.info(f"Rejected upload of {declared} bytes (limit {limit})")
            return PlainTextResponse(
                f"Request body too large: {declared} bytes (limit {limit})",
                status_code=413,
                headers=CORS_HEADERS,
            )
    return await call_next(request)
