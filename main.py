import os
from html import escape
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Local imports
from archive import perform_archive
from models import ArchiveResult, ConfigError, MethodNotAllowedResponse
from settings import PageLinks, load_config, load_page_links
from slides_client import create_slides_client


# Logging configuration
import logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="[%(asctime)s] %(levelname)s %(message)s",
)

ARCHIVE_PATH = "/api/archive"
ARCHIVE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# --- FastAPI App ---
app = FastAPI(
    title="Weekly Slides Archiver",
    description="Moves this week's Google Slides into the archive deck and resets the current deck.",
    version="1.0.0"
)


# --- Helper Functions ---
def run_archive() -> ArchiveResult:
    """Loads configuration and runs one archive cycle against the configured decks."""
    try:
        config = load_config()
        client = create_slides_client(config.service_account)
    except ConfigError as e:
        logging.error(f"Archive configuration error: {e}")
        return ArchiveResult.failed(str(e), e.kind)

    return perform_archive(config, client)


def render_home_page(links: PageLinks) -> str:
    buttons = []
    if links.add_slides_url:
        buttons.append(f'<a href="{escape(links.add_slides_url)}"><button>add slides</button></a>')
    if links.present_url:
        buttons.append(f'<a href="{escape(links.present_url)}"><button>present</button></a>')

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>ax-slides</title>
  <meta name="description" content="A simple tool to add visual aids to our weekly meetings">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <style>
    body {{ font-family: sans-serif; display: flex; justify-content: center; }}
    main {{ max-width: 40rem; padding: 2rem; }}
    button {{ margin: 0.5rem 0.5rem 0 0; padding: 0.6rem 1.2rem; font-size: 1rem; cursor: pointer; }}
  </style>
</head>
<body>
  <main>
    <h1>ax-slides</h1>
    <p>1. if you need any visual aids during the meeting, add slides to the current week's Google Slides by clicking "add slides". this is optional.</p>
    <p>2. on the meeting room mac mini, open this website and click "Present".</p>
    <p>make sure you're logged into your google account.</p>
    {" ".join(buttons)}
    <br><br>
    <p>github: <a href="{escape(links.repo_url)}">ax-slides</a></p>
  </main>
</body>
</html>
"""


def method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content=MethodNotAllowedResponse().model_dump())


@app.exception_handler(StarletteHTTPException)
async def archive_method_handler(request: Request, exc: StarletteHTTPException):
    """Verbs the router rejects on the archive path still get the JSON 405 body."""
    if exc.status_code == 405 and request.url.path == ARCHIVE_PATH:
        return method_not_allowed()
    return await http_exception_handler(request, exc)


# --- Main Endpoint --- #
@app.api_route(ARCHIVE_PATH, methods=ARCHIVE_METHODS, summary="Archive the current deck and reset it")
def archive_endpoint(request: Request):
    """Copies all current slides into the archive deck, then deletes all but the first."""
    if request.method != "POST":
        return method_not_allowed()

    logging.info("Archive request received")
    try:
        result = run_archive()
    except Exception as e:
        logging.error(f"Unexpected error in API handler: {e}", exc_info=True)
        body: Dict[str, Any] = {
            "success": False,
            "message": "Internal server error",
            "error": str(e) or type(e).__name__,
        }
        return JSONResponse(status_code=500, content=body)

    return JSONResponse(status_code=200 if result.success else 500, content=result.to_response())


@app.get("/", response_class=HTMLResponse)
async def root():
    return HTMLResponse(render_home_page(load_page_links()))


@app.get("/health")
async def health():
    return {"status": "ok"}
