# ========================
# api_server.py
# ========================

"""
FastAPI Server for the Proto-Seediq Lexicon Viewer

Loads the lexicon once at startup and serves the searchable, sortable view
to the dashboard page.
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager, suppress
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from fastapi import Body, FastAPI, HTTPException, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn

from src.query import is_sortable
from src.utils.config import Config
from src.utils.debounce import Debouncer
from src.utils.logging_setup import setup_logging
from src.viewer import ViewerSession

# Configuration
config = Config()

# Setup logging
setup_logging(log_level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Default session used by the REST endpoints; replaced wholesale in tests
session = ViewerSession(config)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the one-time lexicon load before serving requests."""
    state = await session.load_async()
    if state.loaded:
        logger.info(f"Lexicon ready: {len(state.table):,} rows")
    else:
        logger.warning(f"Serving without data: {state.error_message}")
    yield

# Initialize FastAPI app
app = FastAPI(
    title="Proto-Seediq Lexicon API",
    description="Search and sort reconstructed Proto-Seediq vocabulary",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware to allow frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount static files for dashboard
dashboard_path = Path(__file__).parent / "dashboard_app"
if dashboard_path.exists():
    app.mount("/dashboard", StaticFiles(directory=str(dashboard_path), html=True), name="dashboard")
    logger.info(f"Dashboard mounted at /dashboard from {dashboard_path}")
else:
    logger.warning(f"Dashboard directory not found: {dashboard_path}")

# Constants
NOT_SORTABLE_MSG = "Only the Gloss and Proto-Seediq columns can be sorted"

def _parse_filters(raw: Any) -> Dict[int, str]:
    """Turn a JSON filter object into a FilterSet, rejecting bad shapes."""
    if not isinstance(raw, dict):
        raise ValueError("filters must be an object of column index to search term")
    filters = {}
    for key, value in raw.items():
        if value is None:
            value = ''
        if not isinstance(value, str):
            raise ValueError(f"search term for column {key} must be a string")
        filters[int(key)] = value
    return filters

@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Proto-Seediq Lexicon API",
        "version": "1.0.0",
        "endpoints": {
            "view": "/view - Current headers, rows, filters and sort",
            "search": "/search - Replace the per-column search terms",
            "sort": "/sort/{column_index} - Toggle sort on Gloss or Proto-Seediq",
            "notifications": "/notifications - Load errors and other messages",
            "stats": "/stats - Load statistics",
            "websocket": "/ws - Live view with debounced search",
            "health": "/health - Health check",
            "dashboard": "/dashboard - Interactive viewer",
            "api_docs": "/docs - API documentation"
        },
        "dashboard_url": "/dashboard",
        "api_docs_url": "/docs"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    state = session.state
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "loading": state.loading,
        "loaded": state.loaded,
        "rows": len(state.table) if state.loaded else 0
    }

@app.get("/view")
async def get_view():
    """Current derived view for the rendering layer."""
    return session.state.to_dict()

@app.post("/search")
async def search(filters: Dict[int, str] = Body(..., description="Column index to search term")):
    """
    Replace the active search terms and return the recomputed view.

    Args:
        filters: Mapping of column index to raw search term; blank terms are ignored

    Returns:
        dict: Updated view state
    """
    state = session.search(filters)
    logger.debug(f"Search {filters} -> {state.view and len(state.view)} rows")
    return state.to_dict()

@app.post("/sort/{column_index}")
async def sort(column_index: int):
    """
    Request a sort on one column. Repeating the request on the ascending
    column flips it to descending.

    Args:
        column_index: Index into the current headers

    Returns:
        dict: Updated view state
    """
    state = session.state
    if not state.loaded:
        raise HTTPException(status_code=409, detail="No data loaded")
    if not 0 <= column_index < len(state.table.headers):
        raise HTTPException(status_code=404, detail=f"Column {column_index} does not exist")
    if not is_sortable(state.table.headers, column_index):
        raise HTTPException(status_code=400, detail=NOT_SORTABLE_MSG)
    return session.sort(column_index).to_dict()

@app.get("/notifications")
async def list_notifications(
    since_id: int = Query(0, description="Only return notifications newer than this id", ge=0)
):
    """Notifications raised since `since_id`, oldest first."""
    items = session.notifier.recent(since_id)
    return {
        "notifications": [item.to_dict() for item in items],
        "last_id": items[-1].id if items else since_id
    }

@app.get("/stats")
async def load_stats():
    """Statistics from the startup load."""
    if not session.state.loaded:
        raise HTTPException(status_code=409, detail="No data loaded")
    return session.load_stats

@app.websocket("/ws")
async def view_socket(websocket: WebSocket):
    """
    Live view channel. Each connection gets its own filters and sort over the
    shared table. Search messages are debounced; sort messages apply at once.
    """
    await websocket.accept()
    client = session.fork()
    outbox: asyncio.Queue = asyncio.Queue()

    def apply_search(filters: Dict[int, str]) -> None:
        outbox.put_nowait(client.search(filters).to_dict())

    debouncer = Debouncer(session.config.search_debounce_seconds, apply_search)

    async def drain() -> None:
        while True:
            await websocket.send_json(await outbox.get())

    sender = asyncio.create_task(drain())
    outbox.put_nowait(client.state.to_dict())

    try:
        while True:
            try:
                text = await websocket.receive_text()
            except KeyError:
                logger.warning("Rejected binary websocket frame")
                outbox.put_nowait({"type": "error", "detail": "expected a text frame"})
                continue
            try:
                message = json.loads(text)
                kind = message.get("type")
                if kind == "search":
                    debouncer.trigger(_parse_filters(message.get("filters", {})))
                elif kind == "sort":
                    debouncer.flush()
                    outbox.put_nowait(client.sort(int(message["column"])).to_dict())
                else:
                    raise ValueError(f"unknown message type {kind!r}")
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Rejected websocket message {text!r}: {e}")
                outbox.put_nowait({"type": "error", "detail": str(e)})
    except WebSocketDisconnect:
        logger.info("Websocket client disconnected")
    finally:
        debouncer.cancel()
        sender.cancel()
        # A send that failed after disconnect has already ended the drain task
        with suppress(Exception, asyncio.CancelledError):
            await sender

def start_server(host: str = config.API_HOST, port: int = config.API_PORT, reload: bool = False):
    """Start the FastAPI server."""
    logger.info(f"Starting Proto-Seediq Lexicon API server on {host}:{port}")
    uvicorn.run(
        "api_server:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )

if __name__ == "__main__":
    start_server(reload=True)
