"""FastAPI app, storage error handling, static web root, and route registration."""
import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from lanplayer.api.state import AppState, get_state
from lanplayer.config import COMPACT_INTERVAL_SEC, WEB_ROOT, ensure_data_dir
from lanplayer.core.json_document import StorageError

# Import routes after state to avoid circular imports
from lanplayer.api.routes import devices, layout, plays

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


def _compaction_loop(state: AppState, interval: float, stop_event: threading.Event) -> None:
    """Background loop: drop stale device entries from disk every interval."""
    while not stop_event.wait(timeout=interval):
        try:
            state.devices.compact()
        except Exception as e:
            logger.warning("Registry compaction: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    state = get_state()
    state.ensure_storage()

    stop = threading.Event()
    thread = None
    if COMPACT_INTERVAL_SEC > 0:
        thread = threading.Thread(
            target=_compaction_loop,
            args=(state, COMPACT_INTERVAL_SEC, stop),
            daemon=True,
        )
        thread.start()
        logger.info("Registry compaction started (interval %.0fs)", COMPACT_INTERVAL_SEC)

    yield

    stop.set()
    if thread is not None:
        thread.join(timeout=5.0)


app = FastAPI(
    title="lanplayer API",
    description="Play counts and now-playing device status for players on the local network",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "storage error"})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or mistyped request bodies answer 400."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


app.include_router(plays.router, prefix="/api", tags=["plays"])
app.include_router(devices.router, prefix="/api", tags=["devices"])
app.include_router(layout.router, tags=["layout"])


@app.get("/", include_in_schema=False)
def index():
    """Entry page; it picks the desktop/mobile/tv layout on the client."""
    path = WEB_ROOT / "index.html"
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(path)


# Static files last so the routes above win
app.mount("/", StaticFiles(directory=WEB_ROOT, check_dir=False), name="web")
