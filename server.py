from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, List, Optional, Tuple

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from recommender.catalog import MovieCatalog, scored_movies
from recommender.config import configure_logging, settings
from recommender.errors import InvalidRecord, RecordNotFound
from recommender.ranker import rank_by_query, rank_by_record
from recommender.trace import trace_query
from recommender.types import str_tuple

logger = logging.getLogger(__name__)

# --------- App setup ---------
app = FastAPI(title="Movie Recommender API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Serve frontend from ./public without shadowing /api routes
public_dir = Path(__file__).parent / "public"
if public_dir.exists():
    app.mount("/static", StaticFiles(directory=str(public_dir)), name="static")

    @app.get("/")
    async def serve_index():
        return FileResponse(str(public_dir / "index.html"))

# --------- Global state ---------
_catalog: Optional[MovieCatalog] = None
_lock = threading.Lock()


def get_catalog() -> MovieCatalog:
    global _catalog
    with _lock:
        if _catalog is None:
            _catalog = MovieCatalog(Path(settings.movies_file)).load()
        return _catalog


def set_catalog(catalog: Optional[MovieCatalog]) -> None:
    """Swap the served catalog (None reloads from disk on next request)."""
    global _catalog
    with _lock:
        _catalog = catalog


def _built_at(index) -> Optional[str]:
    return index.built_at.isoformat() if index.built_at else None


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.get("/api/movies")
async def list_movies():
    return [r.to_dict() for r in get_catalog().records()]


@app.get("/api/movies/{movie_id}")
async def get_movie(movie_id: int):
    try:
        return get_catalog().get(movie_id).to_dict()
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Movie not found")


@app.get("/api/genres")
async def list_genres():
    return get_catalog().genres()


@app.get("/api/recommendations/{movie_id}")
async def recommendations(movie_id: int, topN: Optional[int] = Query(None, description="Number of results")):
    index = get_catalog().index
    top_n = settings.top_n if topN is None else topN
    try:
        results = rank_by_record(index, movie_id, top_n)
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Movie not found")
    return {
        "baseId": movie_id,
        "recommendations": scored_movies(index, results),
        "builtAt": _built_at(index),
    }


@app.get("/api/search")
async def search(
    q: str = Query("", description="Query text"),
    topN: Optional[int] = Query(None, description="Number of results"),
    genre: List[str] = Query([], description="Genre filter dimensions"),
):
    index = get_catalog().index
    top_n = settings.top_n if topN is None else topN
    results = rank_by_query(index, q, top_n, genre)
    return {
        "query": q,
        "results": scored_movies(index, results),
        "builtAt": _built_at(index),
    }


@app.post("/api/movies", status_code=201)
async def add_movie(payload: Any = Body(None)):
    if not isinstance(payload, dict) or not str(payload.get("title") or "").strip():
        raise HTTPException(status_code=400, detail="Missing title")
    try:
        movie = get_catalog().add(payload)
    except InvalidRecord as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError:
        raise HTTPException(status_code=500, detail="Failed to save")
    return movie.to_dict()


@app.post("/api/trace")
async def api_trace(payload: Any = Body(None)):
    # Accept {"query": ...} or raw text
    q: str = ""
    top_n: int = settings.top_n
    genres: Tuple[str, ...] = ()
    if isinstance(payload, dict):
        q = str(payload.get("query") or "").strip()
        try:
            top_n = int(payload.get("top_n") or settings.top_n)
            genres = str_tuple(payload.get("genres"), "genres")
        except (TypeError, ValueError) as e:
            raise HTTPException(status_code=400, detail=str(e))
    elif isinstance(payload, str):
        q = payload.strip()
    if not q:
        raise HTTPException(status_code=400, detail="query is required (send raw text or JSON {\"query\": \"...\"})")
    return trace_query(get_catalog().index, q, top_n, genres)


# Convenience endpoint to trigger index rebuild explicitly
@app.post("/api/rebuild")
async def api_rebuild():
    index = get_catalog().rebuild()
    return {"status": "ok", "count": len(index), "builtAt": _built_at(index)}


# Startup: load and build once so first request is fast
@app.on_event("startup")
async def startup_event():
    configure_logging()
    catalog = get_catalog()
    logger.info("Serving %d movies from %s", len(catalog.index), catalog.path)


# If run directly: uvicorn server:app --reload
if __name__ == "__main__":
    import uvicorn
    configure_logging()
    uvicorn.run("server:app", host=settings.host, port=settings.port, reload=True)
