"""Entry point for the FastAPI surface over the catalog core."""

from __future__ import annotations

import json
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, settings
from .database import Database
from .models import CONTENT_TYPES, ContentSubmission, genre_chips
from .services import query_engine
from .services.catalog_store import CatalogStore
from .services.content_creation import ContentCreationWorkflow
from .services.playback import prepare_playback
from .services.record_store import InMemoryRecordStore, RecordStore
from .services.remote_store import RemoteRecordStore
from .services.sql_store import SqlRecordStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


async def build_record_store(
    config: Settings, exit_stack: AsyncExitStack
) -> RecordStore:
    """Instantiate the record store selected by ``RECORD_STORE``."""

    if config.record_store == "remote":
        http_client = await exit_stack.enter_async_context(
            httpx.AsyncClient(
                base_url=config.backend_base_url or "",
                timeout=httpx.Timeout(20.0, connect=10.0),
            )
        )
        return RemoteRecordStore(config, http_client)
    if config.record_store == "sql":
        database = Database(config.database_url)
        exit_stack.push_async_callback(database.dispose)
        await database.create_all()
        return SqlRecordStore(database.session_factory)
    return InMemoryRecordStore(latency=config.demo_latency_seconds)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    record_store = await build_record_store(settings, exit_stack)
    logger.info("Using %s record store", settings.record_store)

    catalog_store = CatalogStore(
        record_store,
        fetch_timeout=settings.fetch_timeout_seconds,
        favorites_store=record_store,  # type: ignore[arg-type]
    )
    fastapi_app.state.catalog_store = catalog_store
    fastapi_app.state.creation_workflow = ContentCreationWorkflow(record_store)
    await catalog_store.start()

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await catalog_store.close()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Browse, filter, search and favourite streaming content",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_catalog_store(fastapi_app: FastAPI) -> CatalogStore:
    store = getattr(fastapi_app.state, "catalog_store", None)
    if not isinstance(store, CatalogStore):
        raise RuntimeError("Catalog store not initialised")
    return store


def get_creation_workflow(fastapi_app: FastAPI) -> ContentCreationWorkflow:
    workflow = getattr(fastapi_app.state, "creation_workflow", None)
    if not isinstance(workflow, ContentCreationWorkflow):
        raise RuntimeError("Content creation workflow not initialised")
    return workflow


def _items(records) -> dict[str, Any]:
    return {"items": [record.to_payload() for record in records]}


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/catalog")
    async def catalog_snapshot() -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        payload = store.snapshot.to_payload()
        payload["selectedGenre"] = store.selected_genre
        return payload

    @fastapi_app.post("/catalog/refresh")
    async def refresh_catalog() -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        snapshot = await store.refresh()
        return snapshot.to_payload()

    @fastapi_app.get("/catalog/featured")
    async def featured_content() -> dict[str, Any]:
        return _items(get_catalog_store(fastapi_app).featured)

    @fastapi_app.get("/catalog/genres")
    async def genres() -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        return {
            "chips": [
                {"id": chip.id, "name": chip.name, "color": chip.color}
                for chip in genre_chips()
            ],
            "present": query_engine.genres_present(store.all),
            "selected": store.selected_genre,
        }

    @fastapi_app.get("/catalog/genre/{genre}")
    async def content_by_genre(genre: str) -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        return _items(query_engine.by_genre(store.all, genre))

    @fastapi_app.post("/catalog/selected-genre")
    async def select_genre(request: Request) -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            payload = None
        if not isinstance(payload, dict) or not isinstance(payload.get("genre"), str):
            raise HTTPException(status_code=400, detail="Expected a JSON body with a genre")
        store.select_genre(payload["genre"])
        return {"selected": store.selected_genre, **_items(store.filtered())}

    @fastapi_app.get("/catalog/filtered")
    async def filtered_content() -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        return {"selected": store.selected_genre, **_items(store.filtered())}

    @fastapi_app.get("/catalog/type/{content_type}")
    async def content_by_type(content_type: str) -> dict[str, Any]:
        if content_type not in CONTENT_TYPES:
            raise HTTPException(status_code=400, detail="Unsupported content type")
        return _items(get_catalog_store(fastapi_app).by_type(content_type))

    @fastapi_app.get("/catalog/sections")
    async def catalog_sections(limit: int | None = None) -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        return {
            "sections": [section.to_payload() for section in store.sections(limit=limit)]
        }

    @fastapi_app.get("/search")
    async def search(q: str = "") -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        return {"query": q, **_items(store.search(q))}

    @fastapi_app.get("/content/{content_id}")
    async def content_detail(content_id: str) -> dict[str, Any]:
        record = await get_catalog_store(fastapi_app).get_content(content_id)
        if record is None:
            raise HTTPException(status_code=404, detail=f"Content {content_id} not found")
        return record.to_payload()

    @fastapi_app.get("/content/{content_id}/playback")
    async def content_playback(content_id: str) -> dict[str, Any]:
        playback = await prepare_playback(
            get_catalog_store(fastapi_app),
            content_id,
            fallback_url=settings.demo_video_url,
        )
        return playback.to_payload()

    @fastapi_app.post("/content", status_code=201)
    async def create_content(submission: ContentSubmission) -> JSONResponse:
        workflow = get_creation_workflow(fastapi_app)
        result = await workflow.create(
            submission.metadata(),
            creator_id=submission.creator_id,
            video_url=submission.video_url,
            thumbnail_url=submission.thumbnail_url,
        )
        if result.ok:
            return JSONResponse(result.to_payload(), status_code=201)
        status_code = 400 if result.missing_field else 502
        return JSONResponse(result.to_payload(), status_code=status_code)

    @fastapi_app.get("/favorites")
    async def favorites() -> dict[str, Any]:
        return _items(get_catalog_store(fastapi_app).favorites())

    @fastapi_app.post("/favorites/{content_id}/toggle")
    async def toggle_favorite(content_id: str) -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        return {"id": content_id, "favorite": store.toggle_favorite(content_id)}

    @fastapi_app.post("/favorites/sync")
    async def sync_favorites(request: Request) -> dict[str, Any]:
        store = get_catalog_store(fastapi_app)
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            payload = None
        user_id = payload.get("userId") if isinstance(payload, dict) else None
        if not isinstance(user_id, str) or not user_id.strip():
            raise HTTPException(status_code=400, detail="userId is required")
        result = await store.sync_favorites(user_id.strip())
        return result.to_payload()


app = create_app()
