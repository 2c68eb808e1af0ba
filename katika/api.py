from __future__ import annotations

import json
import logging
import math
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from . import config
from .middleware import RateLimiter
from .models import Artist, Media, Portfolio
from .pipeline.run import GenerationError, generate_html, generate_pdf
from .schemas import (
    ArtistCreate,
    ArtistOut,
    GeneratedFileOut,
    LocationIn,
    MediaOut,
    PortfolioCreate,
    PortfolioOut,
)
from .storage import UploadRejected, artist_media_dir, check_upload, public_url, store_media, upload_dir
from .store import DuplicateEmailError, SqlPortfolioStore

logger = logging.getLogger(__name__)

_STARTED_AT = time.time()


def get_store(request: Request) -> SqlPortfolioStore:
    return request.app.state.store


def _parse_json_field(raw: Optional[str], field: str, default: Any) -> Any:
    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid JSON in {field}: {exc}") from exc


def _discard_media(media: List[Media]) -> None:
    for item in media:
        (artist_media_dir() / item.filename).unlink(missing_ok=True)


def _artist_out(artist: Artist, media: List[Media]) -> ArtistOut:
    return ArtistOut(
        id=artist.id,
        name=artist.name,
        bio=artist.bio,
        category=artist.category,
        experience=artist.experience,
        genres=list(artist.genres or []),
        location=LocationIn(city=artist.city, country=artist.country),
        social_links=dict(artist.social_links or {}),
        portfolio_id=artist.portfolio_id,
        is_active=artist.is_active,
        is_verified=artist.is_verified,
        views=artist.views,
        rating_average=artist.rating_average,
        rating_count=artist.rating_count,
        media=[
            MediaOut(
                filename=m.filename,
                original_name=m.original_name,
                url=m.url,
                content_type=m.content_type,
                uploaded_at=m.uploaded_at,
            )
            for m in media
        ],
        created_at=artist.created_at,
    )


def _portfolio_out(portfolio: Portfolio, store: SqlPortfolioStore) -> PortfolioOut:
    return PortfolioOut(
        id=portfolio.id,
        artist_id=portfolio.artist_id,
        title=portfolio.title,
        description=portfolio.description,
        template=portfolio.template,
        sections=list(portfolio.sections or []),
        customizations=dict(portfolio.customizations or {}),
        content=dict(portfolio.content or {}),
        is_public=portfolio.is_public,
        views=portfolio.views,
        generated_files=[
            GeneratedFileOut(
                format=g.format,
                filename=g.filename,
                url=g.url,
                size=g.size,
                generated_at=g.generated_at,
            )
            for g in store.list_generated_files(portfolio.id)
        ],
        created_at=portfolio.created_at,
    )


def build_router(general_limiter: RateLimiter, upload_limiter: RateLimiter) -> APIRouter:
    router = APIRouter(prefix="/api", dependencies=[Depends(general_limiter)])

    # -------------------- Artists --------------------
    @router.post("/artists", status_code=201, dependencies=[Depends(upload_limiter)])
    async def create_artist(
        name: str = Form(...),
        email: str = Form(...),
        bio: str = Form(...),
        category: str = Form(...),
        experience: str = Form(...),
        genres: Optional[str] = Form(None),
        location: Optional[str] = Form(None),
        socialLinks: Optional[str] = Form(None),
        files: Optional[List[UploadFile]] = File(None),
        store: SqlPortfolioStore = Depends(get_store),
    ) -> Dict[str, Any]:
        try:
            payload = ArtistCreate(
                name=name,
                email=email,
                bio=bio,
                category=category,
                experience=experience,
                genres=_parse_json_field(genres, "genres", []),
                location=_parse_json_field(location, "location", {}),
                social_links=_parse_json_field(socialLinks, "socialLinks", {}),
            )
        except ValidationError as exc:
            raise HTTPException(
                status_code=422,
                detail=exc.errors(include_url=False, include_context=False, include_input=False),
            ) from exc

        uploads = files or []
        if len(uploads) > config.MAX_UPLOAD_FILES:
            raise HTTPException(status_code=400, detail=f"Too many files (max {config.MAX_UPLOAD_FILES})")

        received = []
        for upload in uploads:
            data = await upload.read()
            await upload.close()
            try:
                check_upload(upload.content_type, len(data))
            except UploadRejected as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            received.append((upload, data))

        media: List[Media] = []
        try:
            for upload, data in received:
                path = store_media(upload.filename or "upload", upload.content_type, data)
                media.append(
                    Media(
                        artist_id=0,
                        filename=path.name,
                        original_name=upload.filename or path.name,
                        url=public_url(path),
                        content_type=upload.content_type or "",
                    )
                )
        except OSError as exc:
            logger.exception("Storing uploads failed")
            _discard_media(media)
            raise HTTPException(status_code=500, detail="Failed to store uploaded files") from exc

        artist = Artist(
            name=payload.name,
            email=str(payload.email),
            bio=payload.bio,
            category=payload.category.value,
            experience=payload.experience.value,
            genres=payload.genres,
            city=payload.location.city,
            country=payload.location.country,
            social_links=payload.social_links.model_dump(),
        )
        try:
            artist = store.create_artist(artist, media)
        except DuplicateEmailError as exc:
            _discard_media(media)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        return {
            "message": "Artist created successfully",
            "artist": _artist_out(artist, store.list_media(artist.id)).model_dump(mode="json"),
        }

    @router.get("/artists")
    def list_artists(
        category: Optional[str] = None,
        location: Optional[str] = None,
        limit: int = Query(20, ge=1, le=100),
        page: int = Query(1, ge=1),
        store: SqlPortfolioStore = Depends(get_store),
    ) -> Dict[str, Any]:
        artists, total = store.list_artists(category=category, location=location, limit=limit, page=page)
        return {
            "artists": [_artist_out(a, store.list_media(a.id)).model_dump(mode="json") for a in artists],
            "pagination": {
                "current": page,
                "total": math.ceil(total / limit),
                "hasNext": page * limit < total,
            },
        }

    @router.get("/artists/{artist_id}")
    def get_artist(artist_id: int, store: SqlPortfolioStore = Depends(get_store)) -> Dict[str, Any]:
        artist = store.increment_artist_views(artist_id)
        if artist is None:
            raise HTTPException(status_code=404, detail="Artist not found")
        return {"artist": _artist_out(artist, store.list_media(artist.id)).model_dump(mode="json")}

    # -------------------- Portfolios --------------------
    @router.post("/portfolios", status_code=201)
    def create_portfolio(payload: PortfolioCreate, store: SqlPortfolioStore = Depends(get_store)) -> Dict[str, Any]:
        portfolio = Portfolio(
            artist_id=payload.artistId,
            title=payload.title,
            description=payload.description,
            template=payload.template.value,
            sections=[section.model_dump() for section in payload.sections],
            customizations=payload.customizations.model_dump(),
            content=payload.content.model_dump(exclude_none=True),
        )
        try:
            portfolio = store.create_portfolio(portfolio)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {
            "message": "Portfolio created successfully",
            "portfolio": _portfolio_out(portfolio, store).model_dump(mode="json"),
        }

    @router.get("/portfolios/public")
    def public_portfolios(
        page: int = Query(1, ge=1),
        limit: int = Query(12, ge=1, le=100),
        category: Optional[str] = None,
        search: Optional[str] = None,
        store: SqlPortfolioStore = Depends(get_store),
    ) -> Dict[str, Any]:
        rows, total = store.list_public_portfolios(category=category, search=search, page=page, limit=limit)
        portfolios = []
        for portfolio, artist in rows:
            media = store.list_media(artist.id)[:1]
            portfolios.append(
                {
                    "id": portfolio.id,
                    "title": portfolio.title,
                    "description": portfolio.description,
                    "template": portfolio.template,
                    "views": portfolio.views,
                    "createdAt": portfolio.created_at.isoformat(),
                    "artist": {
                        "name": artist.name,
                        "category": artist.category,
                        "genres": list(artist.genres or []),
                        "location": {"city": artist.city, "country": artist.country},
                        "media": [MediaOut.model_validate(m, from_attributes=True).model_dump(mode="json") for m in media],
                    },
                }
            )
        return {
            "portfolios": portfolios,
            "pagination": {
                "current": page,
                "pages": math.ceil(total / limit),
                "total": total,
                "hasNext": page * limit < total,
                "hasPrev": page > 1,
            },
        }

    @router.get("/portfolios/{portfolio_id}")
    def get_portfolio(portfolio_id: int, store: SqlPortfolioStore = Depends(get_store)) -> Dict[str, Any]:
        portfolio = store.get_portfolio(portfolio_id)
        if portfolio is None:
            raise HTTPException(status_code=404, detail="Portfolio not found")
        return {"portfolio": _portfolio_out(portfolio, store).model_dump(mode="json")}

    @router.post("/portfolios/{portfolio_id}/generate-pdf", dependencies=[Depends(upload_limiter)])
    def generate_portfolio_pdf(portfolio_id: int, store: SqlPortfolioStore = Depends(get_store)) -> Dict[str, Any]:
        try:
            generated = generate_pdf(portfolio_id, store)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except GenerationError as exc:
            raise HTTPException(status_code=500, detail=f"PDF generation failed: {exc}") from exc
        return {
            "message": "Portfolio PDF generated successfully",
            "downloadUrl": generated.url,
            "filename": generated.filename,
            "fileSize": generated.size,
        }

    @router.post("/portfolios/{portfolio_id}/generate-html", dependencies=[Depends(upload_limiter)])
    def generate_portfolio_html(portfolio_id: int, store: SqlPortfolioStore = Depends(get_store)) -> Dict[str, Any]:
        try:
            generated = generate_html(portfolio_id, store)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except GenerationError as exc:
            raise HTTPException(status_code=500, detail=f"HTML generation failed: {exc}") from exc
        return {
            "message": "Portfolio page generated successfully",
            "url": generated.url,
            "filename": generated.filename,
            "fileSize": generated.size,
        }

    return router


def create_app(store: Optional[SqlPortfolioStore] = None) -> FastAPI:
    app = FastAPI(title="KatikaNaMe API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.store = store or SqlPortfolioStore()

    general_limiter = RateLimiter(*config.GENERAL_RATE_LIMIT)
    upload_limiter = RateLimiter(*config.UPLOAD_RATE_LIMIT)

    @app.get("/health")
    def healthcheck(request: Request) -> Dict[str, Any]:
        try:
            counts = request.app.state.store.counts()
            database = {"status": "connected", **counts}
        except Exception as exc:  # noqa: BLE001
            logger.warning("Health check database error: %s", exc)
            database = {"status": "disconnected"}
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.time() - _STARTED_AT, 3),
            "database": database,
        }

    app.include_router(build_router(general_limiter, upload_limiter))
    app.mount("/uploads", StaticFiles(directory=upload_dir()), name="uploads")
    return app
