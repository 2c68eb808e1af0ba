"""
Persistence port for artists, portfolios and generated documents.

The generation pipeline only talks to :class:`PortfolioStore`; the SQLModel
implementation below is the one the API and CLI wire in.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from .models import Artist, GeneratedFile, Media, Portfolio, get_session, init_db

logger = logging.getLogger(__name__)


class DuplicateEmailError(ValueError):
    pass


class PortfolioStore(Protocol):
    def get_artist(self, artist_id: int) -> Optional[Artist]: ...

    def get_portfolio(self, portfolio_id: int) -> Optional[Portfolio]: ...

    def record_generated_file(self, generated: GeneratedFile) -> GeneratedFile: ...


class SqlPortfolioStore:
    def __init__(self, create_tables: bool = True):
        if create_tables:
            init_db()

    # -------------------- Artists --------------------
    def create_artist(self, artist: Artist, media: Iterable[Media] = ()) -> Artist:
        with get_session() as session:
            session.add(artist)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError("Email already exists") from exc
            session.refresh(artist)
            for item in media:
                item.artist_id = artist.id
                session.add(item)
            session.commit()
        logger.info("Created artist %s (%s)", artist.id, artist.category)
        return artist

    def get_artist(self, artist_id: int) -> Optional[Artist]:
        with get_session() as session:
            return session.get(Artist, artist_id)

    def list_media(self, artist_id: int) -> List[Media]:
        with get_session() as session:
            statement = select(Media).where(Media.artist_id == artist_id).order_by(Media.id)
            return list(session.exec(statement))

    def list_artists(
        self,
        category: Optional[str] = None,
        location: Optional[str] = None,
        limit: int = 20,
        page: int = 1,
    ) -> Tuple[List[Artist], int]:
        with get_session() as session:
            statement = select(Artist).where(Artist.is_active == True)  # noqa: E712
            if category:
                statement = statement.where(Artist.category == category)
            if location:
                pattern = f"%{location.lower()}%"
                statement = statement.where(
                    or_(
                        func.lower(col(Artist.city)).like(pattern),
                        func.lower(col(Artist.country)).like(pattern),
                    )
                )
            total = session.exec(select(func.count()).select_from(statement.subquery())).one()
            statement = (
                statement.order_by(col(Artist.views).desc(), col(Artist.created_at).desc(), col(Artist.id).desc())
                .offset(max(page - 1, 0) * limit)
                .limit(limit)
            )
            return list(session.exec(statement)), int(total)

    def increment_artist_views(self, artist_id: int) -> Optional[Artist]:
        with get_session() as session:
            artist = session.get(Artist, artist_id)
            if artist is None:
                return None
            artist.views += 1
            session.add(artist)
            session.commit()
            session.refresh(artist)
            return artist

    # -------------------- Portfolios --------------------
    def create_portfolio(self, portfolio: Portfolio) -> Portfolio:
        with get_session() as session:
            artist = session.get(Artist, portfolio.artist_id)
            if artist is None:
                raise LookupError("Artist not found")
            session.add(portfolio)
            session.commit()
            session.refresh(portfolio)
            artist.portfolio_id = portfolio.id
            artist.updated_at = datetime.utcnow()
            session.add(artist)
            session.commit()
        logger.info("Created portfolio %s for artist %s", portfolio.id, portfolio.artist_id)
        return portfolio

    def get_portfolio(self, portfolio_id: int) -> Optional[Portfolio]:
        with get_session() as session:
            return session.get(Portfolio, portfolio_id)

    def list_public_portfolios(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 12,
    ) -> Tuple[List[Tuple[Portfolio, Artist]], int]:
        with get_session() as session:
            statement = (
                select(Portfolio, Artist)
                .join(Artist, Artist.id == Portfolio.artist_id)
                .where(Portfolio.is_public == True)  # noqa: E712
                .where(Artist.is_active == True)  # noqa: E712
            )
            if category:
                statement = statement.where(Artist.category == category)
            if search:
                pattern = f"%{search.lower()}%"
                statement = statement.where(
                    or_(
                        func.lower(col(Artist.name)).like(pattern),
                        func.lower(col(Portfolio.title)).like(pattern),
                        func.lower(col(Portfolio.description)).like(pattern),
                    )
                )
            total = session.exec(select(func.count()).select_from(statement.subquery())).one()
            statement = (
                statement.order_by(col(Portfolio.views).desc(), col(Portfolio.created_at).desc(), col(Portfolio.id).desc())
                .offset(max(page - 1, 0) * limit)
                .limit(limit)
            )
            return [(portfolio, artist) for portfolio, artist in session.exec(statement)], int(total)

    # -------------------- Generated files --------------------
    def record_generated_file(self, generated: GeneratedFile) -> GeneratedFile:
        with get_session() as session:
            session.add(generated)
            portfolio = session.get(Portfolio, generated.portfolio_id)
            if portfolio is not None:
                portfolio.updated_at = datetime.utcnow()
                session.add(portfolio)
            session.commit()
            session.refresh(generated)
        return generated

    def list_generated_files(self, portfolio_id: int) -> List[GeneratedFile]:
        with get_session() as session:
            statement = (
                select(GeneratedFile)
                .where(GeneratedFile.portfolio_id == portfolio_id)
                .order_by(GeneratedFile.id)
            )
            return list(session.exec(statement))

    def counts(self) -> Dict[str, int]:
        with get_session() as session:
            artists = session.exec(
                select(func.count()).select_from(Artist).where(Artist.is_active == True)  # noqa: E712
            ).one()
            portfolios = session.exec(select(func.count()).select_from(Portfolio)).one()
        return {"artists": int(artists), "portfolios": int(portfolios)}
