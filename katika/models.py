from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel, create_engine, Session

from . import config


class ArtistCategory(str, Enum):
    DANCER = "dancer"
    MUSICIAN = "musician"
    VISUAL_ARTIST = "visual_artist"
    MULTI_DISCIPLINARY = "multi_disciplinary"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PROFESSIONAL = "professional"


class TemplateName(str, Enum):
    MODERN = "modern"
    CLASSIC = "classic"
    ARTISTIC = "artistic"


class DocumentFormat(str, Enum):
    HTML = "html"
    PDF = "pdf"


class Artist(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    bio: str = ""
    category: str = Field(default=ArtistCategory.MULTI_DISCIPLINARY.value, index=True)
    experience: str = ExperienceLevel.BEGINNER.value
    genres: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    city: Optional[str] = None
    country: Optional[str] = None
    social_links: Dict[str, Optional[str]] = Field(default_factory=dict, sa_column=Column(JSON))
    portfolio_id: Optional[int] = None
    is_active: bool = True
    is_verified: bool = False
    views: int = 0
    rating_average: float = 0.0
    rating_count: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Media(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    artist_id: int = Field(foreign_key="artist.id", index=True)
    filename: str
    original_name: str
    url: str
    content_type: str
    uploaded_at: datetime = Field(default_factory=datetime.utcnow)


class Portfolio(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    artist_id: int = Field(foreign_key="artist.id", index=True)
    title: str
    description: Optional[str] = None
    template: str = TemplateName.MODERN.value
    sections: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    customizations: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    content: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    is_public: bool = True
    views: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class GeneratedFile(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    portfolio_id: int = Field(foreign_key="portfolio.id", index=True)
    format: str
    filename: str
    url: str
    size: int = 0
    generated_at: datetime = Field(default_factory=datetime.utcnow)


def _make_engine():
    return create_engine(
        f"sqlite:///{config.DB_PATH}",
        connect_args={"check_same_thread": False},
    )


engine = _make_engine()


def reset_engine() -> None:
    global engine
    engine.dispose()
    engine = _make_engine()


def init_db() -> None:
    config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)
