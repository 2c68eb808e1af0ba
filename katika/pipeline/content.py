from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..config import SOCIAL_PLATFORMS
from ..models import Artist, Portfolio


@dataclass(frozen=True)
class Section:
    type: str
    title: Optional[str] = None
    content: str = ""
    order: Optional[int] = None

    @property
    def label(self) -> str:
        return (self.title or self.type or "").upper()


@dataclass(frozen=True)
class ContentRecord:
    """
    Flat, render-only view of an artist and their portfolio.

    ``name`` and ``email`` are always set. Every other field may be empty;
    composers omit whatever is empty instead of failing.
    """

    name: str
    email: str
    title: str = ""
    category: str = ""
    experience_level: str = ""
    city: str = ""
    country: str = ""
    about_me: str = ""
    jobs: str = ""
    skills: Tuple[str, ...] = ()
    services: str = ""
    testimonials: str = ""
    social_links: Dict[str, str] = field(default_factory=dict)
    phone: str = ""
    portfolio_title: str = ""
    description: str = ""
    sections: Tuple[Section, ...] = ()

    @property
    def location(self) -> str:
        return ", ".join(part for part in (self.city, self.country) if part)

    def populated_links(self) -> List[Tuple[str, str]]:
        return [(platform, url) for platform, url in self.social_links.items() if url]


def split_skills(value: Union[str, Iterable[Any], None]) -> Tuple[str, ...]:
    if not value:
        return ()
    items = value.split(",") if isinstance(value, str) else value
    return tuple(str(item).strip() for item in items if item is not None and str(item).strip())


def humanize_category(category: str) -> str:
    return (category or "").replace("_", " ").strip()


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _sections(raw: Iterable[Any]) -> Tuple[Section, ...]:
    out: List[Section] = []
    for item in raw or []:
        if isinstance(item, Section):
            out.append(item)
            continue
        if not isinstance(item, Mapping):
            continue
        out.append(
            Section(
                type=_text(item.get("type")) or "section",
                title=_text(item.get("title")) or None,
                content=_text(item.get("content")),
                order=item.get("order"),
            )
        )
    return tuple(out)


def _social_links(raw: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    links: Dict[str, str] = {}
    for platform, url in (raw or {}).items():
        key = _text(platform).lower()
        if key:
            links[key] = _text(url)
    # known platforms first, in a fixed order; anything else keeps insertion order
    ordered = {p: links[p] for p in SOCIAL_PLATFORMS if p in links}
    ordered.update({p: u for p, u in links.items() if p not in ordered})
    return ordered


def build_content_record(artist: Artist, portfolio: Optional[Portfolio] = None) -> ContentRecord:
    """Merge an artist and (optionally) their portfolio into a ContentRecord.

    Portfolio ``content`` overrides win when non-empty; otherwise the artist's
    own fields are used (bio for the about text, genres for skills).
    """
    overrides: Mapping[str, Any] = (portfolio.content if portfolio else None) or {}

    def _pick(key: str, fallback: Any = "") -> str:
        return _text(overrides.get(key)) or _text(fallback)

    skills = split_skills(overrides.get("skills")) or split_skills(artist.genres)

    return ContentRecord(
        name=_text(artist.name),
        email=_text(artist.email),
        title=humanize_category(artist.category).title(),
        category=_text(artist.category),
        experience_level=_text(artist.experience),
        city=_text(artist.city),
        country=_text(artist.country),
        about_me=_pick("aboutMe", artist.bio),
        jobs=_pick("jobs"),
        skills=skills,
        services=_pick("services"),
        testimonials=_pick("testimonials"),
        social_links=_social_links(artist.social_links),
        phone=_pick("phone"),
        portfolio_title=_text(portfolio.title) if portfolio else "",
        description=_text(portfolio.description) if portfolio else "",
        sections=_sections(portfolio.sections) if portfolio else (),
    )


def content_from_mapping(data: Mapping[str, Any]) -> ContentRecord:
    """Build a ContentRecord from a loose JSON-style mapping (camelCase or snake_case keys)."""

    def _get(*keys: str) -> Any:
        for key in keys:
            if data.get(key) not in (None, ""):
                return data[key]
        return None

    location = data.get("location") if isinstance(data.get("location"), Mapping) else {}
    return ContentRecord(
        name=_text(_get("name")),
        email=_text(_get("email")),
        title=_text(_get("title")) or humanize_category(_text(_get("category"))).title(),
        category=_text(_get("category")),
        experience_level=_text(_get("experienceLevel", "experience_level", "experience")),
        city=_text(_get("city") or location.get("city")),
        country=_text(_get("country") or location.get("country")),
        about_me=_text(_get("aboutMe", "about_me", "bio")),
        jobs=_text(_get("jobs")),
        skills=split_skills(_get("skills", "genres")),
        services=_text(_get("services")),
        testimonials=_text(_get("testimonials")),
        social_links=_social_links(_get("socialLinks", "social_links")),
        phone=_text(_get("phone")),
        portfolio_title=_text(_get("portfolioTitle", "portfolio_title")),
        description=_text(_get("description")),
        sections=_sections(_get("sections") or []),
    )
