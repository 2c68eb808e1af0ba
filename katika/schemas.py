from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import ArtistCategory, ExperienceLevel, TemplateName


class LocationIn(BaseModel):
    city: Optional[str] = None
    country: Optional[str] = None


class SocialLinksIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    instagram: Optional[str] = None
    youtube: Optional[str] = None
    tiktok: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    website: Optional[str] = None


class ArtistCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    bio: str = Field(..., min_length=1)
    category: ArtistCategory
    experience: ExperienceLevel
    genres: List[str] = Field(default_factory=list)
    location: LocationIn = Field(default_factory=LocationIn)
    social_links: SocialLinksIn = Field(default_factory=SocialLinksIn)


class MediaOut(BaseModel):
    filename: str
    original_name: str
    url: str
    content_type: str
    uploaded_at: datetime


class ArtistOut(BaseModel):
    """Public artist view; email is never returned."""

    id: int
    name: str
    bio: str
    category: str
    experience: str
    genres: List[str]
    location: LocationIn
    social_links: Dict[str, Optional[str]]
    portfolio_id: Optional[int] = None
    is_active: bool
    is_verified: bool
    views: int
    rating_average: float
    rating_count: int
    media: List[MediaOut] = Field(default_factory=list)
    created_at: datetime


class SectionIn(BaseModel):
    type: str = Field(..., min_length=1)
    title: Optional[str] = None
    content: Optional[str] = None
    media: List[str] = Field(default_factory=list)
    order: Optional[int] = None


class ColorsIn(BaseModel):
    primary: str = "#B026FF"
    secondary: str = "#ffffff"
    accent: str = "#FFD23F"
    background: Optional[str] = None


class FontsIn(BaseModel):
    heading: str = "Montserrat"
    body: str = "Poppins"


class CustomizationsIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    colors: ColorsIn = Field(default_factory=ColorsIn)
    fonts: FontsIn = Field(default_factory=FontsIn)
    layout: str = "grid"


class PortfolioContentIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    aboutMe: Optional[str] = None
    jobs: Optional[str] = None
    services: Optional[str] = None
    testimonials: Optional[str] = None
    skills: Optional[Any] = None
    phone: Optional[str] = None


class PortfolioCreate(BaseModel):
    artistId: int
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    template: TemplateName = TemplateName.MODERN
    sections: List[SectionIn] = Field(default_factory=list)
    customizations: CustomizationsIn = Field(default_factory=CustomizationsIn)
    content: PortfolioContentIn = Field(default_factory=PortfolioContentIn)


class GeneratedFileOut(BaseModel):
    format: str
    filename: str
    url: str
    size: int
    generated_at: datetime


class PortfolioOut(BaseModel):
    id: int
    artist_id: int
    title: str
    description: Optional[str] = None
    template: str
    sections: List[Dict[str, Any]]
    customizations: Dict[str, Any]
    content: Dict[str, Any]
    is_public: bool
    views: int
    generated_files: List[GeneratedFileOut] = Field(default_factory=list)
    created_at: datetime
