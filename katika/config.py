from __future__ import annotations

from pathlib import Path
from typing import List
import json
import os


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = Path(os.environ.get("KATIKA_OUT_DIR", BASE_DIR / "out"))
DB_PATH = OUT_DIR / "katika.db"
UPLOAD_DIR = OUT_DIR / "uploads"
STYLE_PRESET_PATH = Path(__file__).resolve().parent / "assets" / "pdf_style.json"

PLATFORM_NAME = "KatikaNaMe Platform"

DEFAULT_PRIMARY = "#B026FF"
DEFAULT_ACCENT = "#FFD23F"
DEFAULT_BACKGROUND = "#0a0a12"
DEFAULT_TEMPLATE = "modern"

SOCIAL_PLATFORMS: List[str] = ["instagram", "youtube", "tiktok", "facebook", "twitter", "website"]

ALLOWED_UPLOAD_TYPES = {"image/jpeg", "image/png", "image/gif", "video/mp4", "application/pdf"}
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_UPLOAD_FILES = 10

# "timestamp": every generation gets a new file; "overwrite": one file per portfolio id
FILENAME_POLICY = os.environ.get("KATIKA_FILENAME_POLICY", "timestamp")
ESCAPE_HTML = os.environ.get("KATIKA_ESCAPE_HTML", "0") == "1"
RENDER_PREVIEWS = os.environ.get("KATIKA_RENDER_PREVIEWS", "1") == "1"

GENERAL_RATE_LIMIT = (100, 15 * 60)
UPLOAD_RATE_LIMIT = (10, 60)

CORS_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "http://localhost:5500",
]


def load_style_preset() -> dict:
    with STYLE_PRESET_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH, UPLOAD_DIR
    OUT_DIR = path
    DB_PATH = OUT_DIR / "katika.db"
    UPLOAD_DIR = OUT_DIR / "uploads"


def set_filename_policy(policy: str) -> None:
    global FILENAME_POLICY
    if policy not in {"timestamp", "overwrite"}:
        raise ValueError(f"Unknown filename policy: {policy}")
    FILENAME_POLICY = policy
