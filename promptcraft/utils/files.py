"""File and path utilities"""

import os
import re
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists, create if necessary"""
    path = Path(path).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path


def slugify(text: str) -> str:
    """Filesystem-safe slug used for prompt record filenames"""
    slug = text.lower()

    # Drop everything except word characters, whitespace and hyphens
    slug = re.sub(r"[^\w\s-]", "", slug)

    # Collapse runs of separators into a single hyphen
    slug = re.sub(r"[\s_-]+", "-", slug)

    slug = slug.strip("-")
    return slug or "untitled"


def get_user_config_dir() -> Path:
    """Get user config directory for PromptCraft"""
    if os.name == "nt":  # Windows
        base = Path(os.environ.get("APPDATA", "~"))
    else:  # Unix-like
        base = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config"))

    return base.expanduser() / "promptcraft"
