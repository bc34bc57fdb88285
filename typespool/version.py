from __future__ import annotations

import importlib.metadata
from typing import Optional

DISTRIBUTION = "typespool"


def get_version() -> Optional[str]:
    """Installed distribution version, or None when running from a checkout."""
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return None


def get_version_string() -> str:
    return f"{DISTRIBUTION} {get_version() or 'unknown'}"
