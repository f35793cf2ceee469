"""Navi: collect recently edited notes from a Notion workspace."""

from __future__ import annotations

import warnings
from importlib.metadata import PackageNotFoundError, version

_UNKNOWN_VERSION = "0.0.0+unknown"

try:
    __version__ = version("navi")
except PackageNotFoundError:
    # Running from a checkout that was never pip-installed.
    warnings.warn(
        f"navi is not installed; reporting version {_UNKNOWN_VERSION!r}.",
        RuntimeWarning,
        stacklevel=2,
    )
    __version__ = _UNKNOWN_VERSION
