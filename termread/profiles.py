"""YAML-based option profiles.

A profile file looks like::

    default:
      latex_enabled: true
    domains:
      news.ycombinator.com:
        tables_enabled: true
      wikipedia.org:
        latex_enabled: false

The ``domains`` entry with the longest suffix match on the URL host wins and
is merged over ``default``.  Every section is validated when the file is
loaded, whether or not it matches the URL.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from pydantic import ValidationError

from termread.settings import ParseOptions


def _require_mapping(value: Any, loc: tuple[str, ...]) -> dict[Any, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError.from_exception_data(
            "profile", [{"type": "dict_type", "loc": loc, "input": value}],
        )
    return value


def _section(value: Any) -> dict[str, Any]:
    """Validate one options section and return only the keys it sets."""
    if value is None:
        return {}
    return ParseOptions.model_validate(value).model_dump(exclude_unset=True)


def _domain_overrides(domains: dict[str, dict[str, Any]], url: str) -> dict[str, Any]:
    netloc = urlparse(url).netloc.lower() if url else ""
    best_key = ""
    best_cfg: dict[str, Any] = {}
    if not netloc:
        return best_cfg
    for key, cfg in domains.items():
        key_lower = key.lower()
        if (netloc == key_lower or netloc.endswith("." + key_lower)) and (
            len(key_lower) > len(best_key)
        ):
            best_key = key_lower
            best_cfg = cfg
    return best_cfg


def load_profile(path: str | Path, url: str = "") -> ParseOptions:
    """Load the YAML profile at *path* and return the options for *url*.

    Raises:
        OSError: when *path* cannot be read.
        yaml.YAMLError: when the file is not valid YAML.
        pydantic.ValidationError: when a section is not a mapping, or holds
            unknown keys, non-string keys or values of the wrong type.
    """
    data = _require_mapping(yaml.safe_load(Path(path).read_text(encoding="utf-8")), ())
    default = _section(data.get("default"))
    domains = {
        str(key): _section(cfg)
        for key, cfg in _require_mapping(data.get("domains"), ("domains",)).items()
    }

    merged = dict(default)
    merged.update(_domain_overrides(domains, url))
    return ParseOptions(**merged)
