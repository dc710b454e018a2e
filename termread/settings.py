"""Extraction settings for termread.

``ParseOptions`` is an immutable value passed explicitly to every parse
entry point.  Build one per configuration and share it freely between
threads; nothing here is mutated after construction.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Extraction toggles
# ---------------------------------------------------------------------------
LATEX_ENABLED = True
TABLES_ENABLED = True

# Guess the document language from its text when <html lang> is missing
DETECT_LANGUAGE = False

# ---------------------------------------------------------------------------
# Parse tree
# ---------------------------------------------------------------------------
# BeautifulSoup tree builder; "html5lib" and "html.parser" also work when
# installed.
HTML_PARSER = "lxml"

# ---------------------------------------------------------------------------
# Logging (used by the CLI only; the library never configures handlers)
# ---------------------------------------------------------------------------
LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


class ParseOptions(BaseModel):
    """Options controlling one parse."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    latex_enabled: bool = LATEX_ENABLED
    tables_enabled: bool = TABLES_ENABLED
    parser: str = HTML_PARSER
    detect_language: bool = DETECT_LANGUAGE


DEFAULT_OPTIONS = ParseOptions()
