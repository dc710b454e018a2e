"""termread.parser - High-level DocumentParser class.

Binds one set of extraction options (directly or from a YAML profile) to a
reusable object.

Usage::

    from termread import DocumentParser, ParseOptions

    parser = DocumentParser(ParseOptions(tables_enabled=False))
    doc = parser.parse("<html><body><p>Hello</p></body></html>")

    # Options resolved per URL from a profile file
    parser = DocumentParser.from_profile("profiles.yaml")
    doc = parser.parse(html, url="https://news.ycombinator.com/")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from termread.profiles import load_profile
from termread.query import parse as _parse
from termread.settings import DEFAULT_OPTIONS, ParseOptions

if TYPE_CHECKING:
    from termread.items import Document
    from termread.query import Source


class DocumentParser:
    """Reusable parser bound to one :class:`~termread.settings.ParseOptions`.

    Args:
        options:      Options used for every call (default options when
                      omitted).
        profile_path: Optional YAML profile.  When set, options are resolved
                      per call from the profile and the URL being parsed, and
                      *options* is ignored.
    """

    def __init__(
        self,
        options: ParseOptions | None = None,
        profile_path: str | Path | None = None,
    ) -> None:
        self._options = options if options is not None else DEFAULT_OPTIONS
        self._profile_path = profile_path

    @classmethod
    def from_profile(cls, path: str | Path) -> DocumentParser:
        return cls(profile_path=path)

    @property
    def options(self) -> ParseOptions:
        return self._options

    def options_for(self, url: str = "") -> ParseOptions:
        """Return the options that :meth:`parse` would use for *url*."""
        if self._profile_path is not None:
            return load_profile(self._profile_path, url)
        return self._options

    def parse(self, source: Source, url: str = "") -> Document:
        """Parse *source*; see :func:`termread.query.parse`.

        Raises:
            :class:`~termread.query.ParseError`: when the input cannot be
                read or tokenized.
        """
        return _parse(source, url=url, options=self.options_for(url))
