"""Language detection helpers."""

from __future__ import annotations

import logging

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

logger = logging.getLogger(__name__)

# Shorter samples give unstable guesses
_MIN_SAMPLE_LEN = 40

# Fixed seed keeps the guess deterministic across runs
DetectorFactory.seed = 0


def detect_language(text: str) -> str | None:
    if not text:
        return None
    sample = text.strip()
    if len(sample) < _MIN_SAMPLE_LEN:
        return None
    try:
        code = detect(sample)
    except LangDetectException as exc:
        logger.debug("Language detection failed: %s", exc)
        return None
    return code if code else None
