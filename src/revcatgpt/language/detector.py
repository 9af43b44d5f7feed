"""
Query language detection backed by lingua.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from lingua import IsoCode639_1, Language, LanguageDetectorBuilder

logger = logging.getLogger("revcatgpt.language")


class LanguageDetector:
    """
    Detects which of a fixed set of languages a text is written in.

    The set is fixed at construction, normally to the languages of the loaded
    localization bundle. The detector holds no per-call state and can be
    shared across concurrent requests.
    """

    def __init__(self, languages: Iterable[str]) -> None:
        self.languages: List[str] = []
        lingua_languages = []

        for code in languages:
            iso = getattr(IsoCode639_1, code.strip().upper(), None)
            if iso is None:
                logger.warning("Language %r is not supported by the detector", code)
                continue
            if code.lower() in self.languages:
                continue
            self.languages.append(code.lower())
            lingua_languages.append(Language.from_iso_code_639_1(iso))

        if len(lingua_languages) < 2:
            # Nothing to choose between; callers always get the default.
            logger.warning("Language detection disabled: fewer than two languages configured")
            self._detector = None
        else:
            self._detector = LanguageDetectorBuilder.from_languages(*lingua_languages).build()

    def detect(self, text: str) -> Optional[str]:
        """
        Return the ISO 639-1 code of the most likely language of ``text``.

        Returns None when no language can be detected.
        """
        if self._detector is None or not text:
            return None

        language = self._detector.detect_language_of(text)
        if language is None:
            return None
        return language.iso_code_639_1.name.lower()
