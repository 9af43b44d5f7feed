"""
Localization Bundle

Loads ``active.<lang>.toml`` message files and resolves message IDs for a
target language. Two entry shapes are accepted per message ID::

    persons = "Persons"

    [translated_from]
    description = "Shown after a translated abstract"
    other = "translated from {}"

Lookups fall back from the requested language to the bundle's default
language and finally to the message ID itself, so a missing translation
never fails a render.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from babel import Locale, UnknownLocaleError

logger = logging.getLogger("revcatgpt.i18n")

PLURAL_FORMS = ("other", "one", "few", "many", "two", "zero")


class LocaleError(RuntimeError):
    """Raised when the localization bundle cannot be built."""


def parse_language(tag: str) -> str:
    """
    Normalize a language tag to its base language code (``de-CH`` -> ``de``).

    Raises
    ------
    ValueError
        If the tag is not a known locale.
    """
    try:
        return Locale.parse(tag.strip().replace("-", "_")).language
    except (UnknownLocaleError, ValueError, TypeError, AttributeError) as exc:
        raise ValueError(f"cannot parse language {tag!r}") from exc


def _flatten(raw: Mapping[str, object]) -> Dict[str, str]:
    messages: Dict[str, str] = {}
    for message_id, entry in raw.items():
        if isinstance(entry, str):
            messages[message_id] = entry
        elif isinstance(entry, Mapping):
            for form in PLURAL_FORMS:
                if isinstance(entry.get(form), str):
                    messages[message_id] = entry[form]
                    break
    return messages


class MessageBundle:
    """
    Per-language message catalogue with a default language.
    """

    def __init__(
        self,
        default_language: str,
        messages: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> None:
        try:
            self.default_language = parse_language(default_language)
        except ValueError as exc:
            raise LocaleError(str(exc)) from exc

        self._messages: Dict[str, Dict[str, str]] = {
            parse_language(lang): dict(entries)
            for lang, entries in (messages or {}).items()
        }

    @classmethod
    def load(
        cls,
        folder: str | Path,
        available: Iterable[str],
        default_language: str,
    ) -> "MessageBundle":
        """
        Load ``active.<lang>.toml`` for every available language.

        Raises
        ------
        LocaleError
            If a message file is missing or not valid TOML.
        """
        folder = Path(folder)
        messages: Dict[str, Dict[str, str]] = {}

        for lang in available:
            path = folder / f"active.{lang}.toml"
            if not path.is_file():
                raise LocaleError(f"cannot find locale file {path}")
            try:
                with path.open("rb") as fp:
                    raw = tomllib.load(fp)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise LocaleError(f"cannot load locale file {path}: {exc}") from exc

            messages[lang] = _flatten(raw)
            logger.debug("Loaded %d messages from %s", len(messages[lang]), path)

        return cls(default_language, messages)

    @property
    def languages(self) -> List[str]:
        """Languages with a loaded message file, default language first."""
        langs = sorted(self._messages)
        if self.default_language in langs:
            langs.remove(self.default_language)
            langs.insert(0, self.default_language)
        return langs

    def localize(self, message_id: str, lang: str) -> str:
        """Translate ``message_id`` into ``lang``; return the ID if untranslated."""
        try:
            base = parse_language(lang)
        except ValueError:
            base = self.default_language

        for candidate in (base, self.default_language):
            text = self._messages.get(candidate, {}).get(message_id)
            if text is not None:
                return text
        return message_id
