"""
Template Functions

The fixed set of helper functions available inside context templates:

``localize(key, lang)``
    Message lookup in the localization bundle; returns ``key`` if untranslated.
``lang_name(source, target)``
    Display name of language ``source`` written in language ``target``.
``slug(text, lang)``
    Lowercase, URL-safe form of ``text`` with ``_`` as separator.
``fit_size(width, height, max_width, max_height)``
    Box scaled to fit the bounds with its aspect ratio preserved.
``pick_lang(fragments)``
    ``MultiLangString`` built from ``(lang, value, translated)`` entries.

The set is enumerated once in ``TemplateFunctions`` and handed to the
template environment at construction; templates cannot register more.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from babel import Locale
from slugify import slugify

from ..language.bundle import MessageBundle, parse_language

# Target languages we can produce display names in.
LANGUAGE_NAMERS = ("de", "en", "fr", "it")

SLUG_REPLACEMENTS: Dict[str, List[Tuple[str, str]]] = {
    "de": [
        ("&", " und "),
        ("Ä", "Ae"), ("Ö", "Oe"), ("Ü", "Ue"),
        ("ä", "ae"), ("ö", "oe"), ("ü", "ue"),
        ("ß", "ss"),
    ],
    "en": [("&", " and ")],
    "fr": [("&", " et ")],
    "it": [("&", " e ")],
    "es": [("&", " y ")],
    "nl": [("&", " en ")],
}

DEFAULT_FRAGMENT_LANGUAGE = "en"


# ---------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------

class Size(NamedTuple):
    width: int
    height: int


class MultiLangValue(NamedTuple):
    value: str
    translated: bool


class MultiLangString:
    """
    A text value with one variant per language.

    Each variant records whether it is the original text or a translation.
    Setting a language twice keeps the last value.
    """

    def __init__(self) -> None:
        self._values: Dict[str, MultiLangValue] = {}

    def set(self, value: str, lang: str, translated: bool = False) -> None:
        self._values[lang] = MultiLangValue(value, translated)

    @property
    def languages(self) -> List[str]:
        return list(self._values)

    def original_language(self) -> Optional[str]:
        """Language of the first non-translated variant, if any."""
        for lang, entry in self._values.items():
            if not entry.translated:
                return lang
        return None

    def is_translated(self, lang: str) -> bool:
        entry = self._values.get(lang)
        return bool(entry and entry.translated)

    def has(self, lang: str) -> bool:
        return lang in self._values

    def get(self, lang: str) -> str:
        """
        Value for ``lang``; otherwise the original; otherwise the first variant.
        """
        if lang in self._values:
            return self._values[lang].value
        original = self.original_language()
        if original is not None:
            return self._values[original].value
        if self._values:
            return next(iter(self._values.values())).value
        return ""

    def items(self) -> Iterator[Tuple[str, MultiLangValue]]:
        return iter(self._values.items())

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def __str__(self) -> str:
        original = self.original_language()
        return self.get(original) if original else self.get("")

    def __repr__(self) -> str:
        return f"MultiLangString({dict(self._values)!r})"


# ---------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------

def lang_name(source: str, target: str) -> str:
    """
    Name of language ``source`` in language ``target`` ("en", "de" -> "Englisch").

    Falls back to ``source`` unchanged when ``target`` has no namer or
    ``source`` is unknown.
    """
    if target not in LANGUAGE_NAMERS:
        return source
    try:
        code = parse_language(source)
    except ValueError:
        return source
    return Locale.parse(target).languages.get(code, source)


def slug(text: str, lang: str) -> str:
    return slugify(
        text or "",
        separator="_",
        replacements=SLUG_REPLACEMENTS.get(lang, []),
    )


def fit_size(width: int, height: int, max_width: int, max_height: int) -> Size:
    """
    Scale ``width`` x ``height`` to fit into ``max_width`` x ``max_height``.

    The dimension that would overflow the bounding box is pinned to its
    maximum and the other one follows the source aspect ratio.
    Non-positive dimensions give ``Size(0, 0)``.
    """
    width, height = int(width or 0), int(height or 0)
    max_width, max_height = int(max_width or 0), int(max_height or 0)
    if min(width, height, max_width, max_height) <= 0:
        return Size(0, 0)

    aspect = width / height
    max_aspect = max_width / max_height
    if aspect > max_aspect:
        return Size(max_width, int(max_width / aspect))
    return Size(int(max_height * aspect), max_height)


def pick_lang(fragments: Optional[Iterable]) -> Optional[MultiLangString]:
    """
    Build a ``MultiLangString`` from ``(lang, value, translated)`` entries.

    Entries may be tuples or objects with ``lang``, ``value`` and
    ``translated`` attributes. Unparseable language tags are filed under
    English. Returns None for empty input.
    """
    if not fragments:
        return None

    result = MultiLangString()
    for fragment in fragments:
        if isinstance(fragment, tuple):
            lang, value, translated = fragment
        else:
            lang, value, translated = fragment.lang, fragment.value, fragment.translated
        try:
            code = parse_language(lang)
        except ValueError:
            code = DEFAULT_FRAGMENT_LANGUAGE
        result.set(value, code, bool(translated))
    return result if result else None


# ---------------------------------------------------------------------
# Capability set
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class TemplateFunctions:
    localize: Callable[[str, str], str]
    lang_name: Callable[[str, str], str] = lang_name
    slug: Callable[[str, str], str] = slug
    fit_size: Callable[[int, int, int, int], Size] = fit_size
    pick_lang: Callable[[Optional[Iterable]], Optional[MultiLangString]] = pick_lang

    @classmethod
    def for_bundle(cls, bundle: MessageBundle) -> "TemplateFunctions":
        return cls(localize=bundle.localize)

    def as_globals(self) -> Dict[str, Callable]:
        return {
            "localize": self.localize,
            "lang_name": self.lang_name,
            "slug": self.slug,
            "fit_size": self.fit_size,
            "pick_lang": self.pick_lang,
        }
