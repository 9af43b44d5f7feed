from revcatgpt.clients.models import MultiLangFragment
from revcatgpt.language.bundle import MessageBundle
from revcatgpt.render.functions import (
    Size,
    TemplateFunctions,
    fit_size,
    lang_name,
    pick_lang,
    slug,
)


# ---------------------------------------------------------------------
# fit_size
# ---------------------------------------------------------------------

def test_fit_size_landscape_pins_width():
    assert fit_size(800, 600, 240, 240) == Size(240, 180)


def test_fit_size_portrait_pins_height():
    assert fit_size(600, 800, 240, 240) == Size(180, 240)


def test_fit_size_wide_bounds_pin_height():
    # source aspect 1.0 < bounding aspect 2.0
    assert fit_size(100, 100, 200, 100) == Size(100, 100)


def test_fit_size_truncates_towards_zero():
    assert fit_size(1000, 333, 100, 100) == Size(100, 33)


def test_fit_size_degenerate_input():
    assert fit_size(0, 600, 240, 240) == Size(0, 0)
    assert fit_size(800, 0, 240, 240) == Size(0, 0)
    assert fit_size(800, 600, 0, 0) == Size(0, 0)


# ---------------------------------------------------------------------
# pick_lang
# ---------------------------------------------------------------------

def test_pick_lang_empty_is_none():
    assert pick_lang([]) is None
    assert pick_lang(None) is None


def test_pick_lang_selects_language_then_original():
    value = pick_lang([("en", "Hello", False), ("de", "Hallo", True)])

    assert value.get("de") == "Hallo"
    assert value.get("en") == "Hello"
    assert value.get("fr") == "Hello"
    assert value.is_translated("de")
    assert not value.is_translated("en")
    assert value.original_language() == "en"
    assert str(value) == "Hello"


def test_pick_lang_accepts_models_and_normalizes_tags():
    value = pick_lang([
        MultiLangFragment(lang="fr-CH", value="Bonjour", translated=True),
        MultiLangFragment(lang="!!", value="Hi", translated=True),
    ])

    assert value.languages == ["fr", "en"]
    assert value.original_language() is None
    # No original: first variant wins
    assert value.get("it") == "Bonjour"


def test_pick_lang_last_value_per_language_wins():
    value = pick_lang([("en", "first", False), ("en", "second", False)])
    assert len(value) == 1
    assert value.get("en") == "second"


# ---------------------------------------------------------------------
# lang_name / slug
# ---------------------------------------------------------------------

def test_lang_name_in_target_language():
    assert lang_name("en", "de") == "Englisch"
    assert lang_name("fr", "en") == "French"


def test_lang_name_without_namer_returns_source():
    assert lang_name("en", "ja") == "en"
    assert lang_name("zz", "de") == "zz"


def test_slug_uses_underscores():
    assert slug("Jean Piaget", "en") == "jean_piaget"
    assert slug("a-b c", "xx") == "a_b_c"


def test_slug_language_substitutions():
    assert slug("Müller & Söhne", "de") == "mueller_und_soehne"
    assert slug("Rock & Roll", "en") == "rock_and_roll"


# ---------------------------------------------------------------------
# Capability set
# ---------------------------------------------------------------------

def test_template_functions_expose_fixed_set():
    bundle = MessageBundle("en", {"en": {"hello": "Hello"}})
    functions = TemplateFunctions.for_bundle(bundle)
    names = functions.as_globals()

    assert set(names) == {"localize", "lang_name", "slug", "fit_size", "pick_lang"}
    assert names["localize"]("hello", "en") == "Hello"
    assert names["localize"]("missing", "en") == "missing"
