import pytest
from jinja2 import DictLoader

from revcatgpt.clients.models import Fragment, MediaRef, MultiLangFragment, Person
from revcatgpt.config import settings
from revcatgpt.language.bundle import MessageBundle
from revcatgpt.render.functions import TemplateFunctions
from revcatgpt.render.renderer import ContextRenderer, TemplateRenderError


@pytest.fixture(scope="module")
def functions():
    bundle = MessageBundle.load(settings.locale_folder, ["de", "en", "fr", "it"], "en")
    return TemplateFunctions.for_bundle(bundle)


@pytest.fixture(scope="module")
def renderer(functions):
    return ContextRenderer(functions)


@pytest.fixture
def fragment():
    return Fragment(
        id="piaget-001",
        signature="JP-1932-04",
        title=[
            MultiLangFragment(lang="en", value="Jean Piaget at work"),
            MultiLangFragment(lang="de", value="Jean Piaget bei der Arbeit", translated=True),
        ],
        abstract=[
            MultiLangFragment(lang="en", value="The psychologist in his study in Geneva."),
            MultiLangFragment(
                lang="de",
                value="Der Psychologe in seinem Arbeitszimmer in Genf.",
                translated=True,
            ),
        ],
        date="1932",
        place="Genève",
        category=["photography", "psychology"],
        persons=[Person(name="Jean Piaget", role="subject")],
        media=[
            MediaRef(
                name="portrait",
                type="image",
                uri="mediaserver:piaget/portrait",
                width=800,
                height=600,
            )
        ],
        url="https://example.org/piaget-001",
    )


def test_render_english(renderer, fragment):
    text = renderer.render(fragment, "en")

    assert text.startswith("# Jean Piaget at work")
    assert "Signature: JP-1932-04" in text
    assert "Place: Genève" in text
    assert "Persons: Jean Piaget (subject)" in text
    assert "Category: photography, psychology" in text
    assert "The psychologist in his study in Geneva." in text
    assert "translated from" not in text
    assert "- Image: portrait <mediaserver:piaget/portrait> (240x180)" in text
    assert "Link: https://example.org/piaget-001" in text


def test_render_german_uses_translations(renderer, fragment):
    text = renderer.render(fragment, "de")

    assert text.startswith("# Jean Piaget bei der Arbeit")
    assert "Personen: Jean Piaget (Thema)" in text
    assert "Der Psychologe in seinem Arbeitszimmer in Genf." in text
    assert "(übersetzt aus Englisch)" in text
    assert "- Bild: portrait" in text


def test_render_language_without_variant_uses_original(renderer, fragment):
    text = renderer.render(fragment, "it")

    assert text.startswith("# Jean Piaget at work")
    assert "Persone: Jean Piaget (soggetto)" in text
    assert "The psychologist in his study in Geneva." in text


def test_render_minimal_fragment(renderer):
    text = renderer.render(Fragment(id="bare-1"), "en")
    assert text.strip() == "# bare-1"


def test_render_error_is_typed(functions, fragment):
    renderer = ContextRenderer(
        functions,
        loader=DictLoader({"embedding.j2": "{{ source.does_not_exist }}"}),
    )
    with pytest.raises(TemplateRenderError):
        renderer.render(fragment, "en")


def test_template_functions_available_in_template(functions, fragment):
    renderer = ContextRenderer(
        functions,
        loader=DictLoader({
            "embedding.j2": "{{ slug(source.persons[0].name, lang) }} "
                            "{{ fit_size(800, 600, 100, 100).height }} "
                            "{{ lang_name('fr', lang) }}",
        }),
    )
    assert renderer.render(fragment, "en") == "jean_piaget 75 French"


def test_missing_template_fails_at_construction(functions):
    with pytest.raises(TemplateRenderError):
        ContextRenderer(functions, loader=DictLoader({}))
