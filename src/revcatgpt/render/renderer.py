"""
Context Renderer

Renders one search result fragment into a text block for the GPT context,
using a Jinja2 template. The template receives:

- ``lang``: the target language code
- ``source``: the ``Fragment`` being rendered
- the functions of ``TemplateFunctions`` as globals
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
)

from ..clients.models import Fragment
from .functions import TemplateFunctions

logger = logging.getLogger("revcatgpt.render")

DEFAULT_TEMPLATE = "embedding.j2"
TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class TemplateRenderError(RuntimeError):
    """Raised when a fragment cannot be rendered."""


class ContextRenderer:
    def __init__(
        self,
        functions: TemplateFunctions,
        templates_dir: Optional[str | Path] = None,
        template_name: str = DEFAULT_TEMPLATE,
        loader: Optional[BaseLoader] = None,
    ) -> None:
        """
        Parameters
        ----------
        functions : TemplateFunctions
            Helpers exposed to the template.

        templates_dir : Optional[str | Path]
            Folder holding ``template_name``. Defaults to the packaged templates.

        loader : Optional[BaseLoader]
            Explicit Jinja2 loader; takes precedence over ``templates_dir``.

        Raises
        ------
        TemplateRenderError
            If the template cannot be found or does not compile.
        """
        self.env = Environment(
            loader=loader or FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals.update(functions.as_globals())

        try:
            self.template = self.env.get_template(template_name)
        except TemplateError as exc:
            raise TemplateRenderError(f"cannot parse template {template_name}: {exc}") from exc

    def render(self, fragment: Fragment, lang: str) -> str:
        """
        Render ``fragment`` for readers of language ``lang``.

        Raises
        ------
        TemplateRenderError
            On any error during template evaluation.
        """
        try:
            return self.template.render(lang=lang, source=fragment)
        except Exception as exc:
            logger.debug("Rendering fragment %s failed", fragment.id, exc_info=exc)
            raise TemplateRenderError(
                f"cannot execute template for fragment {fragment.id}: {exc}"
            ) from exc
