"""Prompt templates and the ordered multi-part payloads sent to the model."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from ..config import PROMPT_TEMPLATE_DIR

logger = logging.getLogger(__name__)


class PromptRenderError(Exception):
    """Raised when a template is missing or cannot be filled in."""


@dataclass(frozen=True)
class PromptPart:
    text: Optional[str] = None
    media_url: Optional[str] = None

    def __post_init__(self):
        if (self.text is None) == (self.media_url is None):
            raise ValueError("A prompt part carries exactly one of text or media_url.")

    @property
    def is_media(self) -> bool:
        return self.media_url is not None

    def to_input(self) -> Dict[str, Any]:
        """Shape of this part in a Responses API message."""
        if self.is_media:
            return {"type": "input_image", "image_url": self.media_url}
        return {"type": "input_text", "text": self.text}


@dataclass(frozen=True)
class PromptPayload:
    parts: tuple

    @property
    def media_parts(self) -> List[PromptPart]:
        return [p for p in self.parts if p.is_media]

    @property
    def text(self) -> str:
        return "\n\n".join(p.text for p in self.parts if not p.is_media)

    def to_messages(self) -> List[Dict[str, Any]]:
        return [{"role": "user", "content": [p.to_input() for p in self.parts]}]


def build_payload(text: str, media_urls: Iterable[Optional[str]] = ()) -> PromptPayload:
    """Media references go first so the model reads them as context for the instruction."""
    parts = [PromptPart(media_url=url) for url in media_urls if url]
    parts.append(PromptPart(text=text))
    return PromptPayload(parts=tuple(parts))


class PromptRenderer:
    """Fills flow templates from request fields.

    Templates are Jinja2 files in ``PROMPT_TEMPLATE_DIR``. Undefined variables
    fail loudly; optional clauses are written as ``{% if field %}`` blocks and
    callers pass ``None`` for absent fields.
    """

    def __init__(self, template_dir: Path | None = None):
        self.template_dir = Path(template_dir or PROMPT_TEMPLATE_DIR)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            autoescape=False,
        )

    def render(self, name: str, **variables: Any) -> str:
        try:
            template = self.env.get_template(name)
            rendered = template.render(**variables)
        except TemplateError as exc:
            raise PromptRenderError(f"Failed to render prompt template {name!r}: {exc}") from exc
        logger.debug("Rendered prompt %s (%d chars)", name, len(rendered))
        return rendered.strip()
