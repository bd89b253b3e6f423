import logging

from pydantic import ValidationError

from ..errors import GenerationFailedError
from ..schemas import PostDetailsDraft, PostDetailsRequest, PostDetailsResponse
from .extraction import extract_text, parse_json_object
from .invoker import GenerationClient
from .prompting import PromptRenderer, build_payload
from .validation import drop_invalid_url, require_text

logger = logging.getLogger(__name__)


def _optional(value: str | None) -> str | None:
    return (value or "").strip() or None


class PostDetailsGenerator:
    """Two-stage flow: the model drafts captions and a headline, then the
    headline is dropped into the image prompt template."""

    def __init__(self, invoker: GenerationClient | None = None, renderer: PromptRenderer | None = None):
        self.invoker = invoker or GenerationClient()
        self.renderer = renderer or PromptRenderer()

    def generate(self, request: PostDetailsRequest) -> PostDetailsResponse:
        niche = require_text(request.niche, "niche")
        logo_url = drop_invalid_url(request.logo_url, "logo_url")
        context = {
            "niche": niche,
            "category": _optional(request.category),
            "image_description": _optional(request.image_description),
            "contact_info": _optional(request.contact_info),
            "hook_style": _optional(request.hook_style),
        }

        draft = self._draft(context)

        image_prompt = self.renderer.render(
            "post_image.j2",
            niche=niche,
            headline=draft.headline_text,
            image_description=context["image_description"],
            contact_info=context["contact_info"],
            has_logo=logo_url is not None,
        )
        logger.info("Post details ready for niche %r", niche)
        return PostDetailsResponse(
            **draft.model_dump(),
            image_generation_prompt=image_prompt,
            logo_url=logo_url,
        )

    def _draft(self, context: dict) -> PostDetailsDraft:
        prompt = self.renderer.render("post_details.j2", **context)
        raw = extract_text(self.invoker.generate_text(build_payload(prompt)))
        data = parse_json_object(raw)
        try:
            return PostDetailsDraft.model_validate(data)
        except ValidationError as exc:
            logger.error("Post details draft failed validation: %s", exc)
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
            raise GenerationFailedError(
                f"Failed to generate post details from AI model (invalid fields: {', '.join(fields)})."
            ) from exc
