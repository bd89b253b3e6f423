from ..errors import GenerationFailedError
from ..schemas import CaptionRequest, CaptionResponse
from .extraction import extract_text, parse_json_object
from .invoker import GenerationClient
from .prompting import PromptRenderer, build_payload
from .validation import require_image_data_uri


class CaptionGenerator:
    """Writes an Instagram caption for an uploaded photo. Single attempt."""

    def __init__(self, invoker: GenerationClient | None = None, renderer: PromptRenderer | None = None):
        self.invoker = invoker or GenerationClient()
        self.renderer = renderer or PromptRenderer()

    def generate(self, request: CaptionRequest) -> CaptionResponse:
        photo = require_image_data_uri(request.photo_data_uri, "photo_data_uri")
        payload = build_payload(self.renderer.render("caption.j2"), [photo])

        raw = extract_text(self.invoker.generate_text(payload))
        caption = parse_json_object(raw).get("caption")
        if not isinstance(caption, str) or not caption.strip():
            raise GenerationFailedError("AI response did not include a caption.")
        return CaptionResponse(caption=caption.strip())
