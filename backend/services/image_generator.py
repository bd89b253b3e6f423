import logging

from ..errors import GenerationFailedError
from ..schemas import ImageRequest, ImageResponse
from .extraction import extract_image
from .invoker import GenerationClient
from .prompting import PromptPayload, build_payload
from .validation import ImageMode, drop_invalid_url, validate_image_request

logger = logging.getLogger(__name__)


def assemble_image_payload(request: ImageRequest, mode: ImageMode) -> PromptPayload:
    """Logo first, then the base image when editing, then the instruction text.

    The user's prompt or edit instruction is sent verbatim; it is expected to
    say how the logo should be used.
    """
    logo_url = drop_invalid_url(request.logo_image_url, "logo_image_url")

    if mode is ImageMode.EDIT:
        return build_payload(request.edit_instruction.strip(), [logo_url, request.base_image_data_uri.strip()])
    return build_payload(request.prompt.strip(), [logo_url])


class ImageGenerator:
    """Generates one image from a prompt, or edits a supplied base image."""

    def __init__(self, invoker: GenerationClient | None = None):
        self.invoker = invoker or GenerationClient()

    def generate(self, request: ImageRequest) -> ImageResponse:
        mode = validate_image_request(request)
        payload = assemble_image_payload(request, mode)

        response = self.invoker.generate_image(payload)
        if response is None:
            raise GenerationFailedError("Image generation/editing failed to produce an image.")

        image_uri = extract_image(response)
        logger.info("Image %s finished with %d reference image(s)", mode.value, len(payload.media_parts))
        return ImageResponse(image_data_uris=[image_uri])
