import logging

from ..config import LOGO_BACKGROUND
from ..errors import GenerationFailedError
from ..schemas import LogoRequest, LogoResponse
from .extraction import extract_image
from .invoker import GenerationClient
from .prompting import PromptRenderer, build_payload
from .validation import require_text

logger = logging.getLogger(__name__)


class LogoGenerator:
    """Renders the logo brief and asks the image model for one square logo."""

    def __init__(self, invoker: GenerationClient | None = None, renderer: PromptRenderer | None = None):
        self.invoker = invoker or GenerationClient()
        self.renderer = renderer or PromptRenderer()

    def generate(self, request: LogoRequest) -> LogoResponse:
        niche = require_text(request.niche, "niche")
        logo_description = require_text(request.logo_description, "logo_description")
        company_name = (request.company_name or "").strip() or None

        prompt = self.renderer.render(
            "logo.j2",
            niche=niche,
            logo_description=logo_description,
            company_name=company_name,
        )
        response = self.invoker.generate_image(build_payload(prompt), background=LOGO_BACKGROUND)
        if response is None:
            raise GenerationFailedError("AI failed to generate a logo image after retrying.")

        logo_uri = extract_image(response)
        logger.info("Generated logo for niche %r", niche)
        return LogoResponse(logo_image_data_uri=logo_uri)
