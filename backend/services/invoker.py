import logging
import time
from typing import Any, Callable, Optional

from openai import OpenAI, OpenAIError

from ..config import (
    IMAGE_BACKGROUND,
    IMAGE_MAX_ATTEMPTS,
    IMAGE_MODEL,
    IMAGE_OUTPUT_FORMAT,
    IMAGE_SIZE,
    RETRY_DELAY_SECONDS,
    TEXT_MODEL,
)
from ..errors import ExternalCallError
from .prompting import PromptPayload

logger = logging.getLogger(__name__)


class GenerationClient:
    """Thin wrapper over the OpenAI client used by every flow.

    Text calls run once and raise ExternalCallError on failure. Image calls
    run up to ``max_attempts`` times with ``sleep(retry_delay)`` in between and
    return None once every attempt has failed; the caller decides whether
    that is fatal.
    """

    def __init__(
        self,
        client: OpenAI | None = None,
        sleep: Callable[[float], None] = time.sleep,
        retry_delay: float = RETRY_DELAY_SECONDS,
        max_attempts: int = IMAGE_MAX_ATTEMPTS,
    ):
        self.client = client or OpenAI()
        self.sleep = sleep
        self.retry_delay = retry_delay
        self.max_attempts = max(1, max_attempts)

    def generate_text(self, payload: PromptPayload) -> Any:
        try:
            return self.client.responses.create(
                model=TEXT_MODEL,
                input=payload.to_messages(),
                text={"format": {"type": "json_object"}},
            )
        except OpenAIError as exc:
            logger.error("Text generation failed: %s", exc)
            raise ExternalCallError(f"OpenAI error: {exc}") from exc

    def generate_image(self, payload: PromptPayload, background: str = IMAGE_BACKGROUND) -> Optional[Any]:
        attempt = 0
        while attempt < self.max_attempts:
            attempt += 1
            try:
                return self._call_image_model(payload, background)
            except OpenAIError as exc:
                logger.error("Error generating image (attempt %d/%d): %s", attempt, self.max_attempts, exc)
                if attempt < self.max_attempts:
                    logger.info("Retrying image generation in %.1fs", self.retry_delay)
                    self.sleep(self.retry_delay)
        return None

    def _call_image_model(self, payload: PromptPayload, background: str) -> Any:
        if not payload.media_parts:
            return self.client.images.generate(
                model=IMAGE_MODEL,
                prompt=payload.text,
                n=1,
                size=IMAGE_SIZE,
                background=background,
                output_format=IMAGE_OUTPUT_FORMAT,
            )

        # Reference images need the Responses API; the image tool does the drawing.
        return self.client.responses.create(
            model=TEXT_MODEL,
            input=payload.to_messages(),
            tools=[
                {
                    "type": "image_generation",
                    "model": IMAGE_MODEL,
                    "size": IMAGE_SIZE,
                    "background": background,
                    "output_format": IMAGE_OUTPUT_FORMAT,
                }
            ],
            tool_choice={"type": "image_generation"},
        )
