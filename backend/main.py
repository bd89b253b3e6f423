import logging
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS, configure_logging
from .errors import ExternalCallError, GenerationFailedError, InvalidInputError
from .schemas import (
    CaptionRequest,
    CaptionResponse,
    ImageRequest,
    ImageResponse,
    LogoRequest,
    LogoResponse,
    PostDetailsRequest,
    PostDetailsResponse,
)
from .services.caption_generator import CaptionGenerator
from .services.image_generator import ImageGenerator
from .services.invoker import GenerationClient
from .services.logo_generator import LogoGenerator
from .services.post_details import PostDetailsGenerator
from .services.prompting import PromptRenderer

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Social Post Studio API", version="1.0.0")

# Basic CORS to allow calls from a separate front end.
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

invoker = GenerationClient()
renderer = PromptRenderer()
caption_generator = CaptionGenerator(invoker, renderer)
logo_generator = LogoGenerator(invoker, renderer)
image_generator = ImageGenerator(invoker)
post_details_generator = PostDetailsGenerator(invoker, renderer)


async def _run(flow: Callable[[Any], Any], payload: Any) -> Any:
    try:
        return await run_in_threadpool(flow, payload)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (ExternalCallError, GenerationFailedError) as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Unexpected error in %s", getattr(flow, "__qualname__", flow))
        raise HTTPException(status_code=500, detail="Unexpected error during generation") from exc


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.post("/captions", response_model=CaptionResponse)
async def generate_caption(payload: CaptionRequest) -> CaptionResponse:
    return await _run(caption_generator.generate, payload)


@app.post("/logos", response_model=LogoResponse)
async def generate_logo(payload: LogoRequest) -> LogoResponse:
    return await _run(logo_generator.generate, payload)


@app.post("/images", response_model=ImageResponse)
async def generate_image(payload: ImageRequest) -> ImageResponse:
    return await _run(image_generator.generate, payload)


@app.post("/post-details", response_model=PostDetailsResponse)
async def generate_post_details(payload: PostDetailsRequest) -> PostDetailsResponse:
    return await _run(post_details_generator.generate, payload)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.main:app", host="0.0.0.0", port=8000, reload=True)
