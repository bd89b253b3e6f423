"""Pull usable output out of raw model responses.

Each strategy looks in one place and returns a value or None. Strategies are
tried in order; the first hit wins. Image responses from the Images API carry
the payload at ``data[0].b64_json``; Responses API calls bury it in the
``output`` item list, which is the fallback location.
"""

import json
import logging
import re
from typing import Any, Callable, Optional, Sequence

from ..config import IMAGE_OUTPUT_FORMAT
from ..errors import GenerationFailedError
from ..schemas import IMAGE_DATA_URI_PATTERN

logger = logging.getLogger(__name__)

Strategy = Callable[[Any], Optional[str]]

_IMAGE_DATA_URI_RE = re.compile(IMAGE_DATA_URI_PATTERN)


def _field(obj: Any, name: str) -> Any:
    """Read an attribute from an SDK object or a key from a plain dict."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def to_data_uri(b64_or_uri: str, image_format: str = IMAGE_OUTPUT_FORMAT) -> Optional[str]:
    """Wrap a base64 payload as an image data URI; other data URIs are rejected."""
    if b64_or_uri.startswith("data:"):
        return b64_or_uri if _IMAGE_DATA_URI_RE.match(b64_or_uri) else None
    uri = f"data:image/{image_format};base64,{b64_or_uri}"
    return uri if _IMAGE_DATA_URI_RE.match(uri) else None


def _describe(response: Any) -> str:
    """Response type and output item types, without the payloads."""
    items = [_field(item, "type") or type(item).__name__ for item in _as_list(_field(response, "output"))]
    data = _as_list(_field(response, "data"))
    return f"{type(response).__name__}(data={len(data)} item(s), output={items})"


# -------------------
# Image strategies
# -------------------

def image_from_data(response: Any) -> Optional[str]:
    for item in _as_list(_field(response, "data"))[:1]:
        b64 = _field(item, "b64_json")
        if isinstance(b64, str) and b64:
            return to_data_uri(b64)
    return None


def image_from_output_items(response: Any) -> Optional[str]:
    for item in _as_list(_field(response, "output")):
        if _field(item, "type") == "image_generation_call":
            result = _field(item, "result")
            uri = to_data_uri(result) if isinstance(result, str) and result else None
            if uri:
                return uri
            continue
        for part in _as_list(_field(item, "content")):
            url = _field(part, "image_url")
            if isinstance(url, str) and _IMAGE_DATA_URI_RE.match(url):
                return url
    return None


# -------------------
# Text strategies
# -------------------

def text_from_output_text(response: Any) -> Optional[str]:
    text = _field(response, "output_text")
    if isinstance(text, str) and text.strip():
        return text.strip()
    return None


def text_from_output_items(response: Any) -> Optional[str]:
    for item in _as_list(_field(response, "output")):
        for part in _as_list(_field(item, "content")):
            if _field(part, "type") != "output_text":
                continue
            text = _field(part, "text")
            if isinstance(text, str) and text.strip():
                return text.strip()
    return None


IMAGE_STRATEGIES: Sequence[Strategy] = (image_from_data, image_from_output_items)
TEXT_STRATEGIES: Sequence[Strategy] = (text_from_output_text, text_from_output_items)


def first_match(response: Any, strategies: Sequence[Strategy]) -> Optional[str]:
    for strategy in strategies:
        value = strategy(response)
        if value is not None:
            logger.debug("Extracted output with %s", strategy.__name__)
            return value
    return None


def extract_image(response: Any, strategies: Sequence[Strategy] = IMAGE_STRATEGIES) -> str:
    uri = first_match(response, strategies)
    if uri is None:
        logger.error("No image found in generation response: %s", _describe(response))
        raise GenerationFailedError("AI failed to generate an image. No image data found in response.")
    return uri


def extract_text(response: Any, strategies: Sequence[Strategy] = TEXT_STRATEGIES) -> str:
    text = first_match(response, strategies)
    if text is None:
        logger.error("No text found in generation response: %s", _describe(response))
        raise GenerationFailedError("AI returned no text output.")
    return text


# -------------------
# JSON helpers
# -------------------

def _strip_markdown_json(s: str) -> str:
    """Remove ```json ... ``` or bare ``` ... ``` wrappers."""
    text = s.strip()
    if text.startswith("```"):
        lines = text.splitlines()[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text


def _extract_braced_json(s: str) -> str:
    start = s.find("{")
    end = s.rfind("}")
    if start != -1 and end != -1 and end > start:
        return s[start : end + 1]
    return s


def parse_json_object(raw: str) -> dict:
    cleaned = _extract_braced_json(_strip_markdown_json(raw))
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error("Model returned invalid JSON:\n%s", raw)
        raise GenerationFailedError("Model returned invalid JSON.") from exc
    if not isinstance(data, dict):
        logger.error("Model returned JSON that is not an object:\n%s", raw)
        raise GenerationFailedError("Model returned JSON that is not an object.")
    return data
