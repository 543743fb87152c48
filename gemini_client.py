"""Send a photo plus a prompt to Gemini's image model and return the edited image."""

from __future__ import annotations

import base64
import logging

from google import genai
from google.genai import types

import config

logger = logging.getLogger(__name__)

LINKEDIN_PROMPT = """Use this photo as a faithful base for my face, maintaining my real characteristics (face shape, beard, hair, skin tone, and natural expressions).

Generate a professional LinkedIn photo with the following characteristics:
- Modern corporate style
- Appearance of a Data Engineer / Senior Tech Professional
- Confident expression, slight natural smile
- Upright posture, chest-up framing
- Soft and professional lighting (corporate studio style)
- Elegant neutral background (light gray, soft dark blue, or sophisticated blurred office)
- Clothing: well-fitted dress shirt (white, blue, or black) or modern minimalist blazer
- Clean appearance, skin slightly smoothed but maintaining natural texture (no exaggeration or artificial effect)
- High definition, realistic photographic quality (must not look like AI or caricature)
- Slight depth of field with blurred background
- Style similar to executive corporate profile photos in large tech companies

The image should convey: technical competence, intelligence, leadership, reliability, and strategic vision.

Avoid: artificial appearance, excessive sharpness, overly flashy background, AI-generated look, exaggerated skin editing."""

NO_IMAGE_ERROR = "No image returned from the model."
FALLBACK_ERROR = "Failed to generate image. Please try again."


class GenerationError(RuntimeError):
    """The remote call failed or came back without an image."""


def parse_data_url(url: str) -> tuple[str | None, str]:
    """Split a data URL into (mime_type, base64 payload).

    A bare base64 string has no prefix, so its MIME type is None.
    """
    if "," not in url:
        return None, url
    header, payload = url.split(",", 1)
    mime_type = header[len("data:"):].split(";", 1)[0] if header.startswith("data:") else None
    return mime_type or None, payload


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode()}"


def create_client(api_key: str | None = None) -> genai.Client:
    api_key = api_key or config.get_api_key()
    if not api_key:
        raise GenerationError("Set GEMINI_API_KEY (or GOOGLE_API_KEY) before generating images.")
    return genai.Client(api_key=api_key)


def _first_image(response) -> str | None:
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return None
    for part in candidates[0].content.parts or []:
        inline = getattr(part, "inline_data", None)
        if inline and inline.data:
            return to_data_url(inline.data, inline.mime_type or "image/png")
    return None


def edit_image(
    image_url: str,
    mime_type: str,
    prompt: str,
    *,
    client: genai.Client | None = None,
    model: str | None = None,
) -> str:
    """Edit an image with Gemini and return the result as a data URL.

    Args:
        image_url: Data URL (or bare base64) of the base image.
        mime_type: MIME type sent alongside the image bytes.
        prompt: Instruction text for the model.
        client: Optional pre-built client; one is created from the environment otherwise.
        model: Model name override (defaults to ``config.DEFAULT_MODEL``).

    Raises:
        GenerationError: if the call throws or the response holds no image part.
    """

    _, payload = parse_data_url(image_url)
    client = client or create_client()
    model = model or config.DEFAULT_MODEL

    logger.info("Requesting image edit from %s (%d prompt chars)", model, len(prompt))
    try:
        image_part = types.Part(inline_data=types.Blob(data=base64.b64decode(payload), mime_type=mime_type))
        response = client.models.generate_content(
            model=model,
            contents=[image_part, types.Part(text=prompt)],
            config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
        )
    except Exception as exc:
        raise GenerationError(str(exc) or FALLBACK_ERROR) from exc

    result = _first_image(response)
    if result is None:
        feedback = getattr(response, "prompt_feedback", None)
        reason = getattr(feedback, "block_reason", None) if feedback else None
        if reason:
            raise GenerationError(f"{NO_IMAGE_ERROR} Request was blocked: {reason}")
        raise GenerationError(NO_IMAGE_ERROR)
    return result


__all__ = [
    "GenerationError",
    "LINKEDIN_PROMPT",
    "create_client",
    "edit_image",
    "parse_data_url",
    "to_data_url",
]
