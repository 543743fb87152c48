"""Session state for the upload -> generate -> iterate -> download flow.

Every function takes the state mapping explicitly: ``st.session_state`` in the
app, a plain dict in tests.
"""

from __future__ import annotations

import base64
import io
import logging
from enum import Enum
from typing import Callable, MutableMapping

from PIL import Image

from gemini_client import FALLBACK_ERROR, GenerationError, parse_data_url, to_data_url

logger = logging.getLogger(__name__)

DOWNLOAD_FILENAME = "linkedin-profile-pro.jpg"


class GenerationStatus(Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


DEFAULTS = {
    "original_image": None,
    "generated_image": None,
    "status": GenerationStatus.IDLE,
    "error": None,
    "pending_prompt": None,
    "edit_history": [],
}


def init_state(state: MutableMapping) -> None:
    for key, value in DEFAULTS.items():
        if key not in state:
            state[key] = list(value) if isinstance(value, list) else value


def _image(url: str, mime_type: str) -> dict:
    return {"url": url, "mime_type": mime_type}


def handle_upload(state: MutableMapping, data: bytes, mime_type: str) -> None:
    """Store an uploaded photo as the new original and drop any previous result."""
    state["original_image"] = _image(to_data_url(data, mime_type), mime_type)
    state["generated_image"] = None
    state["error"] = None
    state["pending_prompt"] = None
    state["status"] = GenerationStatus.IDLE
    state["edit_history"] = []
    logger.info("Uploaded %s image (%d bytes)", mime_type, len(data))


def clear_upload(state: MutableMapping) -> None:
    """Forget the photo and everything derived from it."""
    for key, value in DEFAULTS.items():
        state[key] = list(value) if isinstance(value, list) else value


def base_image(state: MutableMapping) -> dict | None:
    return state.get("generated_image") or state.get("original_image")


def is_generating(state: MutableMapping) -> bool:
    return state.get("status") == GenerationStatus.GENERATING


def request_generation(state: MutableMapping, prompt: str) -> bool:
    """Queue a generation with ``prompt``.

    Returns False, leaving the state untouched, when there is nothing to edit,
    the prompt is blank, or another request is already in flight.
    """
    if state.get("original_image") is None or not prompt or not prompt.strip():
        return False
    if is_generating(state):
        return False
    state["pending_prompt"] = prompt
    state["error"] = None
    state["status"] = GenerationStatus.GENERATING
    return True


def run_generation(state: MutableMapping, edit: Callable[[str, str, str], str]) -> None:
    """Run the queued request through ``edit(url, mime_type, prompt)``."""
    prompt = state.get("pending_prompt")
    base = base_image(state)
    if not is_generating(state) or prompt is None or base is None:
        state["pending_prompt"] = None
        if is_generating(state):
            state["status"] = GenerationStatus.IDLE
        return

    try:
        result = edit(base["url"], base["mime_type"], prompt)
    except GenerationError as exc:
        logger.exception("Image generation failed")
        state["error"] = str(exc) or FALLBACK_ERROR
        state["status"] = GenerationStatus.FAILED
    else:
        mime_type, _ = parse_data_url(result)
        state["generated_image"] = _image(result, mime_type or base["mime_type"])
        state["edit_history"] = state.get("edit_history", []) + [prompt]
        state["status"] = GenerationStatus.SUCCEEDED
    finally:
        state["pending_prompt"] = None
        # an interrupted rerun must not leave the controls locked
        if is_generating(state):
            state["status"] = GenerationStatus.IDLE


def clear_history(state: MutableMapping) -> None:
    state["edit_history"] = []


def image_bytes(image: dict) -> bytes:
    _, payload = parse_data_url(image["url"])
    return base64.b64decode(payload)


def download_payload(state: MutableMapping) -> tuple[bytes, str, str] | None:
    """Bytes, file name and MIME type of the current result, unconverted."""
    generated = state.get("generated_image")
    if not generated:
        return None
    return image_bytes(generated), DOWNLOAD_FILENAME, generated["mime_type"]


def open_image(image: dict) -> Image.Image:
    return Image.open(io.BytesIO(image_bytes(image)))
