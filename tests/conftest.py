"""
Shared pytest fixtures for the ProfilePro tests
"""
import io
import sys
from pathlib import Path

import pytest
from PIL import Image
from google.genai import types

# Put the project root on the path so the flat modules import without install
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))


def make_png(color="navy", size=(8, 8)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_response(*parts, block_reason=None):
    """Build a generate_content response holding the given parts."""
    feedback = None
    if block_reason is not None:
        feedback = types.GenerateContentResponsePromptFeedback(block_reason=block_reason)
    candidates = [types.Candidate(content=types.Content(role="model", parts=list(parts)))] if parts else []
    return types.GenerateContentResponse(candidates=candidates, prompt_feedback=feedback)


def image_part(data, mime_type="image/png"):
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def session():
    """A fresh session state mapping"""
    from state import init_state

    state = {}
    init_state(state)
    return state


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return "test-key"
