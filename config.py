import logging
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL = os.environ.get("PROFILEPRO_MODEL", "gemini-2.5-flash-image")

MODEL_OPTIONS = {
    "Gemini 2.5 Flash Image": "gemini-2.5-flash-image",
    "Gemini 3 Pro Image (preview)": "gemini-3-pro-image-preview",
}


def get_api_key():
    """Return the Gemini credential, or None when neither variable is set."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")


def configure_logging():
    level = os.getenv("PROFILEPRO_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
