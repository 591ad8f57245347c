"""
Lab Configuration
Reads the Gemini credential and model choices from the environment (.env supported).
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_TEXT_MODEL = "gemini-3-flash-preview"
DEFAULT_VISION_MODEL = "gemini-2.5-flash-image"
DEFAULT_MAPS_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 30.0

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    text_model: str = DEFAULT_TEXT_MODEL
    vision_model: str = DEFAULT_VISION_MODEL
    maps_model: str = DEFAULT_MAPS_MODEL
    request_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"


def _parse_timeout(raw):
    if raw is None or not str(raw).strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT
    # Never allow an unbounded wait on the model call
    return value if value > 0 else DEFAULT_TIMEOUT


def load_settings(env=None):
    """
    Builds Settings from the given mapping, or from os.environ after loading .env.

    Key lookup order: GEMINI_API_KEY, then API_KEY.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    api_key = env.get("GEMINI_API_KEY") or env.get("API_KEY") or ""

    return Settings(
        api_key=api_key.strip(),
        text_model=env.get("CLOUDLAB_TEXT_MODEL") or DEFAULT_TEXT_MODEL,
        vision_model=env.get("CLOUDLAB_VISION_MODEL") or DEFAULT_VISION_MODEL,
        maps_model=env.get("CLOUDLAB_MAPS_MODEL") or DEFAULT_MAPS_MODEL,
        request_timeout=_parse_timeout(env.get("CLOUDLAB_TIMEOUT")),
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level="INFO"):
    """
    One-time root logger setup. Streamlit reruns the script on every interaction,
    and basicConfig is a no-op once handlers exist.
    """
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
