"""Network configuration constants for the quiz server."""

import os

DEFAULT_HOST: str = os.environ.get("QUIZSHUFFLE_HOST", "0.0.0.0")
DEFAULT_PORT: int = int(os.environ.get("QUIZSHUFFLE_PORT", "3000"))
API_LOG_LEVEL: str = "info"
