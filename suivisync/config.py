"""Configuration for suivisync.

Values are read from the environment (optionally via a local .env file).
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Remote task service
SUIVI_API_BASE_URL = os.getenv("SUIVI_API_BASE_URL", "http://localhost:8000")
SUIVI_API_TOKEN = os.getenv("SUIVI_API_TOKEN")
SUIVI_API_TIMEOUT_SEC = float(os.getenv("SUIVI_API_TIMEOUT_SEC", "10"))

# Mock backend simulated network latency
SUIVI_MOCK_MIN_DELAY_MS = int(os.getenv("SUIVI_MOCK_MIN_DELAY_MS", "100"))
SUIVI_MOCK_MAX_DELAY_MS = int(os.getenv("SUIVI_MOCK_MAX_DELAY_MS", "300"))

# Dev server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
DEBUG = os.getenv("DEBUG", "False").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
