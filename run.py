#!/usr/bin/env python3
"""Run script for the suivisync mock API."""

import uvicorn

from suivisync.config import DEBUG, HOST, LOG_LEVEL, PORT
from suivisync.logging_setup import setup_logging

if __name__ == "__main__":
    setup_logging()
    uvicorn.run(
        "suivisync.api.app:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level=LOG_LEVEL.lower(),
    )
