"""
Entry point for the command-buddy service.

Run with:
    uvicorn main:app --reload --port 8080
    python main.py
"""
import sys
from pathlib import Path

# Make `config` and `buddy` importable when run from a checkout
sys.path.insert(0, str(Path(__file__).parent))

import uvicorn
from config import get_settings
from buddy.api.main import app

settings = get_settings()

if __name__ == "__main__":
    uvicorn.run(
        "buddy.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
