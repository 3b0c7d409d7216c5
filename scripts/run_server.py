#!/usr/bin/env python
"""Start the TEMPT API server."""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load environment variables before importing settings
from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from config.settings import get_settings
from tempt_api.utils.logging import setup_logging_from_config

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    setup_logging_from_config(settings.logging)

    print("Starting TEMPT Token API...")
    print(f"API will be available at: http://{settings.server.host}:{settings.server.port}")
    print()

    uvicorn.run(
        "tempt_api.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )
