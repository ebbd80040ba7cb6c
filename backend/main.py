"""FastAPI backend entry point for uvicorn (``uvicorn backend.main:app``)."""

import os

import uvicorn

from angler.config.server import DEFAULT_API_PORT
from backend.app_factory import create_app

app = create_app()


def main() -> None:
    """Run the application using uvicorn when executed directly."""
    port = int(os.getenv("ANGLER_API_PORT", str(DEFAULT_API_PORT)))
    uvicorn.run("backend.main:app", host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    main()
