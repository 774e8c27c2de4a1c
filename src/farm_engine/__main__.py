"""Entry point for running the application with uvicorn."""

import uvicorn

from farm_engine.cli import configure_logging
from farm_engine.config import get_settings


def main() -> None:
    """Run the application."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "farm_engine.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
