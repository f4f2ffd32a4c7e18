"""Entry point for running the application as a module."""

import uvicorn

from filmlog.config import get_settings


def main() -> None:
    """Run the application server."""
    settings = get_settings()
    uvicorn.run(
        "filmlog.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_config=None,  # logging is configured by the app
    )


if __name__ == "__main__":
    main()
