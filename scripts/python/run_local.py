"""Run the API locally with auto-reload using the development settings."""

import os

import uvicorn


def main() -> None:
    """Serve ``recipes_api.main:app`` on the configured host and port."""
    os.environ.setdefault("APP_ENV", "development")

    from recipes_api.core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "recipes_api.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=True,
    )


if __name__ == "__main__":
    main()
