"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn recipes_api.main:app --reload

    # Production
    uvicorn recipes_api.main:app --host 0.0.0.0 --port 8080 --workers 4
"""

from recipes_api.factory import create_app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    from recipes_api.core.config import get_settings

    settings = get_settings()

    uvicorn.run(
        "recipes_api.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )
