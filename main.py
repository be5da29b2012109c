import uvicorn

from concierge.config import settings

if __name__ == "__main__":
    config = uvicorn.Config(
        "concierge.api.server:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level="info",
        reload=settings.DEV_MODE,
    )
    server = uvicorn.Server(config)
    server.run()
