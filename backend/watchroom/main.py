from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from watchroom.config import settings
from watchroom.database import Database
from watchroom.queries import WatchRoomQueries
from watchroom.routers import users_router, rooms_router, chat_router
from watchroom.utils.logging_config import setup_logging, fastapi_logger
from watchroom.error_handlers import register_exception_handlers


def create_app(database: Database | None = None, configure_logging: bool = True) -> FastAPI:
    """
    Build the API application.

    The store client is created inside the lifespan (unless one is passed
    in, as tests do) and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        if configure_logging:
            setup_logging()
        fastapi_logger.info(f"Starting {settings.APP_NAME}")
        store = database or Database()
        await store.create_all()
        app.state.database = store
        app.state.queries = WatchRoomQueries(store)
        fastapi_logger.info("Database initialized")
        yield
        # Shutdown
        fastapi_logger.info("Shutting down application")
        await store.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Shared watch rooms: membership, video queue and chat",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global Exception Handlers
    register_exception_handlers(app)

    # API Routers
    app.include_router(users_router)
    app.include_router(rooms_router)
    app.include_router(chat_router)

    @app.get("/health")
    async def health_check():
        database_ok = await app.state.database.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "service": settings.APP_NAME,
            "database_connected": database_ok,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("watchroom.main:app", host="0.0.0.0", port=8005, reload=True)
