import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from admin import router as admin_router
from auth import router as auth_router
from core.config import Settings, load_settings
from core.db import Database
from core.errors import register_exception_handlers
from schema_setup import router as schema_setup_router
from sponsors import router as sponsors_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Initialize the DB pool once per process.
    app.state.db = await Database.connect(settings)
    logger.info("API starting (env=%s).", settings.environment)
    try:
        yield
    finally:
        await app.state.db.close()
        logger.info("API stopped.")


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(title="Sponsor Connect API", lifespan=lifespan)
    app.state.settings = settings

    # Allow the configured frontend origin(s) to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(sponsors_router.router, tags=["sponsors"])
    app.include_router(admin_router.router, tags=["admin"])
    app.include_router(schema_setup_router.router, tags=["setup"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "env": settings.environment}

    @app.get("/")
    def root() -> dict:
        return {"message": "sponsor-connect api"}

    return app


app = create_app(load_settings())


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
