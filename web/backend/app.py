import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logger import get_logger
from web.backend.routers import focusmate, state

logger = get_logger("api")


def create_app() -> FastAPI:
    app = FastAPI(title="FocusMate State API", version="1.0")

    raw_origins = os.getenv("FOCUSMATE_ALLOWED_ORIGINS", "*")
    allow_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    allow_credentials = "*" not in allow_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "FocusMate State"}

    # Served both bare and under the /api prefix the deployed frontend calls
    for prefix in ("", "/api"):
        app.include_router(state.router, prefix=prefix, tags=["state"])
        app.include_router(focusmate.router, prefix=prefix, tags=["focusmate"])

    logger.info("API ready (origins: %s)", ", ".join(allow_origins))
    return app


app = create_app()
