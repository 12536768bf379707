"""Artistry Gallery marketplace FastAPI application.

Serves the cart, wishlist, checkout and order history of each profile.
Every request is wrapped in the marketplace domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.api.routes import install_error_handlers, router
from marketplace.checkout.downloads import HttpDownloader, LinkDownloads
from marketplace.config import Settings, build_store
from marketplace.domain import marketplace
from marketplace.utils.logging import clear_context, configure_logging

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
configure_logging()
marketplace.init()

settings = Settings.from_env()


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(
        title="Artistry Gallery Marketplace API",
        description="Cart, wishlist, checkout and order history",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.store = build_store(settings)
    if settings.download_dir:
        app.state.downloader = HttpDownloader(settings.download_dir, timeout=settings.download_timeout)
    else:
        app.state.downloader = LinkDownloads()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the marketplace domain context for each request."""
        clear_context()
        with marketplace.domain_context():
            response = await call_next(request)
        return response

    install_error_handlers(app)
    app.include_router(router)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": marketplace.name,
                "store": app.state.store.backend,
            }
        )

    return app


app = create_app(settings)
