"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rawscan.api.admin import router as admin_router
from rawscan.api.models import (
    ProductGetRequest,
    ProductSearchRequest,
    ProfileUpsertRequest,
)
from rawscan.app_logging import configure_logging
from rawscan.containers import AppContainer
from rawscan.errors import RawScanError, ValidationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        logger.info("Rejected request to %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"ok": False, "error": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/product/get")
    async def product_get(
        body: ProductGetRequest, request: Request
    ) -> dict[str, object]:
        """Resolve a barcode into a scored product."""
        state_container: AppContainer = request.app.state.container
        profile = (
            body.user_profile.to_domain(body.user_id) if body.user_profile else None
        )
        response = await state_container.product_service.get_product(
            body.barcode, profile=profile, user_id=body.user_id
        )
        return response.to_dict()

    @app.post("/product/search")
    async def product_search(
        body: ProductSearchRequest, request: Request
    ) -> dict[str, object]:
        """Search providers by free text."""
        state_container: AppContainer = request.app.state.container
        response = await state_container.product_service.search(body.query, body.limit)
        return response.to_dict()

    @app.post("/profile/upsert")
    async def profile_upsert(
        body: ProfileUpsertRequest, request: Request
    ) -> dict[str, object]:
        """Store a user's goals for later personalization."""
        state_container: AppContainer = request.app.state.container
        profile = body.profile.to_domain(body.user_id)
        try:
            state_container.profile_service.upsert_profile(profile)
        except ValidationError:
            raise
        except RawScanError as exc:
            logger.warning("Profile upsert failed: %s", exc)
            return {"ok": False, "error": str(exc)}
        return {"ok": True, "userId": profile.user_id}

    return app
