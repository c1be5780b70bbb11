from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from event_planner.api.timelines import router as timelines_router
from event_planner.config import AppConfig, load_app_config
from event_planner.services.catalog_repository import CatalogRepository
from event_planner.services.errors import ApiError
from event_planner.services.timeline_service import TimelineService


def create_app(config: AppConfig | None = None) -> FastAPI:
    config = config or load_app_config()
    logging.getLogger("event_planner").setLevel(config.log_level)

    app = FastAPI(title="Event Planner API", version="0.1.0")
    app.state.timeline_service = TimelineService(
        CatalogRepository(catalog_root=config.catalog_path)
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ApiError(
            status_code=422,
            code="REQUEST_VALIDATION_ERROR",
            message="Request validation failed",
            details=jsonable_errors(exc),
        )
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    @app.get("/health", tags=["system"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(timelines_router)
    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


app = create_app()
