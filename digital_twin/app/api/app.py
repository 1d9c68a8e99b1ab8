from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from digital_twin.app.credentials.service import get_provider_api_key
from digital_twin.app.proxy.service import AssistantProxy
from digital_twin.app.readiness import build_readiness_report
from digital_twin.core.config import load_app_config

PROXY_ROUTE = "/api/digital-twin"


def create_app() -> FastAPI:
    config = load_app_config()
    app = FastAPI(title=config.app_name, version=config.app_version)

    @app.get("/")
    async def root() -> JSONResponse:
        return JSONResponse(
            content={
                "name": config.app_name,
                "version": config.app_version,
                "environment": config.environment,
                "docs": "/docs",
            }
        )

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/ready")
    async def ready() -> JSONResponse:
        report = build_readiness_report(config, get_provider_api_key())
        status_code = 200 if bool(report.get("ready")) else 503
        return JSONResponse(content=report, status_code=status_code)

    @app.post(PROXY_ROUTE)
    async def digital_twin(request: Request) -> JSONResponse:
        raw_body = await request.body()
        proxy = AssistantProxy(config, api_key=get_provider_api_key())
        outcome = await proxy.handle(raw_body)
        return JSONResponse(content=outcome.payload, status_code=outcome.status_code)

    return app
