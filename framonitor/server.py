"""
HTTP server for FRA Monitor.
"""

import json
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from framonitor import __version__, api
from framonitor.config import Config, load_config


def create_app(cfg: Optional[Config] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        cfg: Application configuration (loaded from the default locations if omitted)

    Returns:
        FastAPI app
    """
    cfg = cfg or load_config()

    app = FastAPI(
        title="FRA Monitor",
        version=__version__,
        description="Forest Rights Act records: PDF ingestion, filtered analytics and the patta holder registry.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__}

    @app.get("/fra-data")
    def fra_data(state: Optional[str] = None, year: Optional[str] = None,
                 month: Optional[str] = None, action: Optional[str] = None):
        status, body = api.get_fra_data(
            {"state": state, "year": year, "month": month, "action": action}, cfg
        )
        return JSONResponse(status_code=status, content=body)

    @app.get("/patta-holders")
    def patta_holders():
        status, body = api.list_patta_holders(cfg)
        return JSONResponse(status_code=status, content=body)

    @app.post("/patta-holders")
    async def add_patta_holder(request: Request):
        try:
            body = await request.json()
        except json.JSONDecodeError:
            return JSONResponse(status_code=400, content={"success": False, "error": "Invalid JSON body"})
        status, body = api.create_patta_holder(body, cfg)
        return JSONResponse(status_code=status, content=body)

    @app.post("/extract-pdf-data")
    async def extract_pdf_data(file: Optional[UploadFile] = File(None)):
        if file is None:
            status, body = api.extract_pdf(None, None, None, cfg)
        else:
            data = await file.read()
            status, body = api.extract_pdf(data, file.filename, file.content_type, cfg)
        return JSONResponse(status_code=status, content=body)

    return app


def run(cfg: Config) -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(create_app(cfg), host=cfg.server.host, port=cfg.server.port)
