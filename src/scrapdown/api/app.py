"""FastAPI application for the scrapdown local JSON API."""

import secrets
from dataclasses import replace
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..config import validate_config
from ..core.serialize import page_to_dict
from ..errors import ScrapdownError
from ..runtime import Runtime


class ConvertRequest(BaseModel):
    text: str
    ceiling: int | None = None
    promote_single: bool | None = None
    indent_unit: str | None = None


class TreeRequest(BaseModel):
    text: str


def _runtime_for(runtime: Runtime, req: ConvertRequest) -> Runtime:
    """Copy of ``runtime`` with per-request overrides applied."""
    transform = replace(runtime.config.transform)
    render = replace(runtime.config.render)
    if req.ceiling is not None:
        transform.ceiling = req.ceiling
    if req.promote_single is not None:
        transform.promote_single = req.promote_single
    if req.indent_unit is not None:
        render.indent_unit = req.indent_unit
    config = replace(runtime.config, transform=transform, render=render)
    validate_config(config)
    return Runtime(parser=runtime.parser, config=config)


def create_app(runtime: Runtime, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime used for every conversion
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Scrapdown API",
        description="Local JSON API converting Scrapbox-style notes to Markdown",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    # Add CORS middleware if enabled
    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Security setup
    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/convert")
    async def convert(req: ConvertRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Convert a document to Markdown."""
        try:
            rt = _runtime_for(runtime, req)
        except ScrapdownError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"markdown": rt.convert(req.text)}

    @app.post("/tree")
    async def tree(req: TreeRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Parsed document structure, before any transform pass."""
        return page_to_dict(runtime.parse(req.text))

    return app


def generate_token() -> str:
    """Generate a secure random token."""
    return secrets.token_urlsafe(32)
