# File: crudgen/api.py
"""
NexaFlow CrudGen - HTTP API
============================
FastAPI boundary over a ``CrudGenerator``.

Routes (prefix ``/api/database``)::

    GET  /tables                              list {schema, name}
    GET  /tables/{table_name}/schema?schema=  one table's metadata
    POST /generate-code                       GenerationRequest → GenerationResult
    POST /cleanup-files                       CleanupRequest → CleanupResult

Generation and cleanup answer 200 when the result reports success and 500
otherwise; the body is the result either way.

``create_app(generator)`` is the explicit factory.  ``get_app()`` builds
one from ``CRUDGEN_*`` environment variables and is what ``crudgen serve``
and ``uvicorn crudgen.api:app`` run.
"""

from __future__ import annotations

import functools
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from crudgen import __version__
from crudgen.errors import SchemaDiscoveryError, TableNotFoundError
from crudgen.generator import (
    EMPTY_SELECTION_MESSAGE,
    CrudGenerator,
    build_source,
    load_config,
)
from crudgen.models import (
    DEFAULT_SCHEMA,
    CleanupRequest,
    CleanupResult,
    GenerationRequest,
    GenerationResult,
    GeneratorConfig,
    TableInfo,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.api")

ENV_SCHEMA_FILE: str = "CRUDGEN_SCHEMA_FILE"
ENV_DATABASE_URL: str = "CRUDGEN_DATABASE_URL"
ENV_CONFIG: str = "CRUDGEN_CONFIG"


def _result_response(result: Any) -> JSONResponse:
    return JSONResponse(
        status_code=200 if result.success else 500,
        content=result.model_dump(mode="json"),
    )


def create_router(generator: CrudGenerator) -> APIRouter:
    router = APIRouter(prefix="/api/database", tags=["database"])

    @router.get("/tables")
    def list_tables() -> List[Dict[str, str]]:
        try:
            pairs = generator.source.list_tables()
        except SchemaDiscoveryError as exc:
            logger.error("Listing tables failed: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return [{"schema": schema, "name": name} for schema, name in pairs]

    @router.get("/tables/{table_name}/schema")
    def get_table_schema(table_name: str, schema: str = DEFAULT_SCHEMA) -> Dict[str, Any]:
        try:
            table: TableInfo = generator.source.get_table(table_name, schema)
        except TableNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except SchemaDiscoveryError as exc:
            logger.error("Inspecting %s.%s failed: %s", schema, table_name, exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return table.model_dump(mode="json", by_alias=True)

    @router.post("/generate-code", response_model=GenerationResult)
    def generate_code(request: GenerationRequest) -> JSONResponse:
        if not request.selected_tables:
            raise HTTPException(status_code=400, detail=EMPTY_SELECTION_MESSAGE)
        logger.info("Generation requested for %s.", ", ".join(request.selected_tables))
        return _result_response(generator.generate(request))

    @router.post("/cleanup-files", response_model=CleanupResult)
    def cleanup_files(request: CleanupRequest) -> JSONResponse:
        logger.info("Cleanup requested under %s.", request.base_path)
        return _result_response(generator.cleanup(request))

    return router


def create_app(generator: CrudGenerator) -> FastAPI:
    """Build the FastAPI application around *generator*."""
    app = FastAPI(title="NexaFlow CrudGen", version=__version__)
    app.state.generator = generator
    app.include_router(create_router(generator))
    logger.debug("FastAPI app created for %r.", generator.source)
    return app


@functools.lru_cache(maxsize=1)
def get_app() -> FastAPI:
    """
    Application configured from the environment.

    ``CRUDGEN_SCHEMA_FILE`` or ``CRUDGEN_DATABASE_URL`` selects the schema
    source; ``CRUDGEN_CONFIG`` optionally names a config file.
    """
    config_path: Optional[str] = os.environ.get(ENV_CONFIG)
    config: GeneratorConfig = load_config(Path(config_path) if config_path else None)
    schema_file: Optional[str] = os.environ.get(ENV_SCHEMA_FILE)
    source = build_source(
        schema_file=Path(schema_file) if schema_file else None,
        database_url=os.environ.get(ENV_DATABASE_URL),
        default_schema=config.default_schema,
    )
    return create_app(CrudGenerator(source, config))


def __getattr__(name: str) -> Any:
    # ``crudgen.api.app`` is built on first access
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ENV_SCHEMA_FILE",
    "ENV_DATABASE_URL",
    "ENV_CONFIG",
    "create_router",
    "create_app",
    "get_app",
]

logger.debug("crudgen.api loaded.")
