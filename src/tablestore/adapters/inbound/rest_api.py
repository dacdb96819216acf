"""REST API adapter for the table store.

This module provides a FastAPI-based JSON API over a StateManager.

Endpoints:
    GET /              - Plain-text listing of all tables
    GET /tables        - All tables as JSON
    GET /health        - Health check
    GET /stats         - Collection statistics
    POST /create       - Create an empty table
    POST /create_table - Create a table with columns
    POST /drop_table   - Drop a table
    POST /rename_table - Rename a table
    POST /insert_column - Append a column
    POST /insert_row   - Append a row
    POST /select       - Filtered projection
    POST /update_table - Conditional update

Handlers that touch the state manager are plain ``def`` functions, so
FastAPI runs them on its worker thread pool and concurrent requests meet
at the state manager's reader/writer lock.

Usage:
    from tablestore.adapters.inbound.rest_api import create_app
    from tablestore.adapters.outbound import FileSnapshotStore
    from tablestore.application import StateManager

    state = StateManager.open(FileSnapshotStore("data/tables.json"))
    app = create_app(state)
    # Run with uvicorn: uvicorn app:app --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from tablestore import __version__
from tablestore.adapters.inbound.schemas import (
    ColumnPayload,
    CreateRequest,
    CreateTableRequest,
    DropTableRequest,
    ErrorResponse,
    HealthResponse,
    InsertColumnRequest,
    InsertRowRequest,
    InsertRowResponse,
    MessageResponse,
    RenameTableRequest,
    RowPayload,
    SelectRequest,
    SelectResponse,
    StatsResponse,
    TablePayload,
    UpdateRequest,
)
from tablestore.application import StateManager
from tablestore.domain.entities import Table
from tablestore.domain.errors import PersistenceError, TableStoreError
from tablestore.infrastructure.logging import get_logger

logger = get_logger(__name__)

_ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def render_listing(tables: list[Table]) -> str:
    """Render tables as human-readable text.

    Each table is a block: its name, a header line with column keys and
    constraint flags, then one line per row with Null shown as ``NULL``.
    """
    if not tables:
        return "No tables\n"

    blocks = []
    for table in tables:
        header = " | ".join(
            f"{c.key} [{c.flags()}]" if c.flags() else c.key for c in table.columns
        )
        lines = [f"Table: {table.name}", f"  {header}" if header else "  (no columns)"]
        for row in table.rows:
            lines.append("  " + " | ".join(str(value) for value in row.values))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def create_app(state: StateManager) -> FastAPI:
    """Create a FastAPI application for the table store.

    Args:
        state: The state manager to serve.

    Returns:
        A configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("api_started", snapshot=state.store.location)
        yield
        try:
            state.save()
            logger.info("api_stopped", snapshot=state.store.location)
        except PersistenceError as e:
            logger.error("final_save_failed", snapshot=state.store.location, error=str(e))

    app = FastAPI(
        title="Table Store API",
        description="JSON API for a minimal relational record store",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TableStoreError)
    async def handle_table_store_error(request: Request, exc: TableStoreError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status,
            content={"detail": str(exc), "code": exc.code},
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.get("/stats", response_model=StatsResponse, tags=["Stats"])
    def get_stats() -> StatsResponse:
        """Get collection statistics."""
        return StatsResponse(**state.stats())

    @app.get("/", response_class=PlainTextResponse, tags=["Tables"])
    def list_tables_text() -> str:
        """Human-readable listing of all tables."""
        return render_listing(state.get_all())

    @app.get("/tables", response_model=list[TablePayload], tags=["Tables"])
    def list_tables() -> list[TablePayload]:
        """All tables with schema and rows."""
        return [TablePayload.from_table(t) for t in state.get_all()]

    @app.post("/create", response_model=TablePayload, responses=_ERROR_RESPONSES, tags=["Tables"])
    def create(request: CreateRequest) -> TablePayload:
        """Create an empty table."""
        return TablePayload.from_table(state.create(Table(request.name)))

    @app.post(
        "/create_table", response_model=TablePayload, responses=_ERROR_RESPONSES, tags=["Tables"]
    )
    def create_table(request: CreateTableRequest) -> TablePayload:
        """Create a table with its columns.

        Nothing is created if any column is rejected.
        """
        columns = [c.to_column() for c in request.insert_column_requests]
        return TablePayload.from_table(state.create_table(request.name, columns))

    @app.post(
        "/drop_table", response_model=MessageResponse, responses=_ERROR_RESPONSES, tags=["Tables"]
    )
    def drop_table(request: DropTableRequest) -> MessageResponse:
        """Drop a table."""
        state.drop_table(request.name)
        return MessageResponse(message=f"Table '{request.name}' dropped")

    @app.post(
        "/rename_table", response_model=MessageResponse, responses=_ERROR_RESPONSES, tags=["Tables"]
    )
    def rename_table(request: RenameTableRequest) -> MessageResponse:
        """Rename a table."""
        state.rename(request.current_name, request.new_name)
        return MessageResponse(
            message=f"Table '{request.current_name}' renamed to '{request.new_name}'"
        )

    @app.post(
        "/insert_column", response_model=ColumnPayload, responses=_ERROR_RESPONSES, tags=["Columns"]
    )
    def insert_column(request: InsertColumnRequest) -> ColumnPayload:
        """Append a column to a table."""
        column = state.insert_column(request.table_name, request.to_column())
        return ColumnPayload.from_column(column)

    @app.post(
        "/insert_row", response_model=InsertRowResponse, responses=_ERROR_RESPONSES, tags=["Rows"]
    )
    def insert_row(request: InsertRowRequest) -> InsertRowResponse:
        """Append a row; missing trailing values are stored as Null."""
        stored = state.insert_row(request.table_name, request.row.to_row())
        return InsertRowResponse(values=stored.as_strings())

    @app.post("/select", response_model=SelectResponse, responses=_ERROR_RESPONSES, tags=["Rows"])
    def select(request: SelectRequest) -> SelectResponse:
        """Project the rows matching an optional condition."""
        rows = state.select(
            request.table_name,
            request.columns,
            request.condition.to_condition() if request.condition else None,
        )
        return SelectResponse(rows=[RowPayload.from_row(r) for r in rows])

    @app.post(
        "/update_table", response_model=MessageResponse, responses=_ERROR_RESPONSES, tags=["Rows"]
    )
    def update_table(request: UpdateRequest) -> MessageResponse:
        """Overwrite columns in matching rows; values are stored as strings."""
        count = state.update(
            request.table_name,
            request.condition.to_condition() if request.condition else None,
            [u.to_update() for u in request.updates],
        )
        return MessageResponse(message=f"Updated {count} rows in table '{request.table_name}'")

    return app


def run_server(
    state: StateManager,
    host: str = "0.0.0.0",
    port: int = 3000,
) -> None:
    """Run the REST API server.

    uvicorn turns SIGINT/SIGTERM into a graceful shutdown, which runs the
    lifespan hook and writes a final snapshot.

    Args:
        state: The state manager to serve.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    app = create_app(state)
    uvicorn.run(app, host=host, port=port, log_config=None)
