"""Inbound adapters for the table store.

Inbound adapters handle incoming requests and convert them to
state manager operations.

Exports:
    REST API:
        - create_app: Create a FastAPI application
        - run_server: Run the REST API server
    Command Parser:
        - CommandParser: Parser from SQL-like text to request models
        - ParseError: Exception for parsing errors
    Schemas:
        - Request and response models shared with the HTTP client
"""

from tablestore.adapters.inbound.command_parser import (
    SYNTAX_HINT,
    CommandParser,
    ParseError,
)
from tablestore.adapters.inbound.rest_api import create_app, render_listing, run_server
from tablestore.adapters.inbound.schemas import (
    ColumnPayload,
    ConditionModel,
    CreateRequest,
    CreateTableRequest,
    DropTableRequest,
    InsertColumnRequest,
    InsertRowRequest,
    RenameTableRequest,
    Request,
    RowPayload,
    SelectRequest,
    TablePayload,
    UpdateColumnRequest,
    UpdateRequest,
)

__all__ = [
    # REST API
    "create_app",
    "render_listing",
    "run_server",
    # Command Parser
    "CommandParser",
    "ParseError",
    "SYNTAX_HINT",
    # Schemas
    "ColumnPayload",
    "ConditionModel",
    "CreateRequest",
    "CreateTableRequest",
    "DropTableRequest",
    "InsertColumnRequest",
    "InsertRowRequest",
    "RenameTableRequest",
    "Request",
    "RowPayload",
    "SelectRequest",
    "TablePayload",
    "UpdateColumnRequest",
    "UpdateRequest",
]
