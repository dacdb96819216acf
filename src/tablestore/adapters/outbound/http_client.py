"""HTTP client for a running table store server.

Wraps an ``httpx.Client``. Requests and responses use the same pydantic
models as the server, so payloads are validated on both ends.

Usage:
    from tablestore.adapters.outbound import TableStoreClient

    with TableStoreClient("http://localhost:3000") as client:
        client.create_table("users", [ColumnPayload(key="id", primary_key=True,
                                                    non_null=True, unique=True)])
        client.insert_row("users", [1])
        rows = client.select("users")

Any FastAPI ``TestClient`` can be passed as ``http_client``, which runs the
client against an in-process app.
"""

from __future__ import annotations

from typing import Any, Sequence

import httpx
from pydantic import BaseModel

from tablestore.adapters.inbound.schemas import (
    ColumnPayload,
    ConditionModel,
    CreateRequest,
    CreateTableRequest,
    DropTableRequest,
    HealthResponse,
    InsertColumnRequest,
    InsertRowRequest,
    InsertRowResponse,
    MessageResponse,
    RenameTableRequest,
    Request,
    RowPayload,
    SelectRequest,
    SelectResponse,
    TablePayload,
    UpdateColumnRequest,
    UpdateRequest,
)
from tablestore.domain.value_objects import Value
from tablestore.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ClientError(Exception):
    """Non-2xx response from the server.

    Attributes:
        status_code: HTTP status of the response.
        detail: Error message from the response body.
        code: Stable error code, when the server sent one.
    """

    def __init__(self, status_code: int, detail: str, code: str | None = None) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail
        self.code = code


class TableStoreClient:
    """Client with one method per API endpoint."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Server base URL. Ignored when ``http_client`` is given.
            timeout: Request timeout in seconds.
            http_client: Pre-configured client to use instead of a new one.
                It is not closed by :meth:`close`.
        """
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> TableStoreClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def health(self) -> HealthResponse:
        return HealthResponse.model_validate(self._get("/health"))

    def list_tables(self) -> list[TablePayload]:
        return [TablePayload.model_validate(t) for t in self._get("/tables")]

    def listing(self) -> str:
        """Plain-text listing of all tables."""
        response = self._send("GET", "/")
        return response.text

    def create(self, name: str) -> TablePayload:
        return TablePayload.model_validate(self._post(CreateRequest(name=name)))

    def create_table(self, name: str, columns: Sequence[ColumnPayload] = ()) -> TablePayload:
        request = CreateTableRequest(name=name, insert_column_requests=list(columns))
        return TablePayload.model_validate(self._post(request))

    def drop_table(self, name: str) -> str:
        return MessageResponse.model_validate(self._post(DropTableRequest(name=name))).message

    def rename_table(self, current_name: str, new_name: str) -> str:
        request = RenameTableRequest(current_name=current_name, new_name=new_name)
        return MessageResponse.model_validate(self._post(request)).message

    def insert_column(
        self,
        table_name: str,
        key: str,
        primary_key: bool = False,
        non_null: bool = False,
        unique: bool = False,
        foreign_key: Sequence[ColumnPayload] | None = None,
    ) -> ColumnPayload:
        request = InsertColumnRequest(
            table_name=table_name,
            key=key,
            primary_key=primary_key,
            non_null=non_null,
            unique=unique,
            foreign_key=list(foreign_key) if foreign_key is not None else None,
        )
        return ColumnPayload.model_validate(self._post(request))

    def insert_row(self, table_name: str, values: Sequence[Any]) -> list[str | None]:
        """Insert a row given as plain Python values (or Value objects).

        Returns:
            String projection of the stored row.
        """
        request = InsertRowRequest(
            table_name=table_name,
            row=RowPayload(values=[Value.of(v) for v in values]),
        )
        return InsertRowResponse.model_validate(self._post(request)).values

    def select(
        self,
        table_name: str,
        columns: Sequence[str] | None = None,
        where: tuple[str, str] | None = None,
    ) -> list[list[Value]]:
        """Select rows.

        Args:
            table_name: Table to read.
            columns: Columns to project; all when None.
            where: Optional ``(column, value)`` equality filter.
        """
        request = SelectRequest(
            table_name=table_name,
            columns=list(columns) if columns is not None else None,
            condition=ConditionModel(column=where[0], value=where[1]) if where else None,
        )
        response = SelectResponse.model_validate(self._post(request))
        return [list(row.values) for row in response.rows]

    def update_table(
        self,
        table_name: str,
        updates: dict[str, str],
        where: tuple[str, str] | None = None,
    ) -> str:
        request = UpdateRequest(
            table_name=table_name,
            condition=ConditionModel(column=where[0], value=where[1]) if where else None,
            updates=[UpdateColumnRequest(column=c, value=v) for c, v in updates.items()],
        )
        return MessageResponse.model_validate(self._post(request)).message

    def execute(self, request: Request) -> Any:
        """Send any request model to its endpoint and return the decoded JSON."""
        return self._post(request)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _get(self, path: str) -> Any:
        return self._send("GET", path).json()

    def _post(self, request: BaseModel) -> Any:
        endpoint = getattr(request, "endpoint", None)
        if endpoint is None:
            raise TypeError(f"No endpoint for {type(request).__name__}")
        payload = request.model_dump(mode="json")
        return self._send("POST", endpoint, json=payload).json()

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("request_failed", method=method, path=path, error=str(e))
            raise ClientError(0, f"Request failed: {e}") from e

        if response.is_error:
            detail, code = _error_details(response)
            logger.debug(
                "request_rejected", method=method, path=path, status=response.status_code, code=code
            )
            raise ClientError(response.status_code, detail, code)
        return response


def _error_details(response: httpx.Response) -> tuple[str, str | None]:
    try:
        body = response.json()
    except ValueError:
        return response.text, None

    if not isinstance(body, dict):
        return response.text, None
    detail = body.get("detail", response.text)
    if not isinstance(detail, str):
        # pydantic validation errors are a list of dicts
        detail = str(detail)
    return detail, body.get("code")
