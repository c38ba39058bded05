"""
Raw HTTP API pass-through.

For server endpoints arangomap does not wrap (indexes, views, server
status), send a request over the store's existing python-arango connection.
Only plain HTTP methods are allowed; the path is relative to the database.

Links:
- ArangoDB HTTP API: https://docs.arangodb.com/stable/develop/http-api/
- python-arango connection: https://docs.python-arango.com/en/main/specs.html#arango.connection.BaseConnection

Sample input:
    api_request(store, "get", "/_api/collection")

Expected output:
    Response(status_code=200, body={"result": [...], ...})
"""

from typing import Any, Dict, Optional

from loguru import logger

from arango.request import Request
from arango.response import Response

from arangomap.core.errors import StoreError, UnsupportedOperationError
from arangomap.core.utils.connection import Store

ALLOWED_METHODS = ("get", "head", "options", "post", "put", "patch", "delete")


def api_request(
    store: Store,
    method: str,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    data: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    """
    Send a raw request to the database's HTTP API.

    Args:
        store: Store connection.
        method: HTTP method, one of ALLOWED_METHODS (case-insensitive).
        path: Endpoint path such as "/_api/collection".
        params: Query string parameters.
        data: Request body, serialized to JSON by the driver.
        headers: Extra request headers.

    Returns:
        Response: The python-arango response, with `status_code` and `body`.

    Raises:
        UnsupportedOperationError: For any other method, before any I/O.
        StoreError: If the server answers with an error status.
    """
    method = str(method).lower()
    if method not in ALLOWED_METHODS:
        raise UnsupportedOperationError(
            f"Invalid HTTP method {method!r}, expected one of: {', '.join(ALLOWED_METHODS)}"
        )
    if not path.startswith("/"):
        path = f"/{path}"

    logger.debug(f"API {method.upper()} {path} params={params}")
    request = Request(method=method, endpoint=path, headers=headers, params=params, data=data)
    response = store.db.conn.send_request(request)

    if not response.is_success:
        message = response.error_message or response.status_text
        logger.error(f"API {method.upper()} {path} failed: {message}")
        raise StoreError(
            f"API {method.upper()} {path} failed: {message}",
            http_code=response.status_code,
            error_code=response.error_code,
        )
    return response
