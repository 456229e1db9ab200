"""Base API client for orders backend HTTP communication.

This module provides a base class for backend API clients that handles:
- HTTP request execution with timeout/connection error handling
- Response status code interpretation
- JSON parsing with error handling
- Structured logging with operation context

Subclasses only need to:
1. Build authentication headers (Bearer token)
2. Call the base methods for HTTP operations

Architecture:
    - Infrastructure layer (adapter for the orders backend)
    - Uses httpx for async HTTP (one AsyncClient per request)
    - Returns Result types (no exceptions for backend errors)
"""

from typing import Any

import httpx
import structlog

from orderstream.core.constants import (
    REQUEST_TIMEOUT_SECONDS_DEFAULT,
    RESPONSE_BODY_MAX_LENGTH,
)
from orderstream.core.enums import ErrorCode
from orderstream.core.result import Failure, Result, Success
from orderstream.domain.errors import OrderApiError


class BaseAPIClient:
    """Base class for backend API clients with shared HTTP handling.

    Provides common functionality for HTTP communication with the backend:
    - Request execution with timeout/connection error handling
    - Response status code interpretation (401, 403, 404, 429, 5xx)
    - JSON parsing with backend error message extraction

    Attributes:
        _base_url: Backend API base URL (without trailing slash).
        _timeout: HTTP request timeout in seconds.
        _transport: Optional httpx transport (tests use MockTransport).
        _logger: Structured logger.

    Example:
        >>> class PartnerAPI(BaseAPIClient):
        ...     async def get_profile(self, token: str):
        ...         return await self._execute_and_parse(
        ...             method="GET",
        ...             path="/partner/profile",
        ...             headers={"Authorization": f"Bearer {token}"},
        ...             operation="get_profile",
        ...         )
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = REQUEST_TIMEOUT_SECONDS_DEFAULT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize base API client.

        Args:
            base_url: Backend API base URL (e.g., "https://backend.example.com/api").
            timeout: HTTP request timeout in seconds.
            transport: Optional httpx transport override.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._logger = structlog.get_logger("orders_api")

    async def _execute_request(
        self,
        *,
        method: str,
        path: str,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
        json_data: dict[str, Any] | None = None,
        operation: str,
    ) -> Result[httpx.Response, OrderApiError]:
        """Execute HTTP request with error handling.

        Args:
            method: HTTP method (GET, PATCH, etc.).
            path: URL path relative to base_url.
            headers: HTTP headers including authentication.
            params: Optional query parameters.
            json_data: Optional JSON body for PATCH/POST requests.
            operation: Operation name for logging.

        Returns:
            Success(httpx.Response): Raw HTTP response on success.
            Failure(OrderApiError): On timeout or connection error (transient).
        """
        url = f"{self._base_url}{path}"

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    params=params,
                    json=json_data,
                )
            return Success(value=response)

        except httpx.TimeoutException as e:
            self._logger.warning(
                "orders_api_timeout",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=OrderApiError(
                    code=ErrorCode.ORDERS_API_UNAVAILABLE,
                    message="Orders API request timed out",
                    is_transient=True,
                )
            )

        except httpx.RequestError as e:
            self._logger.warning(
                "orders_api_connection_error",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=OrderApiError(
                    code=ErrorCode.ORDERS_API_UNAVAILABLE,
                    message=f"Failed to connect to orders API: {e}",
                    is_transient=True,
                )
            )

    def _check_error_response(
        self,
        response: httpx.Response,
        operation: str,
    ) -> Failure[OrderApiError] | None:
        """Check HTTP response for errors and return the matching OrderApiError.

        Args:
            response: HTTP response to check.
            operation: Operation name for logging.

        Returns:
            Failure(OrderApiError) if error detected, None if response is 2xx.
        """
        status = response.status_code

        if 200 <= status < 300:
            return None

        message = self._backend_message(response)

        if status in (401, 403):
            self._logger.warning(
                "orders_api_auth_failed",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=OrderApiError(
                    code=ErrorCode.ORDERS_API_AUTHENTICATION_FAILED,
                    message=message or "Partner token is invalid or expired",
                    status_code=status,
                )
            )

        if status == 404:
            self._logger.warning(
                "orders_api_not_found",
                operation=operation,
            )
            return Failure(
                error=OrderApiError(
                    code=ErrorCode.ORDER_NOT_FOUND,
                    message=message or "Order not found",
                    status_code=status,
                )
            )

        # Rate limiting and server errors are worth retrying
        if status == 429 or status >= 500:
            self._logger.warning(
                "orders_api_server_error",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=OrderApiError(
                    code=ErrorCode.ORDERS_API_UNAVAILABLE,
                    message=message or f"Orders API server error: {status}",
                    status_code=status,
                    is_transient=True,
                )
            )

        self._logger.warning(
            "orders_api_request_rejected",
            operation=operation,
            status_code=status,
        )
        return Failure(
            error=OrderApiError(
                code=ErrorCode.ORDERS_API_REQUEST_REJECTED,
                message=message or f"Orders API rejected the request: {status}",
                status_code=status,
                details={"response_body": response.text[:RESPONSE_BODY_MAX_LENGTH]},
            )
        )

    def _parse_json(
        self,
        response: httpx.Response,
        operation: str,
    ) -> Result[Any, OrderApiError]:
        """Parse response as JSON with error handling.

        Args:
            response: HTTP response to parse.
            operation: Operation name for logging.

        Returns:
            Success(Any): Decoded JSON body.
            Failure(OrderApiError): On HTTP error or invalid JSON.
        """
        # Check for HTTP errors first
        error_result = self._check_error_response(response, operation)
        if error_result is not None:
            return error_result

        try:
            data = response.json()
        except ValueError as e:
            self._logger.error(
                "orders_api_invalid_json",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=OrderApiError(
                    code=ErrorCode.ORDERS_API_INVALID_RESPONSE,
                    message="Invalid JSON response from orders API",
                    status_code=response.status_code,
                    details={"response_body": response.text[:RESPONSE_BODY_MAX_LENGTH]},
                )
            )

        self._logger.debug(
            "orders_api_succeeded",
            operation=operation,
        )
        return Success(value=data)

    async def _execute_and_parse(
        self,
        *,
        method: str,
        path: str,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
        json_data: dict[str, Any] | None = None,
        operation: str,
    ) -> Result[Any, OrderApiError]:
        """Execute request and parse the JSON body.

        Convenience method combining _execute_request and _parse_json.

        Returns:
            Success(Any): Decoded JSON body.
            Failure(OrderApiError): On any error.
        """
        result = await self._execute_request(
            method=method,
            path=path,
            headers=headers,
            params=params,
            json_data=json_data,
            operation=operation,
        )
        if isinstance(result, Failure):
            return result
        return self._parse_json(result.value, operation)

    @staticmethod
    def _backend_message(response: httpx.Response) -> str | None:
        """Extract ``message`` from a JSON error body, if present."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return None
