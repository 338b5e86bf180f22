"""Delhivery HTTP implementation of the ActionGateway protocol.

Thin wrapper around httpx that talks to the Delhivery NDR endpoints. Every
failure is raised as GatewayError (or NotFoundError for an unknown UPL ID)
so callers can distinguish courier trouble from policy denials. Nothing
here retries: one call per method invocation.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from ndrdesk.errors.domain import GatewayError, NotFoundError
from ndrdesk.services.ndr_types import ActionStatus
from ndrdesk.services.nsl_policy import NDRAction

logger = logging.getLogger(__name__)

PRODUCTION_BASE_URL = "https://track.delhivery.com"
STAGING_BASE_URL = "https://staging-express.delhivery.com"

NDR_UPDATE_PATH = "/api/p/update"
NDR_STATUS_PATH = "/api/cmu/get_bulk_upl/{upl_id}"


def _error_detail(resp: httpx.Response) -> str:
    """Extract the most useful error text from a courier response."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error", "rmk", "detail"):
            if body.get(key):
                return str(body[key])
    return str(body)


class DelhiveryActionGateway:
    """ActionGateway implementation that talks to Delhivery over HTTP."""

    def __init__(
        self,
        api_token: str,
        base_url: str = STAGING_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize with courier credentials.

        Args:
            api_token: Delhivery API token.
            base_url: Courier API base URL.
            timeout: Per-request timeout in seconds. Expiry surfaces as
                a retryable GatewayError.
            transport: Optional httpx transport, used by tests.
        """
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        """Return the courier API base URL."""
        return self._base_url

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={
                    "Authorization": f"Token {self._api_token}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def __aenter__(self) -> "DelhiveryActionGateway":
        """Open the httpx async client."""
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the httpx async client."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying client if it was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _raise_for_status(self, resp: httpx.Response, action: str) -> None:
        """Raise GatewayError on non-2xx responses.

        Args:
            resp: httpx.Response to check.
            action: Action name used in the error message.

        Raises:
            GatewayError: On non-2xx status codes.
        """
        if resp.status_code < 400:
            return
        detail = _error_detail(resp)
        if resp.status_code in (401, 403):
            code = "E-5001"
        elif resp.status_code == 429:
            code = "E-3002"
        elif resp.status_code >= 500:
            code = "E-3001"
        else:
            code = "E-3003"
        raise GatewayError.from_code(
            code,
            details={"response": detail},
            status_code=resp.status_code,
            action=action,
            reason=detail,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request, mapping transport failures to GatewayError."""
        client = self._ensure_client()
        try:
            return await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise GatewayError.from_code(
                "E-3001", reason=f"timed out after {self._timeout}s"
            ) from e
        except httpx.DecodingError as e:
            raise GatewayError.from_code(
                "E-3004", reason=f"response body could not be decoded: {e}"
            ) from e
        except httpx.RequestError as e:
            raise GatewayError.from_code("E-3001", reason=str(e) or type(e).__name__) from e

    @staticmethod
    def _json_body(resp: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body or raise E-3004."""
        try:
            body = resp.json()
        except ValueError:
            raise GatewayError.from_code(
                "E-3004",
                reason="response is not JSON",
                status_code=resp.status_code,
            ) from None
        if not isinstance(body, dict):
            raise GatewayError.from_code(
                "E-3004",
                reason=f"expected an object, got {type(body).__name__}",
                status_code=resp.status_code,
            )
        return body

    async def submit(self, action: NDRAction, waybills: Sequence[str]) -> str:
        """Submit an NDR action for waybills via POST /api/p/update.

        Args:
            action: NDR action to apply to every waybill.
            waybills: AWB numbers already cleared by local policy.

        Returns:
            The UPL ID (request_id) assigned by the courier.

        Raises:
            GatewayError: On transport failure, non-2xx status, a courier
                rejection in the body, or a missing request_id.
        """
        payload = {"data": [{"waybill": w, "act": action.value} for w in waybills]}
        logger.info(
            "Submitting %s for %d waybill(s) to %s",
            action.value, len(waybills), self._base_url,
        )
        resp = await self._request("POST", NDR_UPDATE_PATH, json=payload)
        self._raise_for_status(resp, action.value)
        body = self._json_body(resp)

        if body.get("success") is False or body.get("status") is False:
            detail = str(body.get("error") or body.get("message") or body)
            raise GatewayError.from_code(
                "E-3003",
                details={"response": body, "waybills": list(waybills)},
                status_code=resp.status_code,
                action=action.value,
                reason=detail,
            )

        request_id = body.get("request_id")
        if not request_id:
            raise GatewayError.from_code(
                "E-3004",
                details={"response": body},
                status_code=resp.status_code,
                reason="missing request_id",
            )
        logger.info("Courier accepted %s request, UPL ID %s", action.value, request_id)
        return str(request_id)

    async def get_status(self, correlation_id: str) -> ActionStatus:
        """Fetch UPL status via GET /api/cmu/get_bulk_upl/{upl_id}.

        Args:
            correlation_id: UPL ID returned by submit().

        Returns:
            ActionStatus with courier status and covered waybills.

        Raises:
            NotFoundError: If the courier returns 404 for the UPL ID.
            GatewayError: On any other failure.
        """
        resp = await self._request(
            "GET",
            NDR_STATUS_PATH.format(upl_id=correlation_id),
            params={"verbose": "true"},
        )
        if resp.status_code == 404:
            raise NotFoundError("UPL", correlation_id)
        self._raise_for_status(resp, "status lookup")
        body = self._json_body(resp)
        waybills = body.get("waybills") or []
        return ActionStatus(
            correlation_id=correlation_id,
            status=str(body.get("status") or "UNKNOWN"),
            waybills=[str(w) for w in waybills] if isinstance(waybills, list) else [],
            raw=body,
        )
