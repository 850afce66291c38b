"""HTTP implementation of BakongAPIClient."""

import asyncio
from typing import Any, Dict, Optional

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import (
    record_bakong_failure,
    record_bakong_retry,
    record_bakong_success,
    record_ipv4_fallback,
    track_bakong_latency,
)
from src.domain.exceptions import (
    BakongAPIException,
    BakongAPITimeoutException,
    BakongInvalidResponseException,
    BakongNetworkException,
)
from src.domain.interfaces import BakongAPIClient, ProviderResponse

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api-bakong.nbc.org.kh"

DEFAULT_SOURCE_INFO = {
    "appIconUrl": "https://bakong.nbc.org.kh/images/logo.svg",
    "appName": "My Shop",
    "appDeepLinkCallback": "https://yourwebsite.com/payment/success",
}

# Binding to the IPv4 wildcard address forces an IPv4 connection
IPV4_LOCAL_ADDRESS = "0.0.0.0"


class HttpBakongAPIClient(BakongAPIClient):
    """
    HTTP client for the Bakong open API.

    Every call is bounded by a total deadline covering connect, upload and
    the whole response body. Timeouts and connection failures are re-sent
    once over an IPv4-only transport, and status lookups are retried a
    bounded number of times with a fixed delay.
    """

    RETRYABLE_ERROR_CODES = frozenset({"TIMEOUT", "NETWORK_ERROR", "INVALID_RESPONSE"})

    def __init__(
        self,
        api_token: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        status_timeout_ms: int | None = None,
        deeplink_timeout_ms: int | None = None,
        retry_attempts: int | None = None,
        retry_delay_ms: int | None = None,
        enable_ipv4_fallback: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        ipv4_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_token = api_token if api_token is not None else settings.bakong_api_token
        self.base_url = (base_url or settings.bakong_api_base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout_ms = _pick(timeout_ms, settings.bakong_api_timeout_ms)
        self.status_timeout_ms = _pick(status_timeout_ms, settings.bakong_status_timeout_ms)
        self.deeplink_timeout_ms = _pick(deeplink_timeout_ms, settings.bakong_deeplink_timeout_ms)
        self.retry_attempts = _pick(retry_attempts, settings.bakong_api_retry_attempts)
        self.retry_delay_ms = _pick(retry_delay_ms, settings.bakong_api_retry_delay_ms)
        self.enable_ipv4_fallback = _pick(enable_ipv4_fallback, settings.bakong_ipv4_fallback)
        self._transport = transport
        self._ipv4_transport = ipv4_transport or transport

    @property
    def has_token(self) -> bool:
        return bool(self._api_token)

    def is_using_dev_environment(self) -> bool:
        return "-dev." in self.base_url

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def post(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        requires_auth: bool = False,
        timeout_ms: int | None = None,
    ) -> ProviderResponse:
        """
        POST a JSON payload to a Bakong endpoint.

        Transport failures are returned as ``responseCode: -1`` responses
        rather than raised.
        """
        if requires_auth and not self._api_token:
            record_bakong_failure(endpoint, "MISSING_TOKEN")
            return self._failure("MISSING_TOKEN", "Bakong API token is missing")

        timeout_ms = int(timeout_ms if timeout_ms is not None else self.timeout_ms)

        try:
            with track_bakong_latency(endpoint):
                result = await self._request(endpoint, payload, requires_auth, timeout_ms)
        except BakongAPIException as e:
            record_bakong_failure(endpoint, e.code)
            return self._failure(e.code, e.message)

        if result.get("responseCode") == -1:
            record_bakong_failure(endpoint, str(result.get("errorCode")))
        else:
            record_bakong_success(endpoint)

        return result

    async def post_with_retry(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        requires_auth: bool = False,
        timeout_ms: int | None = None,
        retries: int | None = None,
        retry_delay_ms: int | None = None,
    ) -> ProviderResponse:
        """
        POST with a bounded number of retries for transient failures.

        Only TIMEOUT, NETWORK_ERROR, and INVALID_RESPONSE failures are
        retried; provider responses are returned as-is.
        """
        retries = int(retries if retries is not None else self.retry_attempts)
        delay_ms = int(retry_delay_ms if retry_delay_ms is not None else self.retry_delay_ms)

        result = await self.post(endpoint, payload, requires_auth, timeout_ms)
        if not self.is_retryable(result) or retries <= 0:
            return result

        for attempt in range(1, retries + 1):
            await self._sleep(delay_ms)
            record_bakong_retry()
            logger.warning(
                "bakong_request_retry",
                endpoint=endpoint,
                attempt=attempt,
                max_retries=retries,
                error_code=result.get("errorCode"),
            )

            result = await self.post(endpoint, payload, requires_auth, timeout_ms)
            if not self.is_retryable(result):
                return result

        return result

    def is_retryable(self, result: Any) -> bool:
        return (
            isinstance(result, dict)
            and result.get("responseCode") == -1
            and str(result.get("errorCode")) in self.RETRYABLE_ERROR_CODES
        )

    async def _request(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        requires_auth: bool,
        timeout_ms: int,
        force_ipv4: bool = False,
    ) -> ProviderResponse:
        try:
            response = await asyncio.wait_for(
                self._send(endpoint, payload, requires_auth, timeout_ms, force_ipv4),
                timeout_ms / 1000,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            if self._can_fall_back(force_ipv4):
                return await self._retry_over_ipv4(
                    endpoint, payload, requires_auth, timeout_ms, reason="timeout"
                )
            logger.warning(
                "bakong_request_timeout",
                endpoint=endpoint,
                timeout_ms=timeout_ms,
                ipv4_fallback_tried=force_ipv4,
            )
            suffix = " (including IPv4 fallback)" if force_ipv4 else ""
            raise BakongAPITimeoutException(
                f"Bakong API request timed out after {timeout_ms}ms{suffix}"
            )
        except (httpx.ConnectError, httpx.ReadError, httpx.WriteError) as e:
            if self._can_fall_back(force_ipv4):
                return await self._retry_over_ipv4(
                    endpoint, payload, requires_auth, timeout_ms, reason=type(e).__name__
                )
            logger.error("bakong_network_error", endpoint=endpoint, error=str(e))
            raise BakongNetworkException(str(e) or "Network request failed")
        except httpx.HTTPError as e:
            logger.error("bakong_network_error", endpoint=endpoint, error=str(e))
            raise BakongNetworkException(str(e) or "Network request failed")

        return self._parse_response(endpoint, response)

    async def _retry_over_ipv4(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        requires_auth: bool,
        timeout_ms: int,
        reason: str,
    ) -> ProviderResponse:
        record_ipv4_fallback()
        logger.info("bakong_ipv4_fallback", endpoint=endpoint, reason=reason)
        return await self._request(endpoint, payload, requires_auth, timeout_ms, force_ipv4=True)

    async def _send(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        requires_auth: bool,
        timeout_ms: int,
        force_ipv4: bool,
    ) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        if requires_auth:
            headers["Authorization"] = f"Bearer {self._api_token}"

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_ms / 1000),
            transport=self._build_transport(force_ipv4),
        ) as client:
            return await client.post(
                f"{self.base_url}{endpoint}",
                json=payload,
                headers=headers,
            )

    def _build_transport(self, force_ipv4: bool) -> httpx.AsyncBaseTransport | None:
        if force_ipv4:
            return self._ipv4_transport or httpx.AsyncHTTPTransport(
                local_address=IPV4_LOCAL_ADDRESS
            )
        return self._transport

    def _parse_response(self, endpoint: str, response: httpx.Response) -> ProviderResponse:
        try:
            result = response.json()
        except ValueError:
            logger.warning(
                "bakong_invalid_response",
                endpoint=endpoint,
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise BakongInvalidResponseException(response.status_code)

        if not isinstance(result, dict):
            raise BakongInvalidResponseException(response.status_code)

        if response.is_error and "responseCode" not in result:
            logger.warning(
                "bakong_http_error",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            return {
                "responseCode": -1,
                "errorCode": response.status_code,
                "responseMessage": f"Bakong API request failed (HTTP {response.status_code})",
                "data": result,
            }

        return result

    def _can_fall_back(self, force_ipv4: bool) -> bool:
        return self.enable_ipv4_fallback and not force_ipv4

    @staticmethod
    def _failure(error_code: str, message: str) -> ProviderResponse:
        return {
            "responseCode": -1,
            "errorCode": error_code,
            "responseMessage": message,
        }

    async def _sleep(self, ms: int) -> None:
        await asyncio.sleep(ms / 1000)

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def request_token(
        self,
        email: str,
        organization: str,
        project: str,
    ) -> ProviderResponse:
        return await self.post(
            "/v1/request_token",
            {"email": email, "organization": organization, "project": project},
        )

    async def verify_token(self, code: str) -> ProviderResponse:
        return await self.post("/v1/verify", {"code": code})

    async def renew_token(self, email: str) -> ProviderResponse:
        return await self.post("/v1/renew_token", {"email": email})

    async def generate_deeplink(
        self,
        qr_string: str,
        source_info: Optional[Dict[str, str]] = None,
    ) -> ProviderResponse:
        return await self.post(
            "/v1/generate_deeplink_by_qr",
            {"qr": qr_string, "sourceInfo": source_info or DEFAULT_SOURCE_INFO},
            requires_auth=False,
            timeout_ms=self.deeplink_timeout_ms,
        )

    async def check_transaction_by_md5(self, md5: str) -> ProviderResponse:
        return await self.post_with_retry(
            "/v1/check_transaction_by_md5",
            {"md5": md5},
            requires_auth=True,
            timeout_ms=self.status_timeout_ms,
        )

    async def check_transaction_by_hash(self, full_hash: str) -> ProviderResponse:
        return await self.post_with_retry(
            "/v1/check_transaction_by_hash",
            {"hash": full_hash},
            requires_auth=True,
            timeout_ms=self.status_timeout_ms,
        )

    async def check_transaction_by_short_hash(
        self,
        short_hash: str,
        amount: float,
        currency: str,
    ) -> ProviderResponse:
        return await self.post_with_retry(
            "/v1/check_transaction_by_short_hash",
            {"hash": short_hash, "amount": amount, "currency": currency},
            requires_auth=True,
            timeout_ms=self.status_timeout_ms,
        )

    async def check_bakong_account(self, account_id: str) -> ProviderResponse:
        return await self.post(
            "/v1/check_bakong_account",
            {"accountId": account_id},
            requires_auth=True,
        )


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value
