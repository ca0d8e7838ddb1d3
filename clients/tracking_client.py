# Tracking Provider Client
# 17TRACK v2 REST API: register numbers, fetch track info, look up one number.
# Docs: https://asset.17track.net/api/document/v2_en/index.html

from typing import Any, Dict, List, Optional, Union

import httpx

from config import HTTP_TIMEOUT_SECONDS, TRACK17_API_URL
from errors import TrackingAuthError, TrackingRateLimitedError, TransientTrackingError
from models.tracking import ProviderRejected, TrackingSnapshot
from utils.logger import log_api_call, log_api_result, log_error


class Track17Client:
    """
    Client for the 17TRACK API. Each lookup is a fresh provider call; nothing is cached.

    Raises:
        TrackingAuthError: Missing or invalid API key (HTTP 401)
        TrackingRateLimitedError: HTTP 429
        TransientTrackingError: Network failures, 5xx, or a non-zero API code
    """

    SERVICE = "tracking_provider"

    def __init__(
        self,
        api_key: str,
        base_url: str = TRACK17_API_URL,
        http_client: Optional[httpx.Client] = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        normalizer=None,
    ):
        from agents.tracking_normalizer import TrackingNormalizer

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.http = http_client or httpx.Client(timeout=timeout)
        self.normalizer = normalizer or TrackingNormalizer()

    def _post(self, path: str, body: List[Dict[str, Any]]) -> Dict[str, Any]:
        if not self.api_key:
            raise TrackingAuthError("17Track API key is required")

        try:
            response = self.http.post(
                f"{self.base_url}/{path}",
                json=body,
                headers={"Content-Type": "application/json", "17token": self.api_key},
            )
        except httpx.HTTPError as e:
            log_error(f"17Track {path} request failed", e)
            raise TransientTrackingError(str(e)) from e

        if response.status_code == 401:
            log_api_result(self.SERVICE, path, False, "HTTP 401")
            raise TrackingAuthError("Invalid 17Track API key")
        if response.status_code == 429:
            log_api_result(self.SERVICE, path, False, "HTTP 429")
            raise TrackingRateLimitedError("Rate limit exceeded. Please try again later.")
        if response.status_code >= 400:
            log_api_result(self.SERVICE, path, False, f"HTTP {response.status_code}")
            raise TransientTrackingError(f"17Track HTTP error: {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise TransientTrackingError("17Track returned invalid JSON") from e

        if not isinstance(result, dict) or result.get("code") != 0:
            code = result.get("code") if isinstance(result, dict) else None
            log_api_result(self.SERVICE, path, False, f"API code {code}")
            raise TransientTrackingError(f"17Track API error: {code}")

        return result

    def register(self, tracking_numbers: List[str]) -> Dict[str, List[Any]]:
        """
        Register tracking numbers with the provider.
        Must be done before track info is available for new numbers.

        Returns:
            {"accepted": [number, ...], "rejected": [ProviderRejected, ...]}
        """
        log_api_call(self.SERVICE, "register", {"numbers": tracking_numbers})
        result = self._post(
            "register",
            [{"number": n, "auto_detection": True} for n in tracking_numbers],
        )
        data = result.get("data") or {}
        accepted = [a.get("number") for a in data.get("accepted") or []]
        rejected = [
            ProviderRejected(
                tracking_number=r.get("number", ""),
                reason=(r.get("error") or {}).get("message", "rejected"),
                code=(r.get("error") or {}).get("code"),
            )
            for r in data.get("rejected") or []
        ]
        log_api_result(self.SERVICE, "register", True, f"accepted: {len(accepted)}, rejected: {len(rejected)}")
        return {"accepted": accepted, "rejected": rejected}

    def get_track_info(self, tracking_numbers: List[str]) -> Dict[str, Any]:
        """Fetch the raw track info payload for registered numbers."""
        log_api_call(self.SERVICE, "gettrackinfo", {"numbers": tracking_numbers})
        result = self._post("gettrackinfo", [{"number": n} for n in tracking_numbers])
        data = result.get("data") or {}
        log_api_result(
            self.SERVICE,
            "gettrackinfo",
            True,
            f"accepted: {len(data.get('accepted') or [])}, rejected: {len(data.get('rejected') or [])}",
        )
        return result

    def lookup(self, tracking_number: str) -> Union[TrackingSnapshot, ProviderRejected, None]:
        """
        Look up one tracking number.

        Returns:
            A TrackingSnapshot, ProviderRejected if the provider refused the number,
            or None if the provider returned nothing for it.
        """
        payload = self.get_track_info([tracking_number])
        return self.normalizer.normalize_response(payload, tracking_number)
