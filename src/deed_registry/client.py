"""
RegistryClient SDK: sync client for the deed registry API.

Used by notaries, front-office tools and scripts to look up deeds, reserve
deed numbers and check a deed against its sealed ledger digest.
"""

import json
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

import httpx


@dataclass
class ClientDeed:
    """Deed info returned by the SDK."""

    deed_number: str
    land_number: str
    owner_nic: str
    registration_date: Optional[date]
    deed_type: str
    status: str
    previous_deed_number: Optional[str] = None
    previous_owner_nic: Optional[str] = None
    notes: Optional[str] = None
    last_verified_at: Optional[datetime] = None
    last_verification_valid: Optional[bool] = None


@dataclass
class ClientVerificationResult:
    """Result of verify() call."""

    deed_number: str
    is_valid: bool
    current_digest: str = ""
    recorded_digest: str = ""
    sequence_number: Optional[int] = None
    recorded_at: Optional[datetime] = None
    code: str = ""
    message: str = ""


class RegistryClient:
    """Synchronous HTTP client for the deed registry."""

    def __init__(
        self,
        server_url: str = "http://localhost:8080",
        api_key: Optional[str] = None,
        user: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_base: float = 0.5,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_key = api_key
        self.user = user
        self.max_retries = max_retries
        self.retry_backoff_base = retry_backoff_base
        self._http = httpx.Client(base_url=self.server_url, timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {}
        if self.api_key:
            headers["X-Registry-Api-Key"] = self.api_key
        if self.user:
            headers["X-Registry-User"] = self.user
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Central HTTP method with retry and structured error handling.

        Retries on timeouts, transport errors, 5xx and 429. Other 4xx
        responses are returned immediately with the server's message.
        """
        last_error = None
        for attempt in range(self.max_retries):
            try:
                resp = getattr(self._http, method)(path, headers=self._headers(), **kwargs)
                if resp.status_code >= 500 or resp.status_code == 429:
                    last_error = f"HTTP {resp.status_code}"
                    if attempt < self.max_retries - 1:
                        time.sleep(self.retry_backoff_base * (2 ** attempt))
                        continue
                    return {
                        "error": f"Server error: {resp.status_code}",
                        "code": "SERVER_ERROR",
                    }
                if resp.status_code >= 400:
                    try:
                        detail = resp.json().get("detail", "")
                    except (json.JSONDecodeError, AttributeError):
                        detail = ""
                    return {
                        "error": detail or f"Client error: {resp.status_code}",
                        "code": "NOT_FOUND" if resp.status_code == 404 else "CLIENT_ERROR",
                    }
                return resp.json()
            except httpx.TimeoutException:
                last_error = "timeout"
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_backoff_base * (2 ** attempt))
                    continue
            except httpx.HTTPError as e:
                last_error = str(e)
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_backoff_base * (2 ** attempt))
                    continue
            except json.JSONDecodeError:
                return {"error": "Invalid JSON response", "code": "JSON_ERROR"}

        return {
            "error": f"All {self.max_retries} retries exhausted: {last_error}",
            "code": "CONNECTION_ERROR",
        }

    @staticmethod
    def _parse_deed(data: dict) -> ClientDeed:
        registration_date = None
        if data.get("registration_date"):
            try:
                registration_date = date.fromisoformat(data["registration_date"])
            except (ValueError, TypeError):
                pass

        last_verified_at = None
        if data.get("last_verified_at"):
            try:
                last_verified_at = datetime.fromisoformat(data["last_verified_at"])
            except (ValueError, TypeError):
                pass

        return ClientDeed(
            deed_number=data.get("deed_number", ""),
            land_number=data.get("land_number", ""),
            owner_nic=data.get("owner_nic", ""),
            registration_date=registration_date,
            deed_type=data.get("deed_type", ""),
            status=data.get("status", ""),
            previous_deed_number=data.get("previous_deed_number"),
            previous_owner_nic=data.get("previous_owner_nic"),
            notes=data.get("notes"),
            last_verified_at=last_verified_at,
            last_verification_valid=data.get("last_verification_valid"),
        )

    # ── Deeds ──

    def get_deed(self, deed_number: str) -> Optional[ClientDeed]:
        data = self._request("get", f"/deeds/{deed_number}")
        if "error" in data:
            return None
        return self._parse_deed(data)

    def land_history(self, land_number: str) -> list[ClientDeed]:
        data = self._request("get", f"/lands/{land_number}/history")
        if isinstance(data, dict) and "error" in data:
            return []
        return [self._parse_deed(d) for d in data]

    def next_deed_number(self, previous: Optional[str] = None) -> Optional[str]:
        params = {"previous": previous} if previous else None
        data = self._request("get", "/deeds/next-id", params=params)
        return data.get("deed_number")

    # ── Integrity ──

    def verify(self, deed_number: str) -> ClientVerificationResult:
        """Ask the server to recompute a deed's digest and compare it to the ledger."""
        data = self._request("get", f"/deeds/{deed_number}/verify")
        if "error" in data:
            return ClientVerificationResult(
                deed_number=deed_number,
                is_valid=False,
                code=data.get("code", ""),
                message=data.get("error", ""),
            )

        recorded_at = None
        if data.get("recorded_at"):
            try:
                recorded_at = datetime.fromisoformat(data["recorded_at"])
            except (ValueError, TypeError):
                pass

        is_valid = data.get("is_valid", False)
        return ClientVerificationResult(
            deed_number=data.get("deed_number", deed_number),
            is_valid=is_valid,
            current_digest=data.get("current_digest", ""),
            recorded_digest=data.get("recorded_digest", ""),
            sequence_number=data.get("sequence_number"),
            recorded_at=recorded_at,
            code="VALID" if is_valid else "TAMPERED",
            message=(
                "Deed matches its sealed digest" if is_valid
                else "Deed data differs from its sealed digest"
            ),
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RegistryClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
