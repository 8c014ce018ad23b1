"""HTTP client for the portfolio backend."""
from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import httpx

from models.content import Credential
from utils.exceptions import ServerError, TransportError

log = logging.getLogger(__name__)

ADMIN_LOGIN_PATH = "/auth/admin/login"
PIN_LOGIN_PATH = "/auth/login"

FilePart = Tuple[str, bytes, str]


def build_multipart(
    fields: Mapping[str, str],
    credentials: Iterable[Mapping[str, str]] = (),
    image_path: Optional[Path | str] = None,
) -> Tuple[Dict[str, str], Dict[str, FilePart]]:
    """Return ``(data, files)`` for an httpx multipart request.

    Credentials are sent as ``credentials[i][role|email|password]`` with
    ``i`` the entry's position; entries missing a sub-field are skipped.
    """
    data: Dict[str, str] = dict(fields)
    for index, cred in enumerate(credentials):
        entry = Credential(
            role=cred.get("role") or "",
            email=cred.get("email") or "",
            password=cred.get("password") or "",
        )
        if not entry.is_complete():
            continue
        for part, value in entry.as_dict().items():
            data[f"credentials[{index}][{part}]"] = value

    files: Dict[str, FilePart] = {}
    if image_path:
        path = Path(image_path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        files["image"] = (path.name, path.read_bytes(), content_type)
    return data, files


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


class AdminApiClient:
    """Thin wrapper over :class:`httpx.Client` speaking the backend's REST API.

    Non-2xx replies raise :class:`ServerError` when the body carries a
    ``message`` and :class:`TransportError` otherwise; connection problems
    raise :class:`TransportError`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )
        self.set_token(token)

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self._client.headers["Authorization"] = f"Bearer {token}"
        else:
            self._client.headers.pop("Authorization", None)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AdminApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- Low level -----------------------------------------------------------

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            log.warning("%s %s timed out: %s", method, path, exc)
            raise TransportError("Request timed out") from exc
        except httpx.RequestError as exc:
            log.warning("%s %s failed: %s", method, path, exc)
            raise TransportError("Could not reach the server") from exc

        if response.is_error:
            message = _error_message(response)
            log.warning(
                "%s %s returned %s%s",
                method,
                path,
                response.status_code,
                f": {message}" if message else "",
            )
            if message:
                raise ServerError(message, response.status_code)
            raise TransportError(
                f"Server returned HTTP {response.status_code}",
                response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    # -- Collections ---------------------------------------------------------

    def list(self, endpoint: str) -> Any:
        return self._json(self.request("GET", endpoint))

    def create(
        self,
        endpoint: str,
        fields: Mapping[str, str],
        *,
        credentials: Iterable[Mapping[str, str]] = (),
        image_path: Optional[Path | str] = None,
    ) -> Any:
        data, files = build_multipart(fields, credentials, image_path)
        return self._json(self._send_form("POST", endpoint, data, files))

    def update(
        self,
        endpoint: str,
        entity_id: str,
        fields: Mapping[str, str],
        *,
        credentials: Iterable[Mapping[str, str]] = (),
        image_path: Optional[Path | str] = None,
    ) -> Any:
        data, files = build_multipart(fields, credentials, image_path)
        path = f"{endpoint}/{entity_id}"
        return self._json(self._send_form("PUT", path, data, files))

    def delete(self, endpoint: str, entity_id: str) -> None:
        self.request("DELETE", f"{endpoint}/{entity_id}")

    def _send_form(
        self,
        method: str,
        path: str,
        data: Dict[str, str],
        files: Dict[str, FilePart],
    ) -> httpx.Response:
        # Text values go in as filename-less parts so the body is multipart
        # even when no image is attached.
        parts: List[Tuple[str, Any]] = [
            (name, (None, value.encode("utf-8"))) for name, value in data.items()
        ]
        parts.extend(files.items())
        return self.request(method, path, files=parts)

    # -- Auth ----------------------------------------------------------------

    def admin_login(self, email: str, password: str) -> Any:
        return self._json(
            self.request(
                "POST", ADMIN_LOGIN_PATH, json={"email": email, "password": password}
            )
        )

    def rotate_pin(self, pin: str) -> Any:
        return self._json(self.request("POST", PIN_LOGIN_PATH, json={"pin": pin}))


__all__ = [
    "ADMIN_LOGIN_PATH",
    "AdminApiClient",
    "PIN_LOGIN_PATH",
    "build_multipart",
]
