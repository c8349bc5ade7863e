"""BSN.cloud REST / rDWS controller (internal use only)."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import quote

import requests

from bsnmgr.auth import TokenClient
from bsnmgr.config import BsnConfig
from bsnmgr.errors import (
    ApiError,
    BsnMgrError,
    HttpErrorInfo,
    NetworkError,
    RateLimitError,
    ValidationError,
    map_http_error,
)
from bsnmgr.models import (
    BulkCommitResult,
    ContentFile,
    Device,
    DeviceGroup,
    DeviceOperation,
    DiagnosticsInfo,
    ItemFailure,
    LocalDwsInfo,
    Network,
    PlayerFile,
    Presentation,
)
from bsnmgr.util.logging import get_logger
from bsnmgr.util.time import parse_optional_rfc3339

from . import endpoints

T = TypeVar("T")

logger = get_logger(__name__)

_DOWNLOAD_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class BsnController:
    """
    BSN.cloud API controller (internal only).

    Notes:
        - Every call is authenticated with a bearer token from TokenClient.
        - The active network lives in the server-side session; callers bind it
          with set_network_by_id() before content/device calls.
    """

    def __init__(
        self,
        config: BsnConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        self._session = session if session is not None else requests.Session()
        self._retry_policy = _RetryPolicy(max_retries=config.retry_count)
        self._tokens = TokenClient(config, self._session)

    @property
    def config(self) -> BsnConfig:
        return self._config

    # ----------------------------
    # Session
    # ----------------------------
    def authenticate(self) -> None:
        """Acquire a fresh access token."""
        self._tokens.fetch()

    def list_networks(self) -> list[Network]:
        data = self._request("GET", self._config.bsn_url(endpoints.NETWORKS))
        if isinstance(data, dict):
            data = data.get("items", [])
        if not isinstance(data, list):
            return []
        return [_network_from_dict(d) for d in data if isinstance(d, dict)]

    def set_network_by_id(self, network_id: int) -> None:
        if not isinstance(network_id, int) or network_id <= 0:
            raise ValidationError(
                "network ID must be positive",
                details={"network_id": network_id},
            )
        self._request(
            "PUT",
            self._config.bsn_url(endpoints.SESSION_NETWORK),
            json_body={"id": network_id},
            expect_json=False,
        )

    # ----------------------------
    # Content
    # ----------------------------
    def list_content(
        self,
        filter_expr: Optional[str] = None,
        *,
        page_size: int = endpoints.PAGE_SIZE,
    ) -> list[ContentFile]:
        """List content files, following pagination markers."""
        return self._list_paged(endpoints.CONTENT, filter_expr, page_size, _content_from_dict)

    def get_content(self, content_id: int) -> ContentFile:
        _require_positive(content_id, "content_id")
        url = self._config.bsn_url(endpoints.CONTENT_ITEM.format(content_id=content_id))
        return _content_from_dict(self._request("GET", url) or {})

    def delete_content(self, filter_expr: str) -> BulkCommitResult:
        """Delete every content file matching filter_expr in one call."""
        return self._delete_by_filter(endpoints.CONTENT, filter_expr)

    def download_content(
        self,
        content_id: int,
        local_path: str,
        *,
        overwrite: bool = False,
    ) -> int:
        """Stream a content file to local_path. Returns the number of bytes written."""
        _require_positive(content_id, "content_id")
        if not overwrite and os.path.exists(local_path):
            raise ValidationError(
                "Destination file exists and overwrite is False",
                details={"local_path": local_path},
            )

        url = self._config.bsn_url(endpoints.CONTENT_DOWNLOAD.format(content_id=content_id))
        resp = self._execute(lambda: self._send("GET", url, stream=True))

        parent_dir = os.path.dirname(local_path)
        if parent_dir:
            os.makedirs(parent_dir, exist_ok=True)

        written = 0
        try:
            with open(local_path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=_DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
        except requests.RequestException as exc:
            raise NetworkError("Download interrupted", cause=exc) from exc
        finally:
            resp.close()

        logger.debug("content_downloaded", content_id=content_id, bytes=written)
        return written

    # ----------------------------
    # Presentations
    # ----------------------------
    def list_presentations(
        self,
        filter_expr: Optional[str] = None,
        *,
        page_size: int = endpoints.PAGE_SIZE,
    ) -> list[Presentation]:
        return self._list_paged(
            endpoints.PRESENTATIONS, filter_expr, page_size, _presentation_from_dict
        )

    def delete_presentations(self, filter_expr: str) -> BulkCommitResult:
        """Delete every presentation matching filter_expr in one call."""
        return self._delete_by_filter(endpoints.PRESENTATIONS, filter_expr)

    # ----------------------------
    # Groups
    # ----------------------------
    def get_group(self, group_id: int) -> DeviceGroup:
        _require_positive(group_id, "group_id")
        url = self._config.bsn_url(endpoints.GROUP_BY_ID.format(group_id=group_id))
        return _group_from_dict(self._request("GET", url) or {})

    def delete_group(self, group_id: int) -> None:
        _require_positive(group_id, "group_id")
        url = self._config.bsn_url(endpoints.GROUP_BY_ID.format(group_id=group_id))
        self._request("DELETE", url, expect_json=False)

    # ----------------------------
    # Devices
    # ----------------------------
    def get_device(self, serial: str) -> Device:
        _require_text(serial, "serial")
        url = self._config.bsn_url(endpoints.DEVICE_BY_SERIAL.format(serial=quote(serial, safe="")))
        return _device_from_dict(self._request("GET", url) or {})

    def get_device_by_id(self, device_id: int) -> Device:
        _require_positive(device_id, "device_id")
        url = self._config.bsn_url(endpoints.DEVICE_BY_ID.format(device_id=device_id))
        return _device_from_dict(self._request("GET", url) or {})

    def delete_device(self, device_id: int) -> None:
        _require_positive(device_id, "device_id")
        url = self._config.bsn_url(endpoints.DEVICE_BY_ID.format(device_id=device_id))
        self._request("DELETE", url, expect_json=False)

    def get_device_operations(self, device_id: int) -> list[DeviceOperation]:
        _require_positive(device_id, "device_id")
        url = self._config.bsn_url(endpoints.DEVICE_OPERATIONS.format(device_id=device_id))
        data = self._request("GET", url) or {}
        items = data.get("items", []) if isinstance(data, dict) else data
        return [_operation_from_dict(d) for d in items or [] if isinstance(d, dict)]

    # ----------------------------
    # rDWS (player-side, addressed by serial)
    # ----------------------------
    def get_diagnostics(self, serial: str) -> DiagnosticsInfo:
        result = self._rdws("GET", endpoints.RDWS_DIAGNOSTICS, serial)
        return DiagnosticsInfo(
            gateway=_opt_str(result.get("gateway")),
            dns=[d for d in result.get("dns", []) or [] if isinstance(d, str)],
            connected_to_router=bool(result.get("connectedToRouter", False)),
            connected_to_internet=bool(result.get("connectedToInternet", False)),
            external_ip_address=_opt_str(result.get("externalIpAddress")),
        )

    def list_player_files(self, serial: str, path: str) -> list[PlayerFile]:
        _require_text(path, "path")
        rel = _player_path(path).rstrip("/") + "/"
        result = self._rdws("GET", endpoints.RDWS_FILES.format(path=rel), serial)
        entries = result.get("files") or result.get("contents") or []
        return [_player_file_from_dict(e) for e in entries if isinstance(e, dict)]

    def rename_player_file(self, serial: str, path: str, new_name: str) -> bool:
        _require_text(path, "path")
        _require_text(new_name, "new_name")
        result = self._rdws(
            "POST",
            endpoints.RDWS_FILES.format(path=_player_path(path)),
            serial,
            json_body={"data": {"name": new_name}},
        )
        return bool(result.get("success", False))

    def delete_player_file(self, serial: str, path: str) -> bool:
        _require_text(path, "path")
        result = self._rdws("DELETE", endpoints.RDWS_FILES.format(path=_player_path(path)), serial)
        return bool(result.get("success", False))

    def get_local_dws(self, serial: str) -> LocalDwsInfo:
        result = self._rdws("GET", endpoints.RDWS_LOCAL_DWS, serial)
        return LocalDwsInfo(enabled=bool(result.get("enabled", False)))

    def set_local_dws(self, serial: str, enabled: bool) -> bool:
        result = self._rdws(
            "PUT",
            endpoints.RDWS_LOCAL_DWS,
            serial,
            json_body={"data": {"enabled": bool(enabled)}},
        )
        return bool(result.get("success", False))

    # ----------------------------
    # Internals
    # ----------------------------
    def _list_paged(
        self,
        path: str,
        filter_expr: Optional[str],
        page_size: int,
        parse: Callable[[dict[str, Any]], T],
    ) -> list[T]:
        url = self._config.bsn_url(path)
        results: list[T] = []
        marker: Optional[str] = None

        while True:
            params: dict[str, Any] = {"pageSize": page_size}
            if filter_expr:
                params["filter"] = filter_expr
            if marker:
                params["marker"] = marker

            data = self._request("GET", url, params=params) or {}
            for item in data.get("items", []) or []:
                if isinstance(item, dict):
                    results.append(parse(item))

            marker = data.get("nextMarker")
            if not data.get("isTruncated") or not marker:
                break

        return results

    def _delete_by_filter(self, path: str, filter_expr: str) -> BulkCommitResult:
        if not isinstance(filter_expr, str) or not filter_expr.strip():
            raise ValidationError("filter cannot be empty for bulk delete operation")
        data = self._request(
            "DELETE",
            self._config.bsn_url(path),
            params={"filter": filter_expr},
        )
        return _bulk_result_from_dict(data or {})

    def _rdws(
        self,
        method: str,
        path: str,
        serial: str,
        *,
        json_body: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        _require_text(serial, "serial")
        data = self._request(
            method,
            self._config.rdws_url(path),
            params={"destinationType": "player", "destinationName": serial},
            json_body=json_body,
        )
        result = ((data or {}).get("data") or {}).get("result")
        return result if isinstance(result, dict) else {}

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[dict[str, Any]] = None,
        expect_json: bool = True,
    ) -> Any:
        resp = self._execute(
            lambda: self._send(method, url, params=params, json_body=json_body)
        )
        if not expect_json or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(
                "Response is not valid JSON",
                details={"url": url, "status_code": resp.status_code},
                cause=exc,
            ) from exc

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[dict[str, Any]] = None,
        stream: bool = False,
    ) -> requests.Response:
        headers = {
            "Authorization": f"Bearer {self._tokens.get_token()}",
            "Accept": "application/json",
        }
        logger.debug("http_request", method=method, url=url)
        resp = self._session.request(
            method,
            url,
            params=params,
            json=json_body,
            headers=headers,
            timeout=self._config.timeout_sec,
            stream=stream,
        )
        resp.raise_for_status()
        return resp

    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.warning(
                        "request_retry",
                        attempt=attempt + 1,
                        delay_sec=delay,
                        error=type(mapped).__name__,
                    )
                    time.sleep(delay)
                    delay *= 2
                    continue
                if mapped is exc:
                    raise
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, BsnMgrError):
            return exc

        if isinstance(exc, requests.HTTPError) and exc.response is not None:
            info = _response_to_info(exc.response)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
            return NetworkError("Network error", cause=exc)

        if isinstance(exc, OSError):
            return NetworkError("Network error", cause=exc)

        return ApiError("BSN.cloud API error", cause=exc)


def _require_positive(value: Any, field_name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive integer", details={field_name: value})


def _require_text(value: Any, field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} cannot be empty", details={field_name: value})


def _player_path(path: str) -> str:
    return quote(path.strip().lstrip("/"), safe="/:")


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _opt_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _network_from_dict(data: dict[str, Any]) -> Network:
    subscription = data.get("subscription")
    level = subscription.get("level") if isinstance(subscription, dict) else None
    return Network(
        network_id=_opt_int(data.get("id")) or 0,
        name=data.get("name") if isinstance(data.get("name"), str) else "",
        subscription_level=_opt_str(level),
        is_locked_out=bool(data.get("isLockedOut", False)),
        creation_date=parse_optional_rfc3339(data.get("creationDate")),
    )


def _content_from_dict(data: dict[str, Any]) -> ContentFile:
    return ContentFile(
        content_id=_opt_int(data.get("id")) or 0,
        name=data.get("name") if isinstance(data.get("name"), str) else "",
        type=_opt_str(data.get("type")) or "File",
        media_type=_opt_str(data.get("mediaType")),
        file_size=_opt_int(data.get("fileSize")),
        virtual_path=_opt_str(data.get("virtualPath")),
        mime_type=_opt_str(data.get("mimeType")),
        file_extension=_opt_str(data.get("fileExtension")),
        creation_date=parse_optional_rfc3339(data.get("creationDate")),
        last_modified_date=parse_optional_rfc3339(data.get("lastModifiedDate")),
    )


def _presentation_from_dict(data: dict[str, Any]) -> Presentation:
    return Presentation(
        presentation_id=_opt_int(data.get("id")) or 0,
        name=data.get("name") if isinstance(data.get("name"), str) else "",
        type=_opt_str(data.get("type")),
        publish_state=_opt_str(data.get("publishState")),
        description=_opt_str(data.get("description")),
        creation_date=parse_optional_rfc3339(data.get("creationDate")),
        last_modified_date=parse_optional_rfc3339(data.get("lastModifiedDate")),
    )


def _group_from_dict(data: dict[str, Any]) -> DeviceGroup:
    return DeviceGroup(
        group_id=_opt_int(data.get("id")) or 0,
        name=data.get("name") if isinstance(data.get("name"), str) else "",
        link=_opt_str(data.get("link")),
    )

def _device_from_dict(data: dict[str, Any]) -> Device:
    settings = data.get("settings") if isinstance(data.get("settings"), dict) else {}
    group = settings.get("group") if isinstance(settings.get("group"), dict) else {}
    return Device(
        device_id=_opt_int(data.get("id")) or 0,
        serial=data.get("serial") if isinstance(data.get("serial"), str) else "",
        model=_opt_str(data.get("model")) or "",
        family=_opt_str(data.get("family")),
        name=_opt_str(settings.get("name")),
        description=_opt_str(settings.get("description")),
        group_name=_opt_str(group.get("name")),
        registration_date=parse_optional_rfc3339(data.get("registrationDate")),
        last_modified_date=parse_optional_rfc3339(data.get("lastModifiedDate")),
    )


def _operation_from_dict(data: dict[str, Any]) -> DeviceOperation:
    return DeviceOperation(
        operation_id=_opt_int(data.get("id")) or 0,
        operation_type=_opt_str(data.get("operationType")) or "unknown",
        status=_opt_str(data.get("status")) or "unknown",
        created_by=_opt_str(data.get("createdBy")),
        created_at=parse_optional_rfc3339(data.get("createdAt")),
        started_at=parse_optional_rfc3339(data.get("startedAt")),
        completed_at=parse_optional_rfc3339(data.get("completedAt")),
        error=_opt_str(data.get("error")),
        progress=_opt_int(data.get("progress")),
    )


def _player_file_from_dict(data: dict[str, Any]) -> PlayerFile:
    size = _opt_int(data.get("fileSize"))
    stat = data.get("stat")
    if size is None and isinstance(stat, dict):
        size = _opt_int(stat.get("size"))
    return PlayerFile(
        name=data.get("name") if isinstance(data.get("name"), str) else "",
        path=data.get("path") if isinstance(data.get("path"), str) else "",
        type=_opt_str(data.get("type")) or "file",
        size=size,
        mime=_opt_str(data.get("mime")),
    )


def _bulk_result_from_dict(data: dict[str, Any]) -> BulkCommitResult:
    succeeded = [
        ref for ref in (_opt_int(v) for v in data.get("deletedIds", []) or []) if ref is not None
    ]

    failures: list[ItemFailure] = []
    for entry in data.get("errors", []) or []:
        if isinstance(entry, str):
            failures.append(ItemFailure(item_ref=None, message=entry))
        elif isinstance(entry, dict):
            ref = _opt_int(entry.get("id", entry.get("contentId")))
            message = entry.get("message") or entry.get("error") or "unknown error"
            failures.append(ItemFailure(item_ref=ref, message=str(message)))

    return BulkCommitResult(succeeded_ids=succeeded, failures=failures)


def _response_to_info(resp: requests.Response) -> HttpErrorInfo:
    reason = resp.reason if isinstance(resp.reason, str) else None
    message = None
    details: dict[str, Any] = {"url": resp.url}

    try:
        payload = resp.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            message = err.get("message") or None
            if isinstance(err.get("code"), str):
                details["code"] = err["code"]
        elif isinstance(err, str):
            details["code"] = err
        message = message or payload.get("error_description") or payload.get("message") or None

    return HttpErrorInfo(
        status_code=resp.status_code,
        reason=reason,
        message=message if isinstance(message, str) else None,
        details=details,
    )
