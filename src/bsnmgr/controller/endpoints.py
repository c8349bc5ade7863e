"""Endpoint paths for the BSN.cloud REST and rDWS APIs."""

from __future__ import annotations

NETWORKS: str = "Self/Networks"
SESSION_NETWORK: str = "Self/Session/Network"

CONTENT: str = "Content"
CONTENT_ITEM: str = "Content/{content_id}"
CONTENT_DOWNLOAD: str = "Content/{content_id}/Download"

PRESENTATIONS: str = "Presentations"

GROUP_BY_ID: str = "Groups/Regular/{group_id}"

DEVICE_BY_ID: str = "Devices/{device_id}"
DEVICE_BY_SERIAL: str = "Devices/{serial}"
DEVICE_OPERATIONS: str = "Devices/{device_id}/Operations"

RDWS_DIAGNOSTICS: str = "diagnostics/"
RDWS_FILES: str = "files/{path}"
RDWS_LOCAL_DWS: str = "control/local-dws/"

PAGE_SIZE: int = 100
