"""Item models returned by the BSN.cloud and rDWS APIs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

ItemRef = Union[int, str]


@dataclass(slots=True, frozen=True)
class Item:
    """
    A single entry of a preview set.

    `item_id` is an integer for cloud resources and a storage path for files
    on a player.
    """

    item_id: ItemRef
    name: str

    size: Optional[int] = None
    type: Optional[str] = None
    path: Optional[str] = None


@dataclass(slots=True)
class ContentFile:
    """A file in the network's content library."""

    content_id: int
    name: str
    type: str = "File"

    media_type: Optional[str] = None
    file_size: Optional[int] = None
    virtual_path: Optional[str] = None
    mime_type: Optional[str] = None
    file_extension: Optional[str] = None
    creation_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None

    def to_item(self) -> Item:
        type_label = self.type
        if self.media_type:
            type_label = f"{self.type} ({self.media_type})"
        return Item(
            item_id=self.content_id,
            name=self.name,
            size=self.file_size,
            type=type_label,
            path=self.virtual_path,
        )


@dataclass(slots=True)
class Device:
    """A player registered in the network."""

    device_id: int
    serial: str
    model: str = ""

    family: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    group_name: Optional[str] = None
    registration_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.name or "Unknown"

    def to_item(self) -> Item:
        return Item(
            item_id=self.device_id,
            name=self.display_name,
            type=self.model or None,
            path=self.serial,
        )


@dataclass(slots=True)
class DeviceOperation:
    """An operation (reboot, reprovision, update, ...) recorded for a device."""

    operation_id: int
    operation_type: str
    status: str

    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error: Optional[str] = None
    progress: Optional[int] = None


@dataclass(slots=True)
class DiagnosticsInfo:
    """Network diagnostics reported by a player via rDWS."""

    gateway: Optional[str] = None
    dns: list[str] = field(default_factory=list)
    connected_to_router: bool = False
    connected_to_internet: bool = False
    external_ip_address: Optional[str] = None


@dataclass(slots=True)
class PlayerFile:
    """A file or directory on a player's storage."""

    name: str
    path: str
    type: str = "file"
    size: Optional[int] = None
    mime: Optional[str] = None

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"

    def to_item(self) -> Item:
        return Item(
            item_id=self.path,
            name=self.name,
            size=self.size,
            type=self.type,
            path=self.path,
        )


@dataclass(slots=True)
class LocalDwsInfo:
    """State of the local Diagnostic Web Server on a player."""

    enabled: bool


@dataclass(slots=True)
class Presentation:
    """A presentation authored in the network."""

    presentation_id: int
    name: str

    type: Optional[str] = None
    publish_state: Optional[str] = None
    description: Optional[str] = None
    creation_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None

    def to_item(self) -> Item:
        type_label = self.type
        if self.publish_state:
            type_label = f"{self.type or 'Presentation'} ({self.publish_state})"
        return Item(item_id=self.presentation_id, name=self.name, type=type_label)


@dataclass(slots=True)
class DeviceGroup:
    """A regular device group. Deleting a group ungroups its devices."""

    group_id: int
    name: str
    link: Optional[str] = None

    def to_item(self) -> Item:
        return Item(item_id=self.group_id, name=self.name, type="Group", path=self.link)
