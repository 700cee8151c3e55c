"""Server information and route planner models of the Lavalink REST API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import DecodeError


def _mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(f"expected an object, got {type(data).__name__}")
    return data


def _get(data: Mapping[str, Any], key: str, kind: type, *, optional: bool = False) -> Any:
    value = data.get(key)
    if value is None:
        if optional:
            return None
        raise DecodeError(f"missing field {key!r}")
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise DecodeError(f"field {key!r} must be of type {kind.__name__}")
    return value


def _uint8(data: Mapping[str, Any], key: str) -> int:
    value = _get(data, key, int)
    if not 0 <= value <= 0xFF:
        raise DecodeError(f"field {key!r} must be between 0 and 255")
    return value


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    if key not in data:
        raise DecodeError(f"missing field {key!r}")
    value = data[key]
    if not isinstance(value, list):
        raise DecodeError(f"field {key!r} must be a list")
    return value


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    values = _list(data, key)
    if not all(isinstance(item, str) for item in values):
        raise DecodeError(f"field {key!r} must be a list of strings")
    return list(values)


def _enum(kind: type[Enum], value: Any) -> Any:
    try:
        return kind(value)
    except ValueError:
        raise DecodeError(f"unknown {kind.__name__} {value!r}") from None


@dataclass
class Version:
    """The version of a Lavalink server."""

    semver: str
    major: int
    minor: int
    patch: int
    pre_release: str | None = None
    build: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Version:
        data = _mapping(data)
        return cls(
            semver=_get(data, "semver", str),
            major=_uint8(data, "major"),
            minor=_uint8(data, "minor"),
            patch=_uint8(data, "patch"),
            pre_release=_get(data, "preRelease", str, optional=True),
            build=_get(data, "build", str, optional=True),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "semver": self.semver,
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "preRelease": self.pre_release,
            "build": self.build,
        }


@dataclass
class Git:
    """Git information about the build of a Lavalink server."""

    commit: str
    branch: str
    commit_time: int

    @classmethod
    def from_dict(cls, data: Any) -> Git:
        data = _mapping(data)
        return cls(
            commit=_get(data, "commit", str),
            branch=_get(data, "branch", str),
            commit_time=_get(data, "commitTime", int),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"commit": self.commit, "branch": self.branch, "commitTime": self.commit_time}


@dataclass
class Plugin:
    """A plugin loaded by the Lavalink server."""

    name: str
    version: str

    @classmethod
    def from_dict(cls, data: Any) -> Plugin:
        data = _mapping(data)
        return cls(name=_get(data, "name", str), version=_get(data, "version", str))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


@dataclass
class Info:
    """Information about a Lavalink server."""

    version: Version
    build_time: int
    git: Git
    jvm: str
    lavaplayer: str
    source_managers: list[str] = field(default_factory=list)
    filters: list[str] = field(default_factory=list)
    plugins: list[Plugin] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Info:
        data = _mapping(data)
        return cls(
            version=Version.from_dict(_get(data, "version", Mapping)),
            build_time=_get(data, "buildTime", int),
            git=Git.from_dict(_get(data, "git", Mapping)),
            jvm=_get(data, "jvm", str),
            lavaplayer=_get(data, "lavaplayer", str),
            source_managers=_str_list(data, "sourceManagers"),
            filters=_str_list(data, "filters"),
            plugins=[Plugin.from_dict(item) for item in _list(data, "plugins")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version.to_dict(),
            "buildTime": self.build_time,
            "git": self.git.to_dict(),
            "jvm": self.jvm,
            "lavaplayer": self.lavaplayer,
            "sourceManagers": list(self.source_managers),
            "filters": list(self.filters),
            "plugins": [plugin.to_dict() for plugin in self.plugins],
        }


class IPBlockType(Enum):
    """The address family of an IP block, as named on the wire."""

    INET4 = "Inet4Address"
    INET6 = "Inet6Address"


@dataclass
class IPBlock:
    """An IP block used by the route planner."""

    type: IPBlockType
    size: str

    @classmethod
    def from_dict(cls, data: Any) -> IPBlock:
        data = _mapping(data)
        return cls(
            type=_enum(IPBlockType, _get(data, "type", str)),
            size=_get(data, "size", str),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "size": self.size}

    def __str__(self) -> str:
        return self.size


@dataclass
class FailingAddress:
    """An address the route planner marked as failing."""

    failing_address: str
    failing_timestamp: int
    failing_time: str

    @classmethod
    def from_dict(cls, data: Any) -> FailingAddress:
        data = _mapping(data)
        return cls(
            failing_address=_get(data, "failingAddress", str),
            failing_timestamp=_get(data, "failingTimestamp", int),
            failing_time=_get(data, "failingTime", str),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "failingAddress": self.failing_address,
            "failingTimestamp": self.failing_timestamp,
            "failingTime": self.failing_time,
        }


class RoutePlannerKind(Enum):
    """The class of a route planner, as named on the wire."""

    ROTATING = "RotatingIpRoutePlanner"
    NANO = "NanoIpRoutePlanner"
    ROTATING_NANO = "RotatingNanoIpRoutePlanner"
    BALANCING = "BalancingIpRoutePlanner"


_KIND_FIELDS: dict[RoutePlannerKind, tuple[tuple[str, str], ...]] = {
    RoutePlannerKind.ROTATING: (
        ("rotate_index", "rotateIndex"),
        ("ip_index", "ipIndex"),
        ("current_address", "currentAddress"),
    ),
    RoutePlannerKind.NANO: (("current_address_index", "currentAddressIndex"),),
    RoutePlannerKind.ROTATING_NANO: (
        ("current_address_index", "currentAddressIndex"),
        ("block_index", "blockIndex"),
    ),
    RoutePlannerKind.BALANCING: (),
}


@dataclass
class RoutePlanner:
    """The status of the route planner; which extra fields are set depends on its kind."""

    kind: RoutePlannerKind
    ip_block: IPBlock
    failing_addresses: list[FailingAddress] = field(default_factory=list)
    rotate_index: str | None = None
    ip_index: str | None = None
    current_address: str | None = None
    current_address_index: str | None = None
    block_index: str | None = None

    def __post_init__(self) -> None:
        missing = [attr for attr, _ in _KIND_FIELDS[self.kind] if getattr(self, attr) is None]
        if missing:
            raise ValueError(f"{self.kind.value} requires {', '.join(missing)}")

    @classmethod
    def from_dict(cls, data: Any) -> RoutePlanner:
        data = _mapping(data)
        if len(data) != 1:
            raise DecodeError("expected an object holding exactly one route planner class")
        ((name, details),) = data.items()
        kind = _enum(RoutePlannerKind, name)
        details = _mapping(details)
        extra = {attr: _get(details, wire, str) for attr, wire in _KIND_FIELDS[kind]}
        return cls(
            kind=kind,
            ip_block=IPBlock.from_dict(_get(details, "ipBlock", Mapping)),
            failing_addresses=[
                FailingAddress.from_dict(item) for item in _list(details, "failingAddresses")
            ],
            **extra,
        )

    def to_dict(self) -> dict[str, Any]:
        details: dict[str, Any] = {
            "ipBlock": self.ip_block.to_dict(),
            "failingAddresses": [address.to_dict() for address in self.failing_addresses],
        }
        for attr, wire in _KIND_FIELDS[self.kind]:
            details[wire] = getattr(self, attr)
        return {self.kind.value: details}