"""Audio filters that can be applied to a Lavalink player."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, TypeVar

from .errors import DecodeError

_F = TypeVar("_F", bound="_OptionalFloats")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(f"expected an object, got {type(data).__name__}")
    return data


def _float(data: Mapping[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"field {key!r} must be a number")
    return float(value)


class _OptionalFloats:
    """Filters made only of optional numbers, sent in camelCase and omitted when unset."""

    @classmethod
    def from_dict(cls: type[_F], data: Any) -> _F:
        data = _mapping(data)
        return cls(**{f.name: _float(data, _camel(f.name)) for f in fields(cls)})

    def to_dict(self) -> dict[str, Any]:
        return {
            _camel(f.name): getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class Equalizer:
    """The gain of one of the 15 bands (0 to 14); gain ranges from -0.25 to 1.0."""

    band: int
    gain: float

    def __post_init__(self) -> None:
        if not 0 <= self.band <= 255:
            raise ValueError(f"band must fit in an unsigned byte, got {self.band}")

    @classmethod
    def from_dict(cls, data: Any) -> Equalizer:
        data = _mapping(data)
        band = data.get("band")
        if band is None:
            raise DecodeError("missing field 'band'")
        if isinstance(band, bool) or not isinstance(band, int) or not 0 <= band <= 255:
            raise DecodeError("field 'band' must be an integer from 0 to 255")
        gain = _float(data, "gain")
        if gain is None:
            raise DecodeError("missing field 'gain'")
        return cls(band=band, gain=gain)

    def to_dict(self) -> dict[str, Any]:
        return {"band": self.band, "gain": self.gain}


@dataclass
class Karaoke(_OptionalFloats):
    """Eliminates part of a band, usually targeting vocals."""

    level: float | None = None
    mono_level: float | None = None
    filter_band: float | None = None
    filter_width: float | None = None


@dataclass
class Timescale(_OptionalFloats):
    """Changes the speed, pitch and rate; all default to 1.0 on the node."""

    speed: float | None = None
    pitch: float | None = None
    rate: float | None = None


@dataclass
class Tremolo(_OptionalFloats):
    """Quickly oscillates the volume."""

    frequency: float | None = None
    depth: float | None = None


@dataclass
class Vibrato(_OptionalFloats):
    """Quickly oscillates the pitch."""

    frequency: float | None = None
    depth: float | None = None


@dataclass
class Rotation(_OptionalFloats):
    """Rotates the audio around the stereo channels (audio panning)."""

    rotation_hz: float | None = None


@dataclass
class Distortion(_OptionalFloats):
    """Distorts the audio."""

    sin_offset: float | None = None
    sin_scale: float | None = None
    cos_offset: float | None = None
    cos_scale: float | None = None
    tan_offset: float | None = None
    tan_scale: float | None = None
    offset: float | None = None
    scale: float | None = None


@dataclass
class ChannelMix(_OptionalFloats):
    """Mixes the left and right channels; each factor ranges from 0.0 to 1.0."""

    left_to_left: float | None = None
    left_to_right: float | None = None
    right_to_left: float | None = None
    right_to_right: float | None = None


@dataclass
class LowPass(_OptionalFloats):
    """Suppresses higher frequencies; smoothing at or below 1.0 disables it."""

    smoothing: float | None = None


_SECTIONS: dict[str, type[_OptionalFloats]] = {
    "karaoke": Karaoke,
    "timescale": Timescale,
    "tremolo": Tremolo,
    "vibrato": Vibrato,
    "rotation": Rotation,
    "distortion": Distortion,
    "channel_mix": ChannelMix,
    "low_pass": LowPass,
}


@dataclass
class Filters:
    """The full set of filters of a player; unset filters are left out."""

    volume: float | None = None
    equalizer: list[Equalizer] | None = None
    karaoke: Karaoke | None = None
    timescale: Timescale | None = None
    tremolo: Tremolo | None = None
    vibrato: Vibrato | None = None
    rotation: Rotation | None = None
    distortion: Distortion | None = None
    channel_mix: ChannelMix | None = None
    low_pass: LowPass | None = None
    plugin_filters: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Filters:
        data = _mapping(data)

        equalizer = data.get("equalizer")
        if equalizer is not None:
            if not isinstance(equalizer, list):
                raise DecodeError("field 'equalizer' must be a list")
            equalizer = [Equalizer.from_dict(item) for item in equalizer]

        plugin_filters = data.get("pluginFilters")
        if plugin_filters is not None:
            if not isinstance(plugin_filters, Mapping):
                raise DecodeError("field 'pluginFilters' must be an object")
            plugin_filters = dict(plugin_filters)

        sections = {
            name: None if data.get(_camel(name)) is None else kind.from_dict(data[_camel(name)])
            for name, kind in _SECTIONS.items()
        }
        return cls(
            volume=_float(data, "volume"),
            equalizer=equalizer,
            plugin_filters=plugin_filters,
            **sections,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.volume is not None:
            result["volume"] = self.volume
        if self.equalizer is not None:
            result["equalizer"] = [band.to_dict() for band in self.equalizer]
        for name in _SECTIONS:
            section = getattr(self, name)
            if section is not None:
                result[_camel(name)] = section.to_dict()
        if self.plugin_filters is not None:
            result["pluginFilters"] = dict(self.plugin_filters)
        return result