from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from src.filters import FilterState


@dataclass(frozen=True)
class PresetInput:
    name: str
    search: str = ""
    date_from: str | None = None
    date_to: str | None = None


@dataclass(frozen=True)
class Preset:
    id: str
    name: str
    search: str | None = ""
    date_from: str | None = None
    date_to: str | None = None
    user_id: str = ""
    created_at: str = ""


def clean_preset_name(name: str | None) -> str:
    return str(name or "").strip()


def to_preset_payload(name: str | None, state: FilterState) -> PresetInput | None:
    cleaned = clean_preset_name(name)
    if not cleaned:
        return None
    return PresetInput(
        name=cleaned,
        search=state.search or "",
        date_from=state.date_from or None,
        date_to=state.date_to or None,
    )


def from_preset(preset: Preset | PresetInput) -> FilterState:
    return FilterState(
        search=preset.search or "",
        date_from=preset.date_from or "",
        date_to=preset.date_to or "",
    )


def renamed_preset(preset: Preset, name: str | None) -> Preset | None:
    cleaned = clean_preset_name(name)
    if not cleaned:
        return None
    return replace(preset, name=cleaned)


def find_preset(presets: Sequence[Preset], preset_id: str | None) -> Preset | None:
    if not preset_id:
        return None
    for preset in presets:
        if preset.id == preset_id:
            return preset
    return None
