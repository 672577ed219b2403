"""
Tea API — Data Models
Teapots, teas, brews and the steeps poured from each brew.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class TeapotMaterial(str, Enum):
    CERAMIC = "ceramic"
    CAST_IRON = "cast-iron"
    GLASS = "glass"
    PORCELAIN = "porcelain"
    CLAY = "clay"
    STAINLESS_STEEL = "stainless-steel"


class TeapotStyle(str, Enum):
    KYUSU = "kyusu"
    GAIWAN = "gaiwan"
    ENGLISH = "english"
    MOROCCAN = "moroccan"
    TURKISH = "turkish"
    YIXING = "yixing"


class TeaType(str, Enum):
    GREEN = "green"
    BLACK = "black"
    OOLONG = "oolong"
    WHITE = "white"
    PUERH = "puerh"
    HERBAL = "herbal"
    ROOIBOS = "rooibos"


class CaffeineLevel(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BrewStatus(str, Enum):
    PREPARING = "preparing"
    STEEPING = "steeping"
    READY = "ready"
    SERVED = "served"
    COLD = "cold"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2026-01-01T08:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ── Entities ──────────────────────────────────────────────────────────────────

@dataclass
class Teapot:
    id: str
    name: str
    material: TeapotMaterial
    capacity_ml: int
    style: TeapotStyle
    description: str | None
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "material": self.material.value,
            "capacityMl": self.capacity_ml,
            "style": self.style.value,
            "description": self.description,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Tea:
    id: str
    name: str
    type: TeaType
    caffeine_level: CaffeineLevel
    steep_temp_celsius: int
    steep_time_seconds: int
    description: str | None
    created_at: str
    updated_at: str
    origin: str | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "caffeineLevel": self.caffeine_level.value,
            "steepTempCelsius": self.steep_temp_celsius,
            "steepTimeSeconds": self.steep_time_seconds,
            "description": self.description,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        # origin is optional, not nullable: absent means the key is absent
        if self.origin is not None:
            data["origin"] = self.origin
        return data


@dataclass
class Brew:
    id: str
    teapot_id: str
    tea_id: str
    status: BrewStatus
    water_temp_celsius: int
    notes: str | None
    started_at: str
    completed_at: str | None
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "teapotId": self.teapot_id,
            "teaId": self.tea_id,
            "status": self.status.value,
            "waterTempCelsius": self.water_temp_celsius,
            "notes": self.notes,
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Steep:
    id: str
    brew_id: str
    steep_number: int
    duration_seconds: int
    rating: int | None
    notes: str | None
    created_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "brewId": self.brew_id,
            "steepNumber": self.steep_number,
            "durationSeconds": self.duration_seconds,
            "rating": self.rating,
            "notes": self.notes,
            "createdAt": self.created_at,
        }


# ── TIF signature ─────────────────────────────────────────────────────────────

TIF_RESPONSE: dict[str, str] = {
    "error": "I'm a teapot",
    "message": "This server is TIF-compliant and cannot brew coffee",
    "spec": "https://teapotframework.dev",
}
