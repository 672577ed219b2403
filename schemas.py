"""
Tea API — Request Schemas
Declarative shapes for bodies and query strings. Wire names are camelCase.

Body fields are strict: "350" is not an integer and true is not 1.
Query fields are lax so that ?page=2 arrives as the integer 2.
"""

from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

from models import BrewStatus, CaffeineLevel, TeapotMaterial, TeapotStyle, TeaType
from validation import check_timestamp, check_uuid


def _reject_null(value):
    if value is None:
        raise ValueError("Expected a value, received null")
    return value


# Optional but not nullable: the key may be omitted, an explicit null is refused.
NonNull = BeforeValidator(_reject_null)

Name = Annotated[StrictStr, Field(min_length=1, max_length=100)]
Uuid = Annotated[StrictStr, AfterValidator(check_uuid)]
Timestamp = Annotated[StrictStr, AfterValidator(check_timestamp)]

CapacityMl = Annotated[StrictInt, Field(gt=0, le=5000)]
Celsius = Annotated[StrictInt, Field(ge=60, le=100)]
SteepSeconds = Annotated[StrictInt, Field(gt=0, le=600)]
Rating = Annotated[StrictInt, Field(ge=1, le=5)]

Text100 = Annotated[StrictStr, Field(max_length=100)]
Text200 = Annotated[StrictStr, Field(max_length=200)]
Text500 = Annotated[StrictStr, Field(max_length=500)]
Text1000 = Annotated[StrictStr, Field(max_length=1000)]


class Schema(BaseModel):
    # camelCase wire names only; snake_case keys are unknown fields
    model_config = ConfigDict(alias_generator=to_camel)


# ── Teapot ────────────────────────────────────────────────────────────────────

class CreateTeapot(Schema):
    name: Name
    material: TeapotMaterial
    capacity_ml: CapacityMl
    style: TeapotStyle = TeapotStyle.ENGLISH
    description: Optional[Text500] = None


class ReplaceTeapot(Schema):
    """PUT body: every field required, description may be null."""

    name: Name
    material: TeapotMaterial
    capacity_ml: CapacityMl
    style: TeapotStyle
    description: Optional[Text500]


class PatchTeapot(Schema):
    name: Annotated[Optional[Name], NonNull] = None
    material: Annotated[Optional[TeapotMaterial], NonNull] = None
    capacity_ml: Annotated[Optional[CapacityMl], NonNull] = None
    style: Annotated[Optional[TeapotStyle], NonNull] = None
    description: Optional[Text500] = None


# ── Tea ───────────────────────────────────────────────────────────────────────

class CreateTea(Schema):
    name: Name
    type: TeaType
    origin: Annotated[Optional[Text100], NonNull] = None
    caffeine_level: CaffeineLevel = CaffeineLevel.MEDIUM
    steep_temp_celsius: Celsius
    steep_time_seconds: SteepSeconds
    description: Optional[Text1000] = None


class ReplaceTea(Schema):
    """PUT body: origin stays optional, leaving it out clears it."""

    name: Name
    type: TeaType
    origin: Annotated[Optional[Text100], NonNull] = None
    caffeine_level: CaffeineLevel
    steep_temp_celsius: Celsius
    steep_time_seconds: SteepSeconds
    description: Optional[Text1000]


class PatchTea(Schema):
    name: Annotated[Optional[Name], NonNull] = None
    type: Annotated[Optional[TeaType], NonNull] = None
    origin: Annotated[Optional[Text100], NonNull] = None
    caffeine_level: Annotated[Optional[CaffeineLevel], NonNull] = None
    steep_temp_celsius: Annotated[Optional[Celsius], NonNull] = None
    steep_time_seconds: Annotated[Optional[SteepSeconds], NonNull] = None
    description: Optional[Text1000] = None


# ── Brew ──────────────────────────────────────────────────────────────────────

class CreateBrew(Schema):
    teapot_id: Uuid
    tea_id: Uuid
    # Falls back to the tea's steepTempCelsius when omitted
    water_temp_celsius: Annotated[Optional[Celsius], NonNull] = None
    notes: Optional[Text500] = None


class PatchBrew(Schema):
    """Only status, notes and completedAt change after a brew starts."""

    status: Annotated[Optional[BrewStatus], NonNull] = None
    notes: Optional[Text500] = None
    completed_at: Optional[Timestamp] = None


# ── Steep ─────────────────────────────────────────────────────────────────────

class CreateSteep(Schema):
    duration_seconds: Annotated[StrictInt, Field(gt=0)]
    rating: Optional[Rating] = None
    notes: Optional[Text200] = None


# ── Query strings ─────────────────────────────────────────────────────────────

class PageQuery(Schema):
    page: int = Field(1, gt=0)
    limit: int = Field(20, gt=0, le=100)

    def filters(self) -> dict:
        """Equality filters that were supplied, keyed by attribute name."""
        return self.model_dump(exclude={"page", "limit"}, exclude_none=True)


class TeapotQuery(PageQuery):
    material: Optional[TeapotMaterial] = None
    style: Optional[TeapotStyle] = None


class TeaQuery(PageQuery):
    type: Optional[TeaType] = None
    caffeine_level: Optional[CaffeineLevel] = None


class BrewQuery(PageQuery):
    status: Optional[BrewStatus] = None
    teapot_id: Optional[Uuid] = None
    tea_id: Optional[Uuid] = None
