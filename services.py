"""
Tea API — Services
Business rules for each resource. Routes hand over raw path ids, query
params and JSON bodies; services validate, read and write the stores.

Nothing here awaits, so one operation always finishes before the next
request's operation starts. Steep numbering (count, then insert) and the
brew cascade (scan, then delete) rely on that.
"""

import dataclasses
from typing import Any, Mapping

import structlog

from errors import NotFound, ValidationFailed
from models import Brew, BrewStatus, Steep, Tea, Teapot
from pagination import Page, paginate
from schemas import (
    BrewQuery,
    CreateBrew,
    CreateSteep,
    CreateTea,
    CreateTeapot,
    PageQuery,
    PatchBrew,
    PatchTea,
    PatchTeapot,
    ReplaceTea,
    ReplaceTeapot,
    TeapotQuery,
    TeaQuery,
)
from stores import AppContext, EntityStore
from validation import require_uuid, validate, validate_query

log = structlog.get_logger()


def matches(entity, filters: dict) -> bool:
    return all(getattr(entity, name) == value for name, value in filters.items())


# ── Teapots & teas ────────────────────────────────────────────────────────────

class CatalogService:
    """
    Create, read, replace, patch and delete for a standalone resource.
    Subclasses name the store, the entity and the schemas.
    """

    label = ""
    store_name = ""
    entity: type
    create_schema: type
    replace_schema: type
    patch_schema: type
    query_schema: type

    def __init__(self, context: AppContext):
        self.context = context

    @property
    def store(self) -> EntityStore:
        return getattr(self.context, self.store_name)

    def list(self, params: Mapping[str, str]) -> Page:
        query = validate_query(self.query_schema, params)
        filters = query.filters()
        items = [item for item in self.store.list() if matches(item, filters)]
        return paginate(items, query.page, query.limit)

    def create(self, body: Any):
        fields = validate(self.create_schema, body).model_dump()
        now = self.context.clock()
        entity = self.entity(id=self.context.id_factory(), created_at=now, updated_at=now, **fields)
        self.store.insert(entity)
        log.info(f"tea_api.{self.label}_created", id=entity.id)
        return entity

    def get(self, entity_id: str):
        require_uuid(entity_id, self.label)
        entity = self.store.get(entity_id)
        if entity is None:
            raise NotFound(f"{self.label.capitalize()} not found")
        return entity

    def replace(self, entity_id: str, body: Any):
        existing = self.get(entity_id)
        fields = validate(self.replace_schema, body).model_dump()
        return self._save(existing, fields)

    def patch(self, entity_id: str, body: Any):
        existing = self.get(entity_id)
        fields = validate(self.patch_schema, body).model_dump(exclude_unset=True)
        return self._save(existing, fields)

    def delete(self, entity_id: str) -> None:
        entity = self.get(entity_id)
        self.store.delete(entity.id)
        log.info(f"tea_api.{self.label}_deleted", id=entity.id)

    def _save(self, existing, fields: dict):
        # id and created_at never come from a body
        updated = dataclasses.replace(existing, **fields, updated_at=self.context.clock())
        self.store.insert(updated)
        log.info(f"tea_api.{self.label}_updated", id=updated.id, fields=sorted(fields))
        return updated


class TeapotService(CatalogService):
    label = "teapot"
    store_name = "teapots"
    entity = Teapot
    create_schema = CreateTeapot
    replace_schema = ReplaceTeapot
    patch_schema = PatchTeapot
    query_schema = TeapotQuery


class TeaService(CatalogService):
    label = "tea"
    store_name = "teas"
    entity = Tea
    create_schema = CreateTea
    replace_schema = ReplaceTea
    patch_schema = PatchTea
    query_schema = TeaQuery


# ── Brews ─────────────────────────────────────────────────────────────────────

class BrewService:
    def __init__(self, context: AppContext):
        self.context = context

    def list(self, params: Mapping[str, str]) -> Page:
        query = validate_query(BrewQuery, params)
        filters = query.filters()
        items = [brew for brew in self.context.brews.list() if matches(brew, filters)]
        return paginate(items, query.page, query.limit)

    def list_for_teapot(self, teapot_id: str, params: Mapping[str, str]) -> Page:
        TeapotService(self.context).get(teapot_id)
        query = validate_query(PageQuery, params)
        items = [brew for brew in self.context.brews.list() if brew.teapot_id == teapot_id]
        return paginate(items, query.page, query.limit)

    def create(self, body: Any) -> Brew:
        request = validate(CreateBrew, body)

        # Missing references are a bad request here, not a 404
        if not self.context.teapots.has(request.teapot_id):
            raise ValidationFailed("Teapot not found")
        tea = self.context.teas.get(request.tea_id)
        if tea is None:
            raise ValidationFailed("Tea not found")

        water_temp = request.water_temp_celsius
        if water_temp is None:
            water_temp = tea.steep_temp_celsius

        now = self.context.clock()
        brew = Brew(
            id=self.context.id_factory(),
            teapot_id=request.teapot_id,
            tea_id=request.tea_id,
            status=BrewStatus.PREPARING,
            water_temp_celsius=water_temp,
            notes=request.notes,
            started_at=now,
            completed_at=None,
            created_at=now,
            updated_at=now,
        )
        self.context.brews.insert(brew)
        log.info("tea_api.brew_created",
            id=brew.id,
            teapot_id=brew.teapot_id,
            tea_id=brew.tea_id,
            water_temp_celsius=water_temp,
        )
        return brew

    def get(self, brew_id: str) -> Brew:
        require_uuid(brew_id, "brew")
        brew = self.context.brews.get(brew_id)
        if brew is None:
            raise NotFound("Brew not found")
        return brew

    def detail(self, brew_id: str) -> dict:
        """The brew with its teapot and tea inlined, or bare if either is gone."""
        brew = self.get(brew_id)
        teapot = self.context.teapots.get(brew.teapot_id)
        tea = self.context.teas.get(brew.tea_id)
        if teapot is None or tea is None:
            return brew.to_dict()
        return {**brew.to_dict(), "teapot": teapot.to_dict(), "tea": tea.to_dict()}

    def patch(self, brew_id: str, body: Any) -> Brew:
        existing = self.get(brew_id)
        fields = validate(PatchBrew, body).model_dump(exclude_unset=True)
        # Any status may follow any other
        brew = dataclasses.replace(existing, **fields, updated_at=self.context.clock())
        self.context.brews.insert(brew)
        log.info("tea_api.brew_updated", id=brew.id, fields=sorted(fields), status=brew.status.value)
        return brew

    def delete(self, brew_id: str) -> None:
        brew = self.get(brew_id)
        steeps = self.context.steeps
        orphaned = [steep.id for steep in steeps.list() if steep.brew_id == brew.id]
        for steep_id in orphaned:
            steeps.delete(steep_id)
        self.context.brews.delete(brew.id)
        log.info("tea_api.brew_deleted", id=brew.id, steeps_removed=len(orphaned))


# ── Steeps ────────────────────────────────────────────────────────────────────

class SteepService:
    def __init__(self, context: AppContext):
        self.context = context

    def _steeps_of(self, brew_id: str) -> list[Steep]:
        return [steep for steep in self.context.steeps.list() if steep.brew_id == brew_id]

    def list_for_brew(self, brew_id: str, params: Mapping[str, str]) -> Page:
        BrewService(self.context).get(brew_id)
        query = validate_query(PageQuery, params)
        items = sorted(self._steeps_of(brew_id), key=lambda steep: steep.steep_number)
        return paginate(items, query.page, query.limit)

    def create(self, brew_id: str, body: Any) -> Steep:
        # Unlike brew creation, an unknown parent here is a 404
        BrewService(self.context).get(brew_id)
        request = validate(CreateSteep, body)

        steep = Steep(
            id=self.context.id_factory(),
            brew_id=brew_id,
            steep_number=len(self._steeps_of(brew_id)) + 1,
            duration_seconds=request.duration_seconds,
            rating=request.rating,
            notes=request.notes,
            created_at=self.context.clock(),
        )
        self.context.steeps.insert(steep)
        log.info("tea_api.steep_created",
            id=steep.id,
            brew_id=brew_id,
            steep_number=steep.steep_number,
        )
        return steep
