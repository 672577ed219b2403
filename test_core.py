"""
Tea API — Stores, pagination, validation and services without HTTP
"""

import math

import pytest

from errors import NotFound, ValidationFailed
from models import BrewStatus, TeapotMaterial, TeapotStyle
from pagination import paginate
from schemas import CreateTeapot, PatchTeapot, TeapotQuery
from services import BrewService, SteepService, TeapotService, TeaService
from stores import AppContext, EntityStore
from validation import is_uuid, require_uuid, validate, validate_query


class Item:
    def __init__(self, id):
        self.id = id


# ── EntityStore ───────────────────────────────────────────────────────────────

def test_store_round_trip():
    store = EntityStore("items")
    a, b = Item("a"), Item("b")
    store.insert(a)
    store.insert(b)

    assert store.get("a") is a
    assert store.get("zzz") is None
    assert store.has("b")
    assert store.list() == [a, b]
    assert len(store) == 2


def test_store_delete_reports_existence():
    store = EntityStore("items")
    store.insert(Item("a"))
    assert store.delete("a") is True
    assert store.delete("a") is False
    assert store.list() == []


def test_store_reinsert_keeps_position():
    store = EntityStore("items")
    store.insert(Item("a"))
    store.insert(Item("b"))
    replacement = Item("a")
    store.insert(replacement)
    assert [item.id for item in store.list()] == ["a", "b"]
    assert store.get("a") is replacement


# ── Pagination ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("total,limit", [(0, 20), (1, 1), (7, 3), (100, 100), (101, 100)])
def test_total_pages(total, limit):
    page = paginate(list(range(total)), 1, limit)
    assert page.total == total
    assert page.total_pages == math.ceil(total / limit)


def test_slices_the_requested_page():
    page = paginate(list(range(10)), 3, 4)
    assert page.data == [8, 9]


def test_page_beyond_the_end_is_empty():
    page = paginate(list(range(3)), 5, 2)
    assert page.data == []
    assert page.total_pages == 2


# ── Validation ────────────────────────────────────────────────────────────────

def test_validate_fills_defaults():
    teapot = validate(CreateTeapot, {"name": "Pot", "material": "clay", "capacityMl": 300})
    assert teapot.style is TeapotStyle.ENGLISH
    assert teapot.description is None
    assert teapot.material is TeapotMaterial.CLAY


def test_validate_collects_all_failures():
    with pytest.raises(ValidationFailed) as info:
        validate(CreateTeapot, {"name": "x" * 101, "capacityMl": True})
    assert info.value.status_code == 400
    assert set(info.value.details) == {"name", "material", "capacityMl"}


def test_patch_tracks_only_present_fields():
    patch = validate(PatchTeapot, {"description": None})
    assert patch.model_dump(exclude_unset=True) == {"description": None}


def test_query_coerces_strings():
    query = validate_query(TeapotQuery, {"page": "3", "limit": "15", "style": "yixing"})
    assert (query.page, query.limit) == (3, 15)
    assert query.filters() == {"style": TeapotStyle.YIXING}


def test_query_defaults():
    query = validate_query(TeapotQuery, {})
    assert (query.page, query.limit) == (1, 20)
    assert query.filters() == {}


@pytest.mark.parametrize("params", [{"page": "0"}, {"page": "abc"}, {"limit": "101"}, {"limit": "-1"}])
def test_query_bounds(params):
    with pytest.raises(ValidationFailed) as info:
        validate_query(TeapotQuery, params)
    assert info.value.message == "Invalid query parameters"


def test_uuid_shapes():
    assert is_uuid("0b6f3c1e-9a44-4f7e-8d0c-2f1e5c9a7b10")
    assert not is_uuid("0b6f3c1e9a444f7e8d0c2f1e5c9a7b10")
    assert not is_uuid("{0b6f3c1e-9a44-4f7e-8d0c-2f1e5c9a7b10}")
    assert not is_uuid("0b6f3c1e-9a44-4f7e-8d0c-2f1e5c9a7b10\n")
    with pytest.raises(ValidationFailed, match="Invalid steep ID format"):
        require_uuid("nope", "steep")


# ── Services ──────────────────────────────────────────────────────────────────

@pytest.fixture
def seeded():
    context = AppContext()
    teapot = TeapotService(context).create({"name": "Pot", "material": "glass", "capacityMl": 600})
    tea = TeaService(context).create({
        "name": "Oolong", "type": "oolong", "steepTempCelsius": 90, "steepTimeSeconds": 60,
    })
    brew = BrewService(context).create({"teapotId": teapot.id, "teaId": tea.id})
    return context, teapot, tea, brew


def test_brew_inherits_tea_temperature(seeded):
    _, _, tea, brew = seeded
    assert brew.water_temp_celsius == tea.steep_temp_celsius == 90
    assert brew.status is BrewStatus.PREPARING
    assert brew.started_at == brew.created_at


def test_brew_reference_failures_are_validation_errors(seeded):
    context, teapot, _, _ = seeded
    with pytest.raises(ValidationFailed, match="Tea not found"):
        BrewService(context).create({"teapotId": teapot.id, "teaId": "00000000-0000-4000-8000-000000000000"})


def test_steep_numbering_and_cascade(seeded):
    context, _, _, brew = seeded
    steeps = SteepService(context)
    created = [steeps.create(brew.id, {"durationSeconds": n}) for n in (15, 20, 25)]
    assert [s.steep_number for s in created] == [1, 2, 3]

    BrewService(context).delete(brew.id)
    assert len(context.steeps) == 0
    assert not context.brews.has(brew.id)
    with pytest.raises(NotFound):
        steeps.list_for_brew(brew.id, {})


def test_brew_detail_survives_missing_teapot(seeded):
    context, teapot, _, brew = seeded
    TeapotService(context).delete(teapot.id)
    detail = BrewService(context).detail(brew.id)
    assert detail == brew.to_dict()


def test_patch_refreshes_updated_at_only():
    ticks = iter(["2030-01-01T00:00:00.000Z", "2030-01-01T00:00:05.000Z"])
    context = AppContext(clock=lambda: next(ticks))
    service = TeapotService(context)
    teapot = service.create({"name": "Pot", "material": "clay", "capacityMl": 250})

    patched = service.patch(teapot.id, {"name": "Renamed"})
    assert patched.created_at == "2030-01-01T00:00:00.000Z"
    assert patched.updated_at == "2030-01-01T00:00:05.000Z"
    assert patched.capacity_ml == 250
    assert context.teapots.get(teapot.id) is patched
