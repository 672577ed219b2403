"""
Tea API — Routes
Teapots, teas, brews and steeps, plus health checks and the TIF signature.

Routes are async and never await inside a service call, so each
operation completes before another request's operation begins.
"""

import json

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from config import settings
from errors import ValidationFailed
from models import TIF_RESPONSE, utc_timestamp
from services import BrewService, SteepService, TeapotService, TeaService
from stores import AppContext

router = APIRouter()
log = structlog.get_logger()


# ── Helpers ───────────────────────────────────────────────────────────────────

def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def json_body(request: Request):
    """Decoded JSON body; an empty body counts as {}."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationFailed("Malformed JSON body") from None


def no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Teapots ───────────────────────────────────────────────────────────────────

@router.get("/teapots")
async def list_teapots(request: Request, context: AppContext = Depends(get_context)):
    return TeapotService(context).list(request.query_params).to_dict()


@router.post("/teapots", status_code=status.HTTP_201_CREATED)
async def create_teapot(body=Depends(json_body), context: AppContext = Depends(get_context)):
    return TeapotService(context).create(body).to_dict()


@router.get("/teapots/{teapot_id}")
async def get_teapot(teapot_id: str, context: AppContext = Depends(get_context)):
    return TeapotService(context).get(teapot_id).to_dict()


@router.put("/teapots/{teapot_id}")
async def replace_teapot(teapot_id: str, body=Depends(json_body), context: AppContext = Depends(get_context)):
    return TeapotService(context).replace(teapot_id, body).to_dict()


@router.patch("/teapots/{teapot_id}")
async def patch_teapot(teapot_id: str, body=Depends(json_body), context: AppContext = Depends(get_context)):
    return TeapotService(context).patch(teapot_id, body).to_dict()


@router.delete("/teapots/{teapot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_teapot(teapot_id: str, context: AppContext = Depends(get_context)):
    TeapotService(context).delete(teapot_id)
    return no_content()


@router.get("/teapots/{teapot_id}/brews")
async def list_teapot_brews(teapot_id: str, request: Request, context: AppContext = Depends(get_context)):
    return BrewService(context).list_for_teapot(teapot_id, request.query_params).to_dict()


# ── Teas ──────────────────────────────────────────────────────────────────────

@router.get("/teas")
async def list_teas(request: Request, context: AppContext = Depends(get_context)):
    return TeaService(context).list(request.query_params).to_dict()


@router.post("/teas", status_code=status.HTTP_201_CREATED)
async def create_tea(body=Depends(json_body), context: AppContext = Depends(get_context)):
    return TeaService(context).create(body).to_dict()


@router.get("/teas/{tea_id}")
async def get_tea(tea_id: str, context: AppContext = Depends(get_context)):
    return TeaService(context).get(tea_id).to_dict()


@router.put("/teas/{tea_id}")
async def replace_tea(tea_id: str, body=Depends(json_body), context: AppContext = Depends(get_context)):
    return TeaService(context).replace(tea_id, body).to_dict()


@router.patch("/teas/{tea_id}")
async def patch_tea(tea_id: str, body=Depends(json_body), context: AppContext = Depends(get_context)):
    return TeaService(context).patch(tea_id, body).to_dict()


@router.delete("/teas/{tea_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tea(tea_id: str, context: AppContext = Depends(get_context)):
    TeaService(context).delete(tea_id)
    return no_content()


# ── Brews ─────────────────────────────────────────────────────────────────────

@router.get("/brews")
async def list_brews(request: Request, context: AppContext = Depends(get_context)):
    return BrewService(context).list(request.query_params).to_dict()


@router.post("/brews", status_code=status.HTTP_201_CREATED)
async def create_brew(body=Depends(json_body), context: AppContext = Depends(get_context)):
    return BrewService(context).create(body).to_dict()


@router.get("/brews/{brew_id}")
async def get_brew(brew_id: str, context: AppContext = Depends(get_context)):
    """The brew with its teapot and tea inlined."""
    return BrewService(context).detail(brew_id)


@router.patch("/brews/{brew_id}")
async def patch_brew(brew_id: str, body=Depends(json_body), context: AppContext = Depends(get_context)):
    return BrewService(context).patch(brew_id, body).to_dict()


@router.delete("/brews/{brew_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_brew(brew_id: str, context: AppContext = Depends(get_context)):
    """Deletes the brew and every steep poured from it."""
    BrewService(context).delete(brew_id)
    return no_content()


# ── Steeps ────────────────────────────────────────────────────────────────────

@router.get("/brews/{brew_id}/steeps")
async def list_steeps(brew_id: str, request: Request, context: AppContext = Depends(get_context)):
    """Steeps of one brew, in steepNumber order."""
    return SteepService(context).list_for_brew(brew_id, request.query_params).to_dict()


@router.post("/brews/{brew_id}/steeps", status_code=status.HTTP_201_CREATED)
async def create_steep(brew_id: str, body=Depends(json_body), context: AppContext = Depends(get_context)):
    return SteepService(context).create(brew_id, body).to_dict()


# ── Health ────────────────────────────────────────────────────────────────────

def readiness_checks(context: AppContext) -> list[dict]:
    stores_ok = all(store is not None for store in context.stores())
    return [
        {"name": "memory", "status": "ok"},
        {"name": "stores", "status": "ok" if stores_ok else "down"},
    ]


@router.get("/health")
async def health():
    return {"status": "ok", "timestamp": utc_timestamp(), "version": settings.api_version}


@router.get("/health/live")
async def liveness():
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness(context: AppContext = Depends(get_context)):
    checks = readiness_checks(context)
    ready = all(check["status"] == "ok" for check in checks)
    if not ready:
        log.warning("tea_api.not_ready", checks=checks)
    return JSONResponse(status_code=200 if ready else 503, content={
        "status": "ok" if ready else "degraded",
        "timestamp": utc_timestamp(),
        "checks": checks,
    })


# ── TIF ───────────────────────────────────────────────────────────────────────

@router.get("/brew")
async def tif_signature():
    """
    GET /brew — always 418.
    A teapot server cannot brew coffee, whatever it has in store.
    """
    log.info("tea_api.teapot_detected", status_code=418)
    return JSONResponse(status_code=418, content=TIF_RESPONSE)
