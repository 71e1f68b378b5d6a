"""FastAPI application exposing read-only commune lookups."""
from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Path, Query

from .config import settings
from .index import IndexFormatError
from .models import CommuneList, CommuneName, CommuneNameResponse, HealthResponse, ResolveResponse
from .normalizer import normalize
from .regions import WILAYAS, coerce_wilaya
from .resolver import WilayaResolver

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = logging.getLevelName(settings.log_level.upper())

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, force=True)
for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(name).setLevel(LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(title="Wilaya Resolver")


@lru_cache(maxsize=1)
def _load_resolver() -> WilayaResolver:
    logger.info("Loading commune index from %s", settings.index_path)
    return WilayaResolver.from_path(settings.index_path, default_wilaya=settings.default_wilaya)


def get_resolver() -> WilayaResolver:
    try:
        return _load_resolver()
    except (OSError, IndexFormatError) as exc:
        logger.error("Commune index unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Commune index not available") from exc


@app.get("/health", response_model=HealthResponse)
async def health(resolver: WilayaResolver = Depends(get_resolver)) -> HealthResponse:
    return HealthResponse(index_path=settings.index_path, communes=len(resolver.index))


@app.get("/resolve", response_model=ResolveResponse)
async def resolve(
    name: str = Query("", description="Commune name, French or Arabic"),
    hint: str | None = Query(None, description="Wilaya id recorded on the order"),
    resolver: WilayaResolver = Depends(get_resolver),
) -> ResolveResponse:
    wilaya_id = resolver.resolve_wilaya(name, hint)
    wilaya = WILAYAS[wilaya_id]
    return ResolveResponse(
        name=name,
        normalized=normalize(name),
        hint=coerce_wilaya(hint),
        wilaya_id=wilaya_id,
        wilaya_fr=wilaya.name_fr,
        wilaya_ar=wilaya.name_ar,
    )


@app.get("/communes/{wilaya_id}", response_model=CommuneList)
async def communes(
    wilaya_id: int = Path(..., description="Wilaya id"),
    resolver: WilayaResolver = Depends(get_resolver),
) -> CommuneList:
    if coerce_wilaya(wilaya_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown wilaya {wilaya_id}")
    items = [CommuneName(**item) for item in resolver.communes_by_wilaya(wilaya_id)]
    return CommuneList(wilaya_id=wilaya_id, wilaya_fr=WILAYAS[wilaya_id].name_fr, communes=items)


@app.get("/commune-name", response_model=CommuneNameResponse)
async def commune_name(
    name: str = Query(..., description="Commune name, French or Arabic"),
    wilaya_name: str | None = Query(None),
    wilaya_code: str | None = Query(None),
    resolver: WilayaResolver = Depends(get_resolver),
) -> CommuneNameResponse:
    resolved = resolver.resolve_commune_name(name, wilaya_name, wilaya_code)
    return CommuneNameResponse(name=name, resolved=resolved)
