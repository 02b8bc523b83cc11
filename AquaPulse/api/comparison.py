"""
Endpoints de comparación entre estanques (temporada actual e histórico).
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List

from enums.enums import AlignmentModeEnum
from schemas.comparison import (
    ComparisonExportRequest,
    ComparisonRequest,
    ComparisonResult,
    PondListItemOut,
    SeasonOut,
)
from schemas.records import PondRecord, SeasonRecord
from services import record_store
from services.comparison_service import compare_ponds, comparison_to_csv
from utils.db import get_db
from utils.datetime_utils import now_local
from utils.errors import NotFoundError

router = APIRouter(prefix="/comparison", tags=["Comparison"])


def _season_out(season: SeasonRecord) -> SeasonOut:
    return SeasonOut(**season.model_dump())


def _pond_items(ponds: List[PondRecord], season: SeasonRecord) -> List[PondListItemOut]:
    season_out = _season_out(season)
    return [
        PondListItemOut(pond_id=p.pond_id, name=p.name, status=p.status, season=season_out)
        for p in ponds
    ]


# ==========================================
# GET - Catálogos para el selector
# ==========================================

@router.get("/seasons", response_model=List[SeasonOut], summary="Temporadas disponibles")
def available_seasons(db: Session = Depends(get_db)):
    return [_season_out(s) for s in record_store.list_seasons(db)]


@router.get(
    "/seasons/{season_id}/ponds",
    response_model=List[PondListItemOut],
    summary="Estanques de una temporada",
)
def ponds_by_season(
        season_id: int = Path(..., gt=0, description="ID de la temporada"),
        db: Session = Depends(get_db),
):
    season = record_store.fetch_season(db, season_id)
    return _pond_items(record_store.list_ponds_for_season(db, season_id), season)


@router.get(
    "/ponds/current-season",
    response_model=List[PondListItemOut],
    summary="Estanques de la temporada actual",
)
def ponds_current_season(db: Session = Depends(get_db)):
    season = record_store.current_season(db)
    if season is None:
        raise NotFoundError("Temporada actual")
    return _pond_items(record_store.fetch_ponds(db, season.season_id), season)


# ==========================================
# POST - Comparaciones
# ==========================================

@router.post(
    "/current",
    response_model=ComparisonResult,
    summary="Comparar estanques por fecha calendario",
    description=(
            "Modo absoluto: alinea por fecha calendario dentro del rango dado.\n"
            "Sin fechas se usan los últimos días configurados en COMPARISON_DEFAULT_RANGE_DAYS."
    )
)
def compare_current(payload: ComparisonRequest, db: Session = Depends(get_db)):
    return compare_ponds(db, payload, AlignmentModeEnum.absolute)


@router.post(
    "/historical",
    response_model=ComparisonResult,
    summary="Comparar estanques entre temporadas por día de cultivo",
    description="Modo relativo: alinea por 'Day N' desde el origen de cada estanque.",
)
def compare_historical(payload: ComparisonRequest, db: Session = Depends(get_db)):
    return compare_ponds(db, payload, AlignmentModeEnum.relative)


@router.post("/export", summary="Exportar comparación a CSV")
def export_comparison(payload: ComparisonExportRequest, db: Session = Depends(get_db)):
    result = compare_ponds(db, payload, payload.mode)
    filename = (
        f"pond-comparison-{payload.pond_a_id}-vs-{payload.pond_b_id}-"
        f"{now_local().strftime('%Y%m%d%H%M%S')}.csv"
    )
    return Response(
        content=comparison_to_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
