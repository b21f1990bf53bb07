from fastapi import APIRouter, HTTPException

from config import PREVIEW_ROWS
from models.common_models import (
    AddChartRequest,
    ChartDataResponse,
    ChartRequest,
    DatasetRequest,
    DetailRequest,
    PresetChartRequest,
    PreviewRequest,
)
from services import session_service
from services.aggregation_service import aggregate, display_values
from services.default_chart_service import (
    MAINTENANCE_PRESETS,
    PRESET_DESCRIPTIONS,
    build_preset_chart,
    build_quick_chart,
)
from services.drilldown_service import build_detail_view
from services.preview_service import preview_rows

router = APIRouter(prefix="/data", tags=["data"])


def _not_found(e: KeyError):
    # KeyError wraps its message in quotes
    return HTTPException(status_code=404, detail=e.args[0] if e.args else "Not found.")


@router.post("/datasets")
async def datasets(req: DatasetRequest):
    try:
        tables = session_service.list_tables(req.session_id)
    except KeyError as e:
        raise _not_found(e)
    return [session_service.dataset_info(t).model_dump() for t in tables]


@router.post("/datasets/remove")
async def remove_dataset(req: DatasetRequest):
    if not req.dataset_id:
        raise HTTPException(status_code=400, detail="dataset_id is required.")
    try:
        table = session_service.remove_table(req.session_id, req.dataset_id)
    except KeyError as e:
        raise _not_found(e)
    return {"removed": table.dataset_id, "charts": [c.model_dump() for c in session_service.list_charts(req.session_id)]}


@router.post("/preview")
async def preview_data(req: PreviewRequest):
    try:
        table = session_service.get_table(req.session_id, req.dataset_id)
    except KeyError as e:
        raise _not_found(e)
    return preview_rows(table, req.n_rows or PREVIEW_ROWS)


@router.post("/charts")
async def charts(req: DatasetRequest):
    try:
        specs = session_service.list_charts(req.session_id, req.dataset_id)
    except KeyError as e:
        raise _not_found(e)
    return [c.model_dump() for c in specs]


@router.get("/charts/presets")
async def presets():
    return [
        {"name": name, "type": chart_type, "description": PRESET_DESCRIPTIONS[name]}
        for name, (chart_type, *_rest) in MAINTENANCE_PRESETS.items()
    ]


@router.post("/charts/add")
async def add_chart(req: AddChartRequest):
    try:
        table = session_service.get_table(req.session_id, req.dataset_id)
    except KeyError as e:
        raise _not_found(e)
    if req.x_column not in table.headers:
        raise HTTPException(status_code=400, detail=f"Column '{req.x_column}' not in dataset.")
    if req.y_column and req.y_column not in table.headers:
        raise HTTPException(status_code=400, detail=f"Column '{req.y_column}' not in dataset.")

    spec = session_service.new_chart(
        req.session_id, req.dataset_id, req.name, req.type, req.x_column, req.y_column
    )
    return spec.model_dump()


@router.post("/charts/preset")
async def add_preset_chart(req: PresetChartRequest):
    try:
        table = session_service.get_table(req.session_id, req.dataset_id)
    except KeyError as e:
        raise _not_found(e)

    if req.preset is None:
        spec = build_quick_chart(table)
    elif req.preset not in MAINTENANCE_PRESETS:
        raise HTTPException(status_code=400, detail=f"Unknown preset '{req.preset}'.")
    else:
        spec = build_preset_chart(table, req.preset)

    if spec is None:
        raise HTTPException(status_code=422, detail="No suitable column found for this chart.")
    session_service.add_chart(req.session_id, spec)
    return spec.model_dump()


@router.post("/charts/remove")
async def remove_chart(req: ChartRequest):
    try:
        spec = session_service.remove_chart(req.session_id, req.chart_id)
    except KeyError as e:
        raise _not_found(e)
    return {"removed": spec.id}


@router.post("/chart-data", response_model=ChartDataResponse)
async def chart_data(req: ChartRequest):
    try:
        spec = session_service.get_chart(req.session_id, req.chart_id)
        table = session_service.get_table(req.session_id, spec.dataset_id)
    except KeyError as e:
        raise _not_found(e)

    points = aggregate(table, spec)
    return ChartDataResponse(chart=spec, points=points, display_values=display_values(points))


@router.post("/details")
async def details(req: DetailRequest):
    try:
        spec = session_service.get_chart(req.session_id, req.chart_id)
        table = session_service.get_table(req.session_id, spec.dataset_id)
    except KeyError as e:
        raise _not_found(e)

    return build_detail_view(table, spec, req.item_name).model_dump()
