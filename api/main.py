from __future__ import annotations

import logging
import math
import os
from typing import Any, Callable, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import FilterCriteriaModel, LoadRequest, MetaListResponse, SortModel, ViewResponse
from core.data import SyntheticSalesProvider
from core.engine import AnalyticsEngine
from core.errors import ValidationError
from core.metrics_categories import compute_category_stats
from core.metrics_filters import compute_filter_analysis
from core.metrics_groupings import compute_groupings
from core.metrics_overview import compute_overview
from core.metrics_search import compute_search
from core.metrics_sets import compute_set_analysis
from core.metrics_transform import compute_transform
from core.records import records_from_rows, records_to_frame
from core.sets import unique_values

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 500


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def build_default_engine() -> AnalyticsEngine:
    size = _env_int("SALES_ENGINE_SIZE", DEFAULT_SIZE) or 0
    seed = _env_int("SALES_ENGINE_SEED", None)
    engine = AnalyticsEngine()
    engine.load_from(SyntheticSalesProvider(size, seed=seed))
    return engine


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                frozenset: sorted,
            },
        ),
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    body = exc.to_dict() if isinstance(exc, ValidationError) else {"error": str(exc), "type": type(exc).__name__}
    return JSONResponse(status_code=status_code, content=body)


def _run(name: str, fn: Callable[[], Any]) -> Response:
    try:
        return _json(fn())
    except ValidationError as exc:
        logger.info("%s rejected input: %s", name, exc)
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("%s failed", name)
        return _error(exc, 500)


def _view_payload(engine: AnalyticsEngine) -> dict:
    view = engine.view
    limit = engine.thresholds.table_limit
    return ViewResponse(
        total=len(engine.full_dataset),
        filtered=len(view),
        records=[r.to_dict() for r in view[:limit]],
    ).model_dump()


def create_app(engine: Optional[AnalyticsEngine] = None) -> FastAPI:
    app = FastAPI(title="Sales Analytics API", version="0.1.0")
    app.state.engine = engine if engine is not None else build_default_engine()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _engine(request: Request) -> AnalyticsEngine:
        return request.app.state.engine

    def _meta(request: Request, field: str) -> dict:
        values = unique_values(_engine(request).full_dataset, field)
        return MetaListResponse(values=sorted(str(v) for v in values)).model_dump()

    @app.get("/meta/regions")
    def meta_regions(request: Request):
        return _run("meta_regions", lambda: _meta(request, "region"))

    @app.get("/meta/products")
    def meta_products(request: Request):
        return _run("meta_products", lambda: _meta(request, "product"))

    @app.get("/meta/categories")
    def meta_categories(request: Request):
        return _run("meta_categories", lambda: _meta(request, "category"))

    @app.post("/load")
    def load(request: Request, body: LoadRequest):
        def _load() -> dict:
            engine = _engine(request)
            engine.load(records_from_rows(r.model_dump() for r in body.records))
            return _view_payload(engine)

        return _run("load", _load)

    @app.post("/filter")
    def apply_filter(request: Request, criteria: FilterCriteriaModel):
        def _filter() -> dict:
            engine = _engine(request)
            engine.apply_filter(criteria.model_dump())
            return _view_payload(engine)

        return _run("filter", _filter)

    @app.post("/reset")
    def reset(request: Request):
        def _reset() -> dict:
            engine = _engine(request)
            engine.reset()
            return _view_payload(engine)

        return _run("reset", _reset)

    @app.post("/sort")
    def sort(request: Request, body: SortModel):
        def _sort() -> dict:
            engine = _engine(request)
            engine.sort(body.key)
            return _view_payload(engine)

        return _run("sort", _sort)

    @app.get("/overview")
    def overview(request: Request):
        return _run("overview", lambda: compute_overview(_engine(request)))

    @app.get("/groupings")
    def groupings(request: Request):
        return _run("groupings", lambda: compute_groupings(_engine(request)))

    @app.get("/sets")
    def set_analysis(request: Request, left: str = Query(default="Electronics"), right: str = Query(default="Gaming")):
        return _run("sets", lambda: compute_set_analysis(_engine(request), left=left, right=right))

    @app.get("/filter-analysis")
    def filter_analysis(request: Request):
        return _run("filter_analysis", lambda: compute_filter_analysis(_engine(request)))

    @app.get("/search")
    def search(request: Request, region: str = Query(default="North America"), q: str = Query(default="laptop")):
        return _run("search", lambda: compute_search(_engine(request), region=region, product_term=q))

    @app.get("/transform")
    def transform(request: Request, limit: int = Query(default=10, ge=1, le=100)):
        return _run("transform", lambda: compute_transform(_engine(request), limit=limit))

    @app.get("/categories")
    def categories(request: Request):
        return _run("categories", lambda: compute_category_stats(_engine(request)))

    @app.get("/performance")
    def performance(request: Request):
        return _run("performance", lambda: _engine(request).performance())

    @app.get("/export/view")
    def export_view(request: Request):
        export_df: pd.DataFrame = records_to_frame(_engine(request).view).drop(columns=["month"])
        csv_bytes = export_df.to_csv(index=False).encode("utf-8")
        return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": "attachment; filename=view.csv"})

    return app


app = create_app()
