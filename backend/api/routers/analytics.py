"""Local-model analytics endpoints.

Routes
------
GET  /local-models-analytics?action=init     Seed the sample dataset
GET  /local-models-analytics?action=stats    Model summary, provider comparison, recent websites
GET  /local-models-analytics?action=export   Full raw dataset
POST /local-models-analytics                 Stats for one model  {"model_name": "..."}
POST /local-models-analytics/track           Record one generation attempt

Every response is an envelope: ``{"success": true, "data": ...}`` or
``{"success": false, "error": "..."}``.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from backend.analytics import AnalyticsEngine
from backend.api.responses import failure
from backend.config import settings
from backend.tracker import Tracker

router = APIRouter()

ACTIONS = ("init", "stats", "export")


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class ModelStatsRequest(BaseModel):
    model_name: Optional[str] = None


class TrackRequest(BaseModel):
    url: str
    model_used: str
    generated_code: str = ""
    generation_time_ms: int
    status: str = "success"
    error_message: Optional[str] = None
    style_selected: Optional[str] = None
    additional_instructions: Optional[str] = None
    sandbox_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _tracker(request: Request) -> Tracker:
    return Tracker(request.app.state.store)


def _stats_payload(request: Request) -> dict[str, Any]:
    store = request.app.state.store
    engine = AnalyticsEngine(store)
    websites = store.list_websites()
    return {
        "models": [r.to_dict() for r in engine.model_performance_summary()],
        "providers": [r.to_dict() for r in engine.provider_comparison()],
        "complexity": [r.to_dict() for r in engine.website_complexity_analysis()],
        "websites": [w.to_dict() for w in websites[: settings.stats_recent_websites]],
        "totalWebsites": len(websites),
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=None)
def analytics_action(request: Request, action: Optional[str] = None) -> Any:
    """Dispatch on ``?action=``."""
    if action == "init":
        added = _tracker(request).seed_sample_data()
        return {
            "success": True,
            "message": "Sample data initialized",
            "data": {"attempts_added": added},
        }

    if action == "stats":
        return {"success": True, "data": _stats_payload(request)}

    if action == "export":
        return {"success": True, "data": _tracker(request).export_data()}

    options = ", ".join(f"?action={a}" for a in ACTIONS)
    return failure(f"Invalid action. Use one of: {options}", 400)


@router.post("", response_model=None)
def model_stats_endpoint(body: ModelStatsRequest, request: Request) -> Any:
    """Return aggregate stats for one model."""
    model_name = (body.model_name or "").strip()
    if not model_name:
        return failure("model_name is required", 400)

    stats = _tracker(request).model_stats(model_name)
    if stats is None:
        return failure(f"No attempts recorded for model {model_name!r}", 404)
    return {"success": True, "data": stats.to_dict()}


@router.post("/track", status_code=201, response_model=None)
def track_endpoint(body: TrackRequest, request: Request) -> Any:
    """Record one generation attempt and return its id."""
    attempt_id = _tracker(request).track_attempt(
        url=body.url,
        model_id=body.model_used,
        generated_output=body.generated_code,
        duration_ms=body.generation_time_ms,
        status=body.status,
        error_detail=body.error_message,
        style=body.style_selected,
        instructions=body.additional_instructions,
        sandbox_url=body.sandbox_url,
    )
    return {"success": True, "data": {"attempt_id": attempt_id}}
