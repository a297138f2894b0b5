from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from services.forecast_dto import to_dict
from services.projection_service import build_dashboard

router = APIRouter()

@router.get("/")
def root():
    return RedirectResponse(url="/dashboard")


@router.get("/dashboard")
def dashboard():
    data = build_dashboard()

    stats = to_dict(data["stats"])
    monthly = [
        {**to_dict(m), "net": float(m.net)}
        for m in data["monthly"]
    ]

    return {
        "stats": stats,
        "monthly": monthly,
        "categories": [to_dict(c) for c in data["categories"]],
        "goals": [to_dict(g) for g in data["goals"]],
    }
