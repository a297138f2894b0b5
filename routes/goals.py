from fastapi import APIRouter
from pydantic import BaseModel, Field
from typing import Optional

from models.finance import GoalTransactionKind
from services.forecast_dto import to_dict
from services.goal_service import (
    add_goal,
    add_goal_transaction,
    delete_goal,
    delete_goal_transaction,
    list_goal_progress,
    list_goal_transactions,
    update_goal,
)
from utils.dates import parse_iso_date

router = APIRouter()


class GoalCreate(BaseModel):
    name: str
    target: float = Field(gt=0)
    deadline: Optional[str] = None
    color: str = ""


class GoalUpdate(BaseModel):
    name: Optional[str] = None
    target: Optional[float] = Field(default=None, gt=0)
    deadline: Optional[str] = None
    color: Optional[str] = None


class GoalMovementCreate(BaseModel):
    kind: GoalTransactionKind
    amount: float = Field(gt=0)
    date: str
    note: str = ""


# -------------------------
# GOALS
# -------------------------

@router.get("/goals")
def list_goals():
    return {"goals": [to_dict(g) for g in list_goal_progress()]}


@router.post("/goals")
def create_goal(goal: GoalCreate):
    deadline = None
    if goal.deadline:
        try:
            deadline = parse_iso_date(goal.deadline).isoformat()
        except ValueError as e:
            return {"success": False, "error": str(e)}

    goal_id = add_goal(name=goal.name, target=goal.target, deadline=deadline, color=goal.color)
    return {"success": True, "id": goal_id}


@router.put("/goals/{goal_id}")
def edit_goal(goal_id: str, goal: GoalUpdate):
    changes = goal.model_dump(exclude_unset=True, exclude_none=True)
    if changes.get("deadline"):
        try:
            changes["deadline"] = parse_iso_date(changes["deadline"]).isoformat()
        except ValueError as e:
            return {"success": False, "error": str(e)}

    return {"success": update_goal(goal_id, changes)}


@router.delete("/goals/{goal_id}")
def remove_goal(goal_id: str):
    return {"success": delete_goal(goal_id)}


# -------------------------
# GOAL MOVEMENTS
# -------------------------

@router.get("/goals/{goal_id}/movements")
def list_movements(goal_id: str):
    return {"movements": [to_dict(m) for m in list_goal_transactions(goal_id)]}


@router.post("/goals/{goal_id}/movements")
def create_movement(goal_id: str, movement: GoalMovementCreate):
    try:
        movement_date = parse_iso_date(movement.date)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    movement_id = add_goal_transaction(
        goal_id=goal_id,
        kind=movement.kind,
        amount=movement.amount,
        date=movement_date.isoformat(),
        note=movement.note,
    )
    if movement_id is None:
        return {"success": False, "error": f"Goal {goal_id} not found."}
    return {"success": True, "id": movement_id}


@router.delete("/goals/{goal_id}/movements/{movement_id}")
def remove_movement(goal_id: str, movement_id: str):
    return {"success": delete_goal_transaction(goal_id, movement_id)}
