# apps/api/routers/optimize.py
from __future__ import annotations

from logging import Logger
from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from apps.api.schemas import EvaluateRequest, OptimizeRequest, OptimizeResponse, ResultOut, WeaponIn
from stat_optimizer.io import parsers
from stat_optimizer.models import AttributeBounds, AttributeSet, ObjectiveMode, SolveRequest, SolverResult
from stat_optimizer.objectives import parse_mode
from stat_optimizer.optimizer import StatOptimizer

router = APIRouter()


# ---------------- Helpers ----------------

def _optimizer(request: Request) -> StatOptimizer:
    optimizer: Optional[StatOptimizer] = request.app.state.optimizer
    if optimizer is None:
        raise HTTPException(status_code=503, detail="Game data not loaded (set STAT_OPTIMIZER_DATA)")
    return optimizer


def _mode(req: WeaponIn) -> Optional[ObjectiveMode]:
    return parse_mode(req.mode, req.skill) if req.mode else None


def _result_out(result: SolverResult) -> ResultOut:
    return ResultOut(
        stats=result.stats.as_dict(),
        score=result.score,
        raw_score=round(result.raw_score, 6),
        strategy=result.strategy,
    )


# ---------------- Routes ----------------

@router.post("/optimize", response_model=OptimizeResponse)
def optimize(req: OptimizeRequest, request: Request) -> OptimizeResponse:
    """
    Best attribute allocation for one weapon.
    Returns:
      { "ok": true, "result": { "stats": {attr: value}, "score": int, "raw_score": float, "strategy": str } }
    """
    logger: Logger = request.app.state.logger
    optimizer = _optimizer(request)
    logger.info("Received optimization request for %s", req.weapon)

    try:
        bounds = parsers.parse_bounds({k: v.model_dump() for k, v in req.bounds.items()})
        solve_request = SolveRequest(
            weapon_name=req.weapon,
            affinity=req.affinity,
            upgrade_level=req.upgrade_level,
            bounds=bounds,
            mode=_mode(req),
            two_handing=req.two_handing,
            points_budget=req.points_budget,
        )
        result = optimizer.optimize(solve_request)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid request: {e}")
    except Exception as e:
        logger.exception("Solver failed")
        raise HTTPException(status_code=500, detail=f"Solver failed: {e}")

    logger.info("Optimization complete (%s, score %d)", result.strategy, result.score)
    return OptimizeResponse(ok=True, result=_result_out(result))


@router.post("/evaluate", response_model=OptimizeResponse)
def evaluate(req: EvaluateRequest, request: Request) -> OptimizeResponse:
    """Score a fixed build with the same result shape as /optimize."""
    optimizer = _optimizer(request)
    try:
        stats = AttributeSet.from_mapping(parsers.parse_stats(req.stats))
        solve_request = SolveRequest(
            weapon_name=req.weapon,
            affinity=req.affinity,
            upgrade_level=req.upgrade_level,
            bounds=AttributeBounds.locked_at(stats),
            mode=_mode(req),
            two_handing=req.two_handing,
        )
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid request: {e}")
    result = optimizer.evaluate(solve_request, stats)
    return OptimizeResponse(ok=True, result=_result_out(result))
