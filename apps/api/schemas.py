# apps/api/schemas.py
from __future__ import annotations
from typing import Dict, Literal, Optional
from pydantic import BaseModel, Field

Mode = Literal["AR", "SP", "SKILL"]

class BoundIn(BaseModel):
    min: int = Field(ge=1, le=99)
    max: int = Field(ge=1, le=99)

class WeaponIn(BaseModel):
    weapon: str
    affinity: str = "Standard"
    upgrade_level: int = Field(default=0, ge=0)
    mode: Optional[Mode] = None  # SP for catalysts, AR otherwise
    skill: Optional[str] = None
    two_handing: bool = False

class OptimizeRequest(WeaponIn):
    # keys are attribute names or aliases (str, dex, ...); missing attributes stay at defaults
    bounds: Dict[str, BoundIn] = Field(default_factory=dict)
    points_budget: Optional[int] = Field(default=None, ge=0)

class EvaluateRequest(WeaponIn):
    stats: Dict[str, int] = Field(default_factory=dict)

class ResultOut(BaseModel):
    stats: Dict[str, int]
    score: int
    raw_score: float
    strategy: str

class OptimizeResponse(BaseModel):
    ok: bool
    result: ResultOut
