# apps/api/main.py
from __future__ import annotations

import os
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from apps.api.routers.optimize import router as optimize_router
from apps.api.routers.health import router as health_router
from stat_optimizer.io.loader import Loader
from stat_optimizer.models import GameData, SolverSettings
from stat_optimizer.optimizer import StatOptimizer


def _setup_logger() -> logging.Logger:
    logger = logging.getLogger("api")
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[API] %(asctime)s | %(levelname)s | %(message)s"))
        logger.addHandler(h)
    logger.propagate = False
    return logger


def create_app(data: Optional[GameData] = None, settings: Optional[SolverSettings] = None) -> FastAPI:
    app = FastAPI(title="Stat Optimizer API", version="1.0.0")

    # ---- Logger ----
    logger = _setup_logger()
    app.state.logger = logger

    # ---- Game data / settings (injected, or from the environment) ----
    loader = Loader(logger)
    if settings is None:
        settings = loader.load_settings_or_default(os.getenv("STAT_OPTIMIZER_SETTINGS") or None)
    if data is None:
        data_path = os.getenv("STAT_OPTIMIZER_DATA", "")
        if data_path and os.path.isfile(data_path):
            data = loader.load_game_data(data_path)
        else:
            logger.warning("STAT_OPTIMIZER_DATA not set or missing. /optimize will answer 503.")

    app.state.data = data
    app.state.optimizer = StatOptimizer(data, logger=logger, settings=settings) if data is not None else None

    # ---- Middleware ----
    app.add_middleware(GZipMiddleware, minimum_size=1024)

    # ---- Routers ----
    app.include_router(optimize_router, tags=["optimize"])
    app.include_router(health_router, tags=["meta"])

    return app


app = create_app()
