"""Time distribution API endpoints.

Preview only: the response carries the new durations, and the client writes
them back to the tracker.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from worklog_engine.config.settings import Settings, settings
from worklog_engine.distribution.engine import distribute_time
from worklog_engine.distribution.errors import DistributionInvariantError, DistributionPreconditionError
from worklog_engine.distribution.models import ScoreFn
from worklog_engine.schemas.distribution import (
    DistributionErrorResponse,
    DistributionPreviewRequest,
    DistributionPreviewResponse,
)
from worklog_engine.scoring.llm_scorer import build_llm_scorer

router = APIRouter(prefix="/distribution", tags=["distribution"])


def get_settings() -> Settings:
    return settings


def get_complexity_scorer(cfg: Settings = Depends(get_settings)) -> ScoreFn:
    return build_llm_scorer(cfg)


@router.post(
    "/preview",
    response_model=DistributionPreviewResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": DistributionErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": DistributionErrorResponse},
    },
)
async def preview_distribution(
    request: DistributionPreviewRequest,
    cfg: Settings = Depends(get_settings),
    scorer: ScoreFn = Depends(get_complexity_scorer),
) -> DistributionPreviewResponse:
    """Compute new durations for a set of worklogs.

    Raises:
        HTTPException: 400 on invalid input, 500 if the allocation invariant fails
    """
    target_hours = request.target_hours if request.target_hours is not None else cfg.default_target_hours
    logger.info(
        "Distribution preview requested",
        entries=len(request.entries),
        target_hours=target_hours,
        mode=request.mode.value,
    )

    try:
        outcome = await distribute_time(
            request.entries,
            target_hours,
            request.mode,
            scorer,
            settings=cfg,
        )
    except DistributionPreconditionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": e.code, "details": e.details},
        ) from e
    except DistributionInvariantError as e:
        logger.exception("Distribution invariant failed", code=e.code)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": e.code, "details": e.details},
        ) from e

    return DistributionPreviewResponse(
        mode=outcome.mode,
        target_hours=outcome.target_hours,
        target_minutes=outcome.target_minutes,
        total_minutes=outcome.total_minutes,
        total_hours=outcome.total_hours,
        results=outcome.results,
        weights=outcome.weights,
        used_fallback=outcome.used_fallback,
        warnings=outcome.warnings,
    )
