"""
AI usage quota endpoints.
The app checks the quota before calling an AI feature and logs the usage
after the call succeeds. All endpoints require Firebase JWT authentication.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from calorel.database import get_db
from calorel.models.ai_usage import AIFeature
from calorel.models.user import User
from calorel.auth.dependencies import get_current_user
from calorel.schemas.ai_usage import QuotaDecisionResponse, UsageLoggedResponse
from calorel.services.quota_service import QuotaService, QuotaStatus, TimeFrame

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/{feature}/check",
    response_model=QuotaDecisionResponse,
    responses={503: {"model": QuotaDecisionResponse}}
)
async def check_limit(
    feature: AIFeature,
    limit: Optional[int] = Query(None, ge=0, description="Max uses per window; configured policy if omitted"),
    time_frame: Optional[TimeFrame] = Query(None, description="daily or weekly; configured policy if omitted"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Check whether the user may use an AI feature once more.

    - 200 with allowed=true: go ahead, then POST /ai-usage/{feature}
    - 200 with allowed=false: quota exhausted, show `message`
    - 503: usage store unavailable; the caller picks fail-open or fail-closed
    """
    try:
        decision = await QuotaService.check_limit(
            db,
            user_id=current_user.id,
            feature=feature,
            limit=limit,
            time_frame=time_frame,
            language=current_user.preferred_language
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    response = QuotaDecisionResponse.from_decision(feature, decision)
    if decision.status == QuotaStatus.STORE_UNAVAILABLE:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(mode="json")
        )
    return response


@router.post("/{feature}", response_model=UsageLoggedResponse, status_code=status.HTTP_202_ACCEPTED)
async def log_usage(
    feature: AIFeature,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Record one use of an AI feature.
    Always 202: a failed write is logged server side and reported as logged=false.
    """
    logged = await QuotaService.log_usage(db, user_id=current_user.id, feature=feature)
    return UsageLoggedResponse(feature=feature, logged=logged)
