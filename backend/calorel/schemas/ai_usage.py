"""
Pydantic schemas for AI usage quota endpoints.
"""
from pydantic import BaseModel
from typing import Optional

from calorel.models.ai_usage import AIFeature
from calorel.services.quota_service import QuotaDecision, QuotaStatus, TimeFrame


class QuotaDecisionResponse(BaseModel):
    """Schema for a quota check result."""
    feature: AIFeature
    allowed: bool
    status: QuotaStatus
    limit: Optional[int] = None
    time_frame: Optional[TimeFrame] = None
    used: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def from_decision(cls, feature: AIFeature, decision: QuotaDecision) -> "QuotaDecisionResponse":
        return cls(
            feature=feature,
            allowed=decision.allowed,
            status=decision.status,
            limit=decision.limit,
            time_frame=decision.time_frame,
            used=decision.used,
            message=decision.message,
        )


class UsageLoggedResponse(BaseModel):
    """Schema for a usage log result."""
    feature: AIFeature
    logged: bool
