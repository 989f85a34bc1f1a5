"""
AI usage quota gate.

Check-then-act: callers ask `check_limit` before running an AI-backed action
and call `log_usage` after it succeeds. The count and the insert are separate
statements, so concurrent requests from the same user can both pass the check
before either is logged. The limit is a soft limit; a hard cap would need an
atomic conditional insert in the store.
"""
import enum
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from calorel.config import settings
from calorel.models.ai_usage import AIFeature
from calorel.repositories.usage_log_repository import UsageLogRepository, UsageStoreUnavailable
from calorel.utils.logging import (
    log_quota_checked,
    log_quota_store_unavailable,
    log_usage_logged,
    log_usage_log_failed,
)
from calorel.utils.metrics import (
    ai_quota_checks_total,
    ai_quota_check_duration_seconds,
    ai_usage_logged_total,
)

logger = logging.getLogger(__name__)


class TimeFrame(str, enum.Enum):
    DAILY = "daily"  # since start of the current calendar day
    WEEKLY = "weekly"  # rolling, now - 7 days


class QuotaStatus(str, enum.Enum):
    ALLOWED = "allowed"
    QUOTA_EXCEEDED = "quota_exceeded"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True)
class FeaturePolicy:
    limit: int
    time_frame: TimeFrame = TimeFrame.DAILY


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of a quota check. Never persisted."""

    status: QuotaStatus
    limit: Optional[int]
    time_frame: Optional[TimeFrame]
    used: Optional[int] = None
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.status == QuotaStatus.ALLOWED


DEFAULT_LANGUAGE = "es"

TIME_FRAME_WORDS: Dict[str, Dict[TimeFrame, str]] = {
    "es": {TimeFrame.DAILY: "diario", TimeFrame.WEEKLY: "semanal"},
    "en": {TimeFrame.DAILY: "daily", TimeFrame.WEEKLY: "weekly"},
}

QUOTA_EXCEEDED_MESSAGES = {
    "es": "Has alcanzado tu límite {time_frame} de {limit} usos de IA para esta función. Inténtalo de nuevo más tarde.",
    "en": "You have reached your {time_frame} limit of {limit} AI uses for this feature. Please try again later.",
}

STORE_UNAVAILABLE_MESSAGES = {
    "es": "No pudimos verificar tu límite de uso de IA. Inténtalo de nuevo en unos minutos.",
    "en": "We could not verify your AI usage limit. Please try again in a few minutes.",
}


def quota_exceeded_message(limit: int, time_frame: TimeFrame, language: Optional[str] = None) -> str:
    """User-facing denial text naming the limit and the localized time-frame word."""
    lang = language if language in QUOTA_EXCEEDED_MESSAGES else DEFAULT_LANGUAGE
    return QUOTA_EXCEEDED_MESSAGES[lang].format(
        time_frame=TIME_FRAME_WORDS[lang][time_frame],
        limit=limit
    )


def window_start(time_frame: TimeFrame, now: datetime, tz_name: str = "UTC") -> datetime:
    """
    Start of the counting window as a naive UTC datetime (the storage format).

    Args:
        time_frame: DAILY or WEEKLY
        now: Current time; naive values are taken as UTC
        tz_name: IANA timezone whose calendar day bounds DAILY windows
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if TimeFrame(time_frame) == TimeFrame.WEEKLY:
        start = now - timedelta(days=7)
    else:
        local_now = now.astimezone(ZoneInfo(tz_name))
        start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)

    return start.astimezone(timezone.utc).replace(tzinfo=None)


def _load_policies(raw: Dict[str, Optional[dict]]) -> Dict[AIFeature, Optional[FeaturePolicy]]:
    policies = {}
    for name, cfg in raw.items():
        feature = AIFeature(name)
        if cfg is None:
            policies[feature] = None
        else:
            policies[feature] = FeaturePolicy(
                limit=int(cfg["limit"]),
                time_frame=TimeFrame(cfg.get("time_frame", TimeFrame.DAILY.value))
            )
    return policies


class QuotaService:
    """Service for checking and recording AI feature usage."""

    @staticmethod
    def get_policies() -> Dict[AIFeature, Optional[FeaturePolicy]]:
        return _load_policies(settings.ai_feature_limits)

    @staticmethod
    def is_unlimited(feature: AIFeature) -> bool:
        policies = QuotaService.get_policies()
        return feature in policies and policies[feature] is None

    @staticmethod
    def resolve_policy(
        feature: AIFeature,
        limit: Optional[int] = None,
        time_frame: Optional[TimeFrame] = None
    ) -> Optional[FeaturePolicy]:
        """
        Combine caller-supplied limit/time frame with the configured policy.

        Returns:
            The policy to apply, or None if the feature is unlimited

        Raises:
            ValueError: If no limit is given and none is configured, or limit is negative
        """
        policies = QuotaService.get_policies()
        if feature in policies and policies[feature] is None:
            return None

        configured = policies.get(feature)
        if limit is None:
            if configured is None:
                raise ValueError(f"No usage limit configured for feature '{feature.value}'")
            limit = configured.limit
        if limit < 0:
            raise ValueError("Usage limit cannot be negative")

        if time_frame is None:
            time_frame = configured.time_frame if configured else TimeFrame.DAILY

        return FeaturePolicy(limit=limit, time_frame=TimeFrame(time_frame))

    @staticmethod
    async def check_limit(
        db: AsyncSession,
        user_id: str,
        feature: AIFeature,
        limit: Optional[int] = None,
        time_frame: Optional[TimeFrame] = None,
        now: Optional[datetime] = None,
        language: Optional[str] = None
    ) -> QuotaDecision:
        """
        Decide whether the user may run the feature once more.

        Args:
            db: Database session
            user_id: User ID
            feature: AI feature tag
            limit: Max uses per window (configured policy if None)
            time_frame: Window kind (configured policy if None)
            now: Current time, for tests (UTC now if None)
            language: Language of the denial message

        Returns:
            QuotaDecision; store failures give STORE_UNAVAILABLE, not QUOTA_EXCEEDED
        """
        feature = AIFeature(feature)
        policy = QuotaService.resolve_policy(feature, limit, time_frame)
        if policy is None:
            ai_quota_checks_total.labels(feature=feature.value, outcome="unlimited").inc()
            return QuotaDecision(status=QuotaStatus.ALLOWED, limit=None, time_frame=None)

        now = now or datetime.now(timezone.utc)
        since = window_start(policy.time_frame, now, settings.quota_timezone)

        start_time = time.time()
        try:
            used = await UsageLogRepository.count_since(db, user_id, feature, since)
        except UsageStoreUnavailable as e:
            ai_quota_checks_total.labels(feature=feature.value, outcome=QuotaStatus.STORE_UNAVAILABLE.value).inc()
            log_quota_store_unavailable(
                logger, user_id=user_id, feature=feature.value, error=str(e.cause), operation=e.operation
            )
            lang = language if language in STORE_UNAVAILABLE_MESSAGES else DEFAULT_LANGUAGE
            return QuotaDecision(
                status=QuotaStatus.STORE_UNAVAILABLE,
                limit=policy.limit,
                time_frame=policy.time_frame,
                message=STORE_UNAVAILABLE_MESSAGES[lang]
            )
        duration = time.time() - start_time
        ai_quota_check_duration_seconds.labels(feature=feature.value).observe(duration)

        if used >= policy.limit:
            decision = QuotaDecision(
                status=QuotaStatus.QUOTA_EXCEEDED,
                limit=policy.limit,
                time_frame=policy.time_frame,
                used=used,
                message=quota_exceeded_message(policy.limit, policy.time_frame, language)
            )
        else:
            decision = QuotaDecision(
                status=QuotaStatus.ALLOWED,
                limit=policy.limit,
                time_frame=policy.time_frame,
                used=used
            )

        ai_quota_checks_total.labels(feature=feature.value, outcome=decision.status.value).inc()
        log_quota_checked(
            logger,
            user_id=user_id,
            feature=feature.value,
            outcome=decision.status.value,
            used=used,
            limit=policy.limit,
            time_frame=policy.time_frame.value,
            duration_ms=duration * 1000
        )
        return decision

    @staticmethod
    async def log_usage(
        db: AsyncSession,
        user_id: str,
        feature: AIFeature,
        now: Optional[datetime] = None
    ) -> bool:
        """
        Record one use of the feature.

        Never raises: the gated action already happened, so a failed insert is
        logged and counted but not propagated.

        Args:
            db: Database session
            user_id: User ID
            feature: AI feature tag
            now: Optional timestamp override (naive or aware UTC)

        Returns:
            True if a row was written, False if skipped (unlimited) or failed
        """
        feature = AIFeature(feature)
        if QuotaService.is_unlimited(feature):
            ai_usage_logged_total.labels(feature=feature.value, status="skipped").inc()
            return False

        created_at = None
        if now is not None:
            created_at = now.astimezone(timezone.utc).replace(tzinfo=None) if now.tzinfo else now

        start_time = time.time()
        try:
            await UsageLogRepository.append(db, user_id, feature, created_at=created_at)
        except (UsageStoreUnavailable, SQLAlchemyError) as e:
            ai_usage_logged_total.labels(feature=feature.value, status="failed").inc()
            log_usage_log_failed(
                logger,
                user_id=user_id,
                feature=feature.value,
                error=str(e),
                duration_ms=(time.time() - start_time) * 1000
            )
            return False

        ai_usage_logged_total.labels(feature=feature.value, status="logged").inc()
        log_usage_logged(
            logger,
            user_id=user_id,
            feature=feature.value,
            duration_ms=(time.time() - start_time) * 1000
        )
        return True
