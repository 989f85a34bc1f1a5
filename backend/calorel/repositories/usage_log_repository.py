"""
Repository for AI usage log operations.
Counts and appends rows in the append-only ai_usage_logs table.
"""
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, func

from calorel.models.ai_usage import AIUsageLog, AIFeature


class UsageStoreUnavailable(Exception):
    """The usage log store could not be read or written."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"usage store {operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class UsageLogRepository:
    """Repository for usage log database operations."""
    
    @staticmethod
    async def count_since(
        db: AsyncSession,
        user_id: str,
        feature: AIFeature,
        since: datetime
    ) -> int:
        """
        Count usage rows for a user and feature created at or after `since`.
        
        Args:
            db: Database session
            user_id: User ID
            feature: AI feature tag
            since: Window start (naive UTC)
            
        Returns:
            Number of matching rows
            
        Raises:
            UsageStoreUnavailable: If the query fails
        """
        try:
            result = await db.execute(
                select(func.count(AIUsageLog.id)).where(
                    AIUsageLog.user_id == user_id,
                    AIUsageLog.feature == feature,
                    AIUsageLog.created_at >= since
                )
            )
            return result.scalar_one() or 0
        except SQLAlchemyError as e:
            raise UsageStoreUnavailable("count", e) from e
    
    @staticmethod
    async def append(
        db: AsyncSession,
        user_id: str,
        feature: AIFeature,
        created_at: datetime = None
    ) -> AIUsageLog:
        """
        Append one usage row and commit.
        
        Args:
            db: Database session
            user_id: User ID
            feature: AI feature tag
            created_at: Optional timestamp override (naive UTC); store time otherwise
            
        Raises:
            UsageStoreUnavailable: If the insert or commit fails
        """
        record = AIUsageLog(user_id=user_id, feature=feature)
        if created_at is not None:
            record.created_at = created_at
        
        try:
            db.add(record)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise UsageStoreUnavailable("append", e) from e
        
        return record
