"""
AIUsageLog model: one append-only row per AI invocation.
Counting rows per (user, feature) inside a time window gives quota state.
"""
import enum

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Index
from datetime import datetime

from calorel.models.base import Base, generate_uuid


class AIFeature(str, enum.Enum):
    """AI-backed features subject to usage quotas."""
    FOOD_SCAN = "food_scan"
    EXERCISE_AI = "exercise_ai"
    DIET_PLAN = "diet_plan"
    AI_SUGGESTIONS = "ai_suggestions"
    MANUAL_FOOD_SCAN = "manual_food_scan"


class AIUsageLog(Base):
    """Usage record. Never updated or deleted by the application."""
    
    __tablename__ = "ai_usage_logs"
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    feature = Column(
        Enum(AIFeature, values_callable=lambda obj: [e.value for e in obj], name="aifeature"),
        nullable=False
    )
    
    # Assigned at insert time (UTC, naive)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    __table_args__ = (
        Index("idx_ai_usage_user_feature_created", "user_id", "feature", "created_at"),
    )
    
    def __repr__(self):
        return f"<AIUsageLog(user_id={self.user_id}, feature={self.feature}, created_at={self.created_at})>"
