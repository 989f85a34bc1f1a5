"""
Database models package.
"""
from calorel.models.base import Base
from calorel.models.user import User
from calorel.models.ai_usage import AIUsageLog, AIFeature

__all__ = [
    "Base",
    "User",
    "AIUsageLog",
    "AIFeature",
]
