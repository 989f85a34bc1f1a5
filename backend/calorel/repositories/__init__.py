"""
Repository layer for database operations.
"""
from calorel.repositories.usage_log_repository import UsageLogRepository, UsageStoreUnavailable

__all__ = ["UsageLogRepository", "UsageStoreUnavailable"]
