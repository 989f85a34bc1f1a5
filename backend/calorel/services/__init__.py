"""
Business logic services.
"""
from calorel.services.quota_service import QuotaService
from calorel.services import nutrition_calculator

__all__ = [
    "QuotaService",
    "nutrition_calculator",
]
