"""
Prometheus metrics definitions for the API.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# AI quota metrics
ai_quota_checks_total = Counter(
    'ai_quota_checks_total',
    'Total AI quota checks',
    ['feature', 'outcome']
)

ai_usage_logged_total = Counter(
    'ai_usage_logged_total',
    'Total AI usage log attempts',
    ['feature', 'status']
)

ai_quota_check_duration_seconds = Histogram(
    'ai_quota_check_duration_seconds',
    'AI quota check duration in seconds (store round trip)',
    ['feature'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Nutrition metrics
nutrition_plans_computed_total = Counter(
    'nutrition_plans_computed_total',
    'Total nutrition plans computed',
    ['strategy']
)
