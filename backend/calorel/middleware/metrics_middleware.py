"""
ASGI middleware for tracking HTTP request metrics.
Records request count, duration, and errors.
"""
import re
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from calorel.models.ai_usage import AIFeature
from calorel.utils.metrics import http_requests_total, http_request_duration_seconds, errors_total

_FEATURES = {feature.value for feature in AIFeature}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP metrics for Prometheus."""
    
    async def dispatch(self, request: Request, call_next):
        """Process request and record metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)
        
        start_time = time.time()
        method = request.method
        normalized_path = self._normalize_path(request.url.path)
        
        try:
            response = await call_next(request)
        except Exception:
            errors_total.labels(error_type="exception").inc()
            raise
        
        status_code = response.status_code
        http_requests_total.labels(
            method=method,
            path=normalized_path,
            status=status_code
        ).inc()
        http_request_duration_seconds.labels(
            method=method,
            path=normalized_path
        ).observe(time.time() - start_time)
        
        # Track errors (4xx and 5xx)
        if status_code >= 400:
            errors_total.labels(error_type=f"{status_code // 100}xx").inc()
        
        return response
    
    def _normalize_path(self, path: str) -> str:
        """
        Normalize path to reduce cardinality.
        Unknown segments under /api/ai-usage/ collapse to {feature}.
        """
        path = re.sub(
            r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}',
            '{id}',
            path,
            flags=re.IGNORECASE
        )
        
        match = re.match(r'^(/api/ai-usage/)([^/]+)(.*)$', path)
        if match and match.group(2) not in _FEATURES:
            path = f"{match.group(1)}{{feature}}{match.group(3)}"
        
        return path
