"""
Shared metrics configuration for the BrowserID access service.
"""

from typing import Dict, Any, Optional
import threading
import time
from contextlib import contextmanager

from prometheus_client import Counter, Histogram, Info, CollectorRegistry, REGISTRY


class MetricsCollector:
    """Centralized metrics collector for a service."""
    
    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()
    
    def _setup_metrics(self):
        """Set up common metrics for the service."""
        namespace = self.service_name
        
        self._metrics["service_info"] = Info(
            "service",
            "Service information",
            namespace=namespace,
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })
        
        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            namespace=namespace,
            registry=self.registry
        )
        
        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            namespace=namespace,
            registry=self.registry
        )
        
        self._metrics["health_check_total"] = Counter(
            "health_check_total",
            "Total health check requests",
            ["status"],
            namespace=namespace,
            registry=self.registry
        )
        
        # Verification metrics
        self._metrics["verifications_total"] = Counter(
            "verifications_total",
            "Total BrowserID authentication attempts",
            ["outcome", "reason"],
            namespace=namespace,
            registry=self.registry
        )
        
        self._metrics["verification_duration_seconds"] = Histogram(
            "verification_duration_seconds",
            "Remote verifier round-trip duration in seconds",
            namespace=namespace,
            registry=self.registry
        )
    
    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)
    
    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()
        
        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)
    
    def record_health_check(self, status: str):
        """Record health check metrics."""
        self._metrics["health_check_total"].labels(status=status).inc()
    
    def record_verification(self, outcome: str, reason: str):
        """Record the outcome of one authentication attempt."""
        self._metrics["verifications_total"].labels(outcome=outcome, reason=reason).inc()
    
    @contextmanager
    def time_verification(self):
        """Context manager timing a verifier round-trip."""
        start_time = time.time()
        try:
            yield
        finally:
            self._metrics["verification_duration_seconds"].observe(time.time() - start_time)


_collectors: Dict[tuple, MetricsCollector] = {}
_collectors_lock = threading.Lock()


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get the metrics collector for a service, creating it once per registry."""
    key = (service_name, id(registry if registry is not None else REGISTRY))
    with _collectors_lock:
        collector = _collectors.get(key)
        if collector is None:
            collector = MetricsCollector(service_name, registry)
            _collectors[key] = collector
        return collector
