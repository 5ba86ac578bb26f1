"""Performance monitoring for reconstruction-heavy operations."""

import time
import psutil
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
from datetime import datetime
import numpy as np
from contextlib import contextmanager
import logging


@dataclass
class PerformanceMetrics:
    """Container for performance metrics."""
    operation: str
    start_time: float
    end_time: float
    duration: float
    cpu_percent: float
    memory_mb: float
    additional_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'operation': self.operation,
            'duration_seconds': self.duration,
            'cpu_percent': self.cpu_percent,
            'memory_mb': self.memory_mb,
            'timestamp': datetime.fromtimestamp(self.start_time).isoformat(),
            **self.additional_metrics
        }


class PerformanceMonitor:
    """Monitor performance of various operations."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize performance monitor.

        Args:
            logger: Logger for performance messages
        """
        self.logger = logger or logging.getLogger(__name__)
        self.metrics_history: List[PerformanceMetrics] = []
        self.process = psutil.Process()

    @contextmanager
    def measure(self, operation: str, **kwargs):
        """Context manager to measure performance of an operation.

        Args:
            operation: Name of the operation
            **kwargs: Additional metrics to record

        Yields:
            Dict that can be updated with additional metrics
        """
        start_time = time.perf_counter()
        wall_start = time.time()
        start_cpu = self.process.cpu_percent()

        additional_metrics = kwargs.copy()

        try:
            yield additional_metrics
        finally:
            duration = time.perf_counter() - start_time

            end_cpu = self.process.cpu_percent()
            memory_mb = self.process.memory_info().rss / 1024 / 1024
            cpu_percent = (start_cpu + end_cpu) / 2

            metrics = PerformanceMetrics(
                operation=operation,
                start_time=wall_start,
                end_time=wall_start + duration,
                duration=duration,
                cpu_percent=cpu_percent,
                memory_mb=memory_mb,
                additional_metrics=additional_metrics
            )

            self.metrics_history.append(metrics)

            # Log if duration is significant
            if duration > 0.1:  # More than 100ms
                self.logger.info(
                    f"{operation} completed in {duration:.2f}s "
                    f"(CPU: {cpu_percent:.1f}%, Memory: {memory_mb:.1f}MB)"
                )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of all recorded metrics.

        Returns:
            Summary dictionary
        """
        if not self.metrics_history:
            return {'message': 'No metrics recorded'}

        # Group by operation
        operation_metrics = {}
        for metric in self.metrics_history:
            operation_metrics.setdefault(metric.operation, []).append(metric)

        summary = {
            'total_operations': len(self.metrics_history),
            'total_duration': sum(m.duration for m in self.metrics_history),
            'operations': {}
        }

        for operation, metrics in operation_metrics.items():
            durations = np.array([m.duration for m in metrics])

            summary['operations'][operation] = {
                'count': len(metrics),
                'total_duration': float(durations.sum()),
                'avg_duration': float(np.mean(durations)),
                'p95_duration': float(np.percentile(durations, 95)),
                'min_duration': float(durations.min()),
                'max_duration': float(durations.max()),
                'avg_cpu_percent': float(np.mean([m.cpu_percent for m in metrics])),
                'avg_memory_mb': float(np.mean([m.memory_mb for m in metrics])),
            }

        return summary
