"""
Users services.

    - worker_stats: Activity summary for a worker profile
"""

from .worker_stats import get_worker_stats

__all__ = [
    'get_worker_stats',
]
