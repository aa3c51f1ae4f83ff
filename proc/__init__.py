"""
ワーカー補助モジュール

書庫走査のワーカー数を決めるためのユーティリティを提供します。
"""

from .util import get_cpu_count, get_optimal_worker_count

__all__ = [
    'get_cpu_count', 'get_optimal_worker_count'
]
