"""
プロセスとスレッドのユーティリティ関数

CPU数や書庫走査に使うワーカー数の計算など、マルチスレッド処理で
必要となる共通ユーティリティ関数を提供します。
"""

import multiprocessing
from typing import Optional

import psutil

from logutils import log_print, DEBUG, WARNING

_LOG_NAME = "proc.util"


def get_cpu_count(logical: bool = True) -> int:
    """
    システムで利用可能なCPU数を取得する

    Args:
        logical: 論理コア数を返す場合はTrue、物理コア数の場合はFalse

    Returns:
        CPU数（コア数）。取得できない場合は1
    """
    try:
        # psutilはコンテナ等で取得できないときにNoneを返す
        count = psutil.cpu_count(logical=logical)
        if count:
            return count
        return multiprocessing.cpu_count()
    except Exception as e:
        log_print(WARNING, f"CPU数の取得に失敗しました: {e}", name=_LOG_NAME)
        return 1  # エラーの場合は1を返す


def get_optimal_worker_count(single_thread: bool = False,
                             max_workers: Optional[int] = None) -> int:
    """
    書庫の走査に使うワーカー数を決定する

    書庫ごとの処理は展開（CPU）と読み込み（I/O）が混在するため、
    論理コア数をそのまま既定値とします。

    Args:
        single_thread: Trueなら常に1を返す
        max_workers: 明示的なワーカー数（Noneの場合は論理コア数）

    Returns:
        使用するワーカー数（1以上）
    """
    if single_thread:
        return 1

    if max_workers is not None:
        workers = max_workers
    else:
        workers = get_cpu_count(logical=True)

    log_print(DEBUG, f"ワーカー数: {workers} (指定値: {max_workers})", name=_LOG_NAME)

    # 最低でも1つのワーカーを確保
    return max(1, workers)
