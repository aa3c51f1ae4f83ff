"""
フォルダ内のZIP書庫の検索と走査

指定フォルダ以下からパターンに一致するファイルを再帰的に列挙し、除外パターンで
絞り込んだうえで、ファイルごとに書庫の走査をワーカースレッドに割り当てる。
"""
import os
import fnmatch
import threading
import concurrent.futures
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional

from logutils import log_print, WARNING
from proc.util import get_optimal_worker_count

from .arc import LoggingMixin, WalkStatus
from .detector import ArchiveDetector, create_detector
from .walker import ArchiveWalker

# 除外パターンをglobとして扱うかどうかの判定に使う文字
WILDCARD_CHARS = ('*', '?')


def find_candidates(folder: str, pattern: str) -> List[str]:
    """
    フォルダ以下のパターンに一致するファイルを再帰的に列挙する

    ファイル名とパターンの比較は大文字小文字を区別しない。
    アクセスできないディレクトリは読み飛ばす。

    Args:
        folder: 検索を開始するフォルダ
        pattern: ファイル名のglobパターン

    Returns:
        一致したファイルパスのリスト（ディレクトリ順、名前順）
    """
    lowered = pattern.lower()
    results = []

    def _on_error(e: OSError) -> None:
        log_print(WARNING, f"ディレクトリを読み込めません: {e}", name="arc.searcher")

    for root, dirs, files in os.walk(folder, onerror=_on_error):
        dirs.sort()
        for name in sorted(files):
            if fnmatch.fnmatchcase(name.lower(), lowered):
                results.append(os.path.join(root, name))

    return results


def _make_matcher(pattern: str) -> Callable[[str], bool]:
    """除外パターン1つ分の判定関数を作成する"""
    lowered = pattern.lower()
    if any(c in pattern for c in WILDCARD_CHARS):
        # パス全体に対するglob
        return lambda path: fnmatch.fnmatchcase(path.lower(), lowered)
    # パス中の部分一致
    return lambda path: lowered in path.lower()


def make_exclude_predicate(excludes: Iterable[str]) -> Optional[Callable[[str], bool]]:
    """
    除外パターンから「除外するか」を返す判定関数を作成する

    Args:
        excludes: 除外パターンのリスト

    Returns:
        判定関数。除外パターンがない場合はNone
    """
    matchers = [_make_matcher(p) for p in excludes]
    if not matchers:
        return None
    if len(matchers) == 1:
        return matchers[0]
    return lambda path: any(m(path) for m in matchers)


def filter_excludes(files: List[str], excludes: Iterable[str]) -> List[str]:
    """
    除外パターンに一致するファイルを取り除く

    Args:
        files: ファイルパスのリスト
        excludes: 除外パターンのリスト

    Returns:
        除外後のファイルパスのリスト
    """
    predicate = make_exclude_predicate(excludes)
    if predicate is None:
        return list(files)
    return [f for f in files if not predicate(f)]


class SearchSummary:
    """検索と走査の集計結果"""

    def __init__(self, candidates: int = 0):
        self.candidates = candidates
        self.walked = 0
        self.rejected = 0
        self.errors = 0
        self.cancelled = 0

    def add(self, status: WalkStatus) -> None:
        """ファイル1つ分の結果を集計に加える"""
        if status == WalkStatus.COMPLETED:
            self.walked += 1
        elif status == WalkStatus.SKIPPED:
            self.rejected += 1
        elif status == WalkStatus.ERROR:
            self.errors += 1
        elif status == WalkStatus.CANCELLED:
            self.cancelled += 1

    def __repr__(self):
        return (f"<SearchSummary candidates={self.candidates} walked={self.walked} "
                f"rejected={self.rejected} errors={self.errors} cancelled={self.cancelled}>")


class FolderSearcher(LoggingMixin):
    """
    フォルダ内のZIP書庫を検索して走査するクラス

    ファイルごとの失敗はそのファイルの中で完結させ、他のファイルの処理は継続する。
    """

    def __init__(self, config, output, detector: Optional[ArchiveDetector] = None,
                 cancel_event: Optional[threading.Event] = None):
        """
        検索クラスを初期化する

        Args:
            config: 検索設定（folder, pattern, excludes, by_extension,
                    single_thread, max_workers を持つオブジェクト）
            output: 出力先（write_line, message, error を持つオブジェクト）
            detector: 判定器（省略時は config.by_extension から作成）
            cancel_event: キャンセル通知用のイベント
        """
        self.config = config
        self.output = output
        self.detector = detector or create_detector(config.by_extension)
        self.cancel_event = cancel_event or threading.Event()
        self.walker = ArchiveWalker(self.detector, output, is_cancelled=self.cancel_event.is_set)

    def collect_candidates(self) -> List[str]:
        """パターンに一致し、除外されなかったファイルの一覧を取得する"""
        files = find_candidates(self.config.folder, self.config.pattern)
        self.debug_debug(f"{len(files)} ファイルがパターン {self.config.pattern} に一致しました")
        return filter_excludes(files, self.config.excludes)

    def search(self) -> SearchSummary:
        """
        検索と走査を実行する

        Returns:
            集計結果
        """
        files = self.collect_candidates()
        summary = SearchSummary(len(files))

        self.output.message(f"{len(files)} {self.detector.candidate_label} file(s) identified...")

        workers = get_optimal_worker_count(
            single_thread=self.config.single_thread,
            max_workers=getattr(self.config, 'max_workers', None)
        )

        if workers == 1 or len(files) <= 1:
            # シングルスレッドで順番に処理
            self.debug_info(f"シングルスレッドで処理 (ファイル数: {len(files)})")
            for path in files:
                summary.add(self.process_file(path))
            return summary

        actual_workers = min(workers, len(files))
        self.debug_info(f"マルチスレッドで処理 (ファイル数: {len(files)}, ワーカー数: {actual_workers})")

        with ThreadPoolExecutor(max_workers=actual_workers) as executor:
            futures = {executor.submit(self.process_file, path): path for path in files}
            try:
                for future in concurrent.futures.as_completed(futures):
                    summary.add(future.result())
            except BaseException:
                # 中断や出力の失敗では、実行中の走査はエントリ単位で停止し、待機中のものは開始しない
                self.cancel_event.set()
                for future in futures:
                    future.cancel()
                raise

        return summary

    def process_file(self, path: str) -> WalkStatus:
        """
        ファイル1つを処理する

        Args:
            path: 物理ファイルのパス

        Returns:
            処理結果。書庫の失敗は ERROR として返す

        Raises:
            OSError: 出力先への書き込みに失敗した場合（BrokenPipeError など）
        """
        if self.cancel_event.is_set():
            return WalkStatus.CANCELLED

        try:
            if not self.detector.should_walk(path):
                return WalkStatus.SKIPPED
            zf = self.walker.open_archive(path)
        except Exception as e:
            self.debug_warning(f"書庫を開けませんでした: {path} - {e}")
            self.output.error(f"error in zip: {path} - {str(e) or e.__class__.__name__}")
            return WalkStatus.ERROR

        # 走査中の書庫の失敗はネスト単位で処理済み。ここから伝播するのは出力の失敗のみ
        with zf:
            return self.walker.walk(path, zf)


def search_folder(config, output, cancel_event: Optional[threading.Event] = None) -> SearchSummary:
    """
    設定に従ってフォルダ内の書庫を検索して走査する

    Args:
        config: 検索設定
        output: 出力先
        cancel_event: キャンセル通知用のイベント

    Returns:
        集計結果
    """
    return FolderSearcher(config, output, cancel_event=cancel_event).search()
