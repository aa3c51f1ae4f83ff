"""
書庫エントリの分類と走査結果の型定義

書庫内のエントリ種別、走査の結果ステータス、ネスト書庫の処理結果を表すクラス
"""

from enum import Enum, auto
from typing import Any

from logutils import log_print, log_trace, DEBUG, INFO, WARNING, ERROR


class EntryType(Enum):
    """エントリタイプを表す列挙型"""
    EMPTY = 0       # 名前が空のレコード（読み飛ばす）
    FILE = 1
    DIRECTORY = 2
    ARCHIVE = 3     # ネストされたZIP書庫

    def is_dir(self) -> bool:
        """ディレクトリタイプかどうかを判定する"""
        return self == EntryType.DIRECTORY

    def is_file(self) -> bool:
        """出力対象の通常ファイルかどうかを判定する"""
        return self == EntryType.FILE


class WalkStatus(Enum):
    """書庫1つ分の走査結果を表す列挙型"""
    COMPLETED = auto()  # 最後まで走査した
    CANCELLED = auto()  # キャンセル要求で途中終了した
    ERROR = auto()      # 書庫を開けなかった、もしくは走査中に失敗した
    SKIPPED = auto()    # シグネチャ判定で対象外になった（書庫を開いていない）


class BranchResult:
    """
    ネスト書庫1つ分（開く→再帰走査）の処理結果

    例外ではなく値として返し、呼び出し側でエラー通知に変換します。
    """

    def __init__(self, status: WalkStatus, container: str, message: str = ""):
        """
        処理結果を初期化する

        Args:
            status: 走査結果
            container: ネスト書庫のコンテナパス
            message: エラー時のメッセージ（成功時は空文字列）
        """
        self.status = status
        self.container = container
        self.message = message

    @property
    def failed(self) -> bool:
        return self.status == WalkStatus.ERROR

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BranchResult):
            return NotImplemented
        return (self.status, self.container, self.message) == (other.status, other.container, other.message)

    def __repr__(self) -> str:
        return f"BranchResult(status={self.status.name}, container={self.container!r}, message={self.message!r})"


class LoggingMixin:
    """
    クラス名をログの名前空間として使うロギング用のミックスイン
    """

    # ログ名前空間の接頭辞
    log_prefix = "arc"

    def debug_print(self, message: Any, *args, level: int = INFO, trace: bool = False, **kwargs):
        """
        デバッグ出力のラッパーメソッド

        Args:
            message: 出力するメッセージ
            *args: メッセージのフォーマット用引数
            level: ログレベル（デフォルトはINFO）
            trace: Trueならスタックトレース情報も出力する（デフォルトはFalse）
            **kwargs: 追加のキーワード引数
        """
        name = f"{self.log_prefix}.{self.__class__.__name__}"

        if trace:
            log_trace(None, level, message, *args, name=name, **kwargs)
        else:
            log_print(level, message, *args, name=name, **kwargs)

    def debug_debug(self, message: Any, *args, trace: bool = False, **kwargs):
        """DEBUGレベルのログ出力"""
        self.debug_print(message, *args, level=DEBUG, trace=trace, **kwargs)

    def debug_info(self, message: Any, *args, trace: bool = False, **kwargs):
        """INFOレベルのログ出力"""
        self.debug_print(message, *args, level=INFO, trace=trace, **kwargs)

    def debug_warning(self, message: Any, *args, trace: bool = False, **kwargs):
        """WARNINGレベルのログ出力"""
        self.debug_print(message, *args, level=WARNING, trace=trace, **kwargs)

    def debug_error(self, message: Any, *args, trace: bool = False, **kwargs):
        """ERRORレベルのログ出力"""
        self.debug_print(message, *args, level=ERROR, trace=trace, **kwargs)
