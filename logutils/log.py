"""
ロギング用ユーティリティ

ZipDir全体でのロギング操作を統一的に扱うためのユーティリティ関数群。
標準出力はファイル一覧の出力先として予約されているため、ログは標準エラー
（と任意のログファイル）にのみ出力します。
"""
import os
import sys
import traceback
from typing import Optional, Any

# Pythonの標準loggingモジュールをインポート
import logging as py_logging

# ログレベルの定数定義
DEBUG = 10
INFO = 20
WARNING = 30
ERROR = 40
CRITICAL = 50

# デフォルトのログレベル（通常実行では標準エラーを空に保つ）
_log_level = ERROR

# ロガーオブジェクトの格納用辞書
_loggers = {}

# ログファイルのパス
_log_file: Optional[str] = None

_FORMAT = '%(asctime)s [%(name)s] %(levelname)s: %(message)s'


def setup_logging(level: int = ERROR, logfile: str = None) -> None:
    """
    ロギングシステムをセットアップする

    Args:
        level: ログレベル（デフォルトはERROR）
        logfile: ログの出力先ファイル（デフォルトはNone）
    """
    global _log_level, _log_file
    _log_level = level
    _log_file = None

    if logfile:
        try:
            # ログディレクトリが存在しない場合は作成
            log_dir = os.path.dirname(logfile)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)
            # 書き込めるかどうかだけ先に確認する
            with open(logfile, 'a', encoding='utf-8'):
                pass
            _log_file = logfile
        except OSError as e:
            sys.stderr.write(f"ログファイルを開けませんでした: {e}\n")

    # 既存のロガーのレベルとハンドラを更新
    for logger in _loggers.values():
        logger.setLevel(_log_level)
        _sync_file_handler(logger)


def _sync_file_handler(logger: py_logging.Logger) -> None:
    """ロガーのFileHandlerを現在のログファイル設定に合わせる"""
    target = os.path.abspath(_log_file) if _log_file else None
    found = False
    for handler in list(logger.handlers):
        if not isinstance(handler, py_logging.FileHandler):
            continue
        if handler.baseFilename == target:
            found = True
        else:
            # 以前のログファイルは閉じて外す
            logger.removeHandler(handler)
            handler.close()
    if target and not found:
        file_handler = py_logging.FileHandler(target, encoding='utf-8')
        file_handler.setFormatter(py_logging.Formatter(_FORMAT))
        logger.addHandler(file_handler)


def get_logger(name: str) -> py_logging.Logger:
    """
    名前付きのロガーを取得する

    Args:
        name: ロガー名

    Returns:
        設定済みのロガーオブジェクト
    """
    if name in _loggers:
        return _loggers[name]

    # 新しいロガーを作成
    logger = py_logging.getLogger(name)
    logger.setLevel(_log_level)
    # ルートロガーへの伝播は行わない（二重出力防止）
    logger.propagate = False

    # コンソールハンドラーは標準エラーへ
    console = py_logging.StreamHandler(sys.stderr)
    console.setFormatter(py_logging.Formatter(_FORMAT))
    logger.addHandler(console)

    _sync_file_handler(logger)

    _loggers[name] = logger
    return logger


def get_level() -> int:
    """現在のログレベルを返す"""
    return _log_level


def log_print(level: int, message: Any, *args, name: str = None, **kwargs) -> None:
    """
    指定したレベルでメッセージをログに出力する

    Args:
        level: ログレベル
        message: 出力するメッセージ
        *args: メッセージのフォーマット引数
        name: ロガー名（デフォルトは'zipdir'）
        **kwargs: その他のキーワード引数
    """
    if level < _log_level:
        return

    logger = get_logger(name or 'zipdir')
    logger.log(level, message, *args, **kwargs)


def log_trace(e: Optional[BaseException], level: int, message: Any, *args, name: str = None, **kwargs) -> None:
    """
    例外のトレース情報を含めてログに出力する

    Args:
        e: 例外オブジェクト（NoneでもOK）
        level: ログレベル
        message: 出力するメッセージ
        *args: メッセージのフォーマット引数
        name: ロガー名（デフォルトは'zipdir'）
        **kwargs: その他のキーワード引数
    """
    if level < _log_level:
        return

    # まずメッセージを出力
    log_print(level, message, *args, name=name, **kwargs)

    # スタックトレースを取得して出力
    if e:
        stack = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
    else:
        stack = ''.join(traceback.format_stack()[:-1])  # 自分自身の呼び出しを除外

    get_logger(name or 'zipdir').log(level, f"スタックトレース:\n{stack}")
