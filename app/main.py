"""
ZipDir エントリーポイント

フォルダ以下のZIP書庫（ネストされたZIPを含む）の中身を一覧表示する
"""
import os
import sys
import threading
from typing import Optional, Sequence

from logutils import setup_logging, log_print, log_trace, DEBUG, ERROR, CRITICAL
from arc.searcher import search_folder

from .config import ConfigError, HelpRequested, format_help, parse_command_line
from .output import ConsoleOutput
from .version import get_banner

# 終了コード
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def _discard_stdout() -> None:
    """標準出力をnullデバイスに差し替え、終了時のflushで再びエラーにならないようにする"""
    try:
        stdout_fd = sys.stdout.fileno()
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, stdout_fd)
        os.close(devnull)
    except (OSError, ValueError):
        # ファイル記述子を持たない出力先（テストのキャプチャなど）では何もしない
        pass


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    メイン関数

    Args:
        argv: コマンドライン引数（Noneの場合は sys.argv[1:]）

    Returns:
        終了コード
    """
    try:
        config = parse_command_line(argv)
    except HelpRequested:
        print(get_banner(20))
        print(format_help())
        return EXIT_OK
    except ConfigError as e:
        print(f"ERROR: {e}\n")
        print(get_banner(12))
        print(format_help())
        return EXIT_ERROR

    # デバッグモードが指定されていれば、ログレベルを調整
    setup_logging(DEBUG if config.debug else ERROR, config.log_file)
    log_print(DEBUG, f"設定: {config}", name="app.main")

    output = ConsoleOutput(raw=config.raw)
    cancel_event = threading.Event()
    try:
        output.message(get_banner(12))
        output.message("Single thread mode" if config.single_thread else "Multi-thread mode")
        output.message(
            f"Folder: {config.folder}, pattern: {config.pattern}, searching by {config.mode_name}",
            blank_line=True
        )
        summary = search_folder(config, output, cancel_event=cancel_event)
    except KeyboardInterrupt:
        cancel_event.set()
        output.error("cancelled")
        return EXIT_INTERRUPTED
    except BrokenPipeError:
        # 出力先（head などのパイプ）が先に閉じられた。残りの出力は捨てて正常終了する
        cancel_event.set()
        _discard_stdout()
        log_print(DEBUG, "出力先のパイプが閉じられました", name="app.main")
        return EXIT_OK
    except Exception as e:
        # 検索そのものが失敗した場合（書庫単位の失敗はここまで来ない）
        log_trace(e, CRITICAL, f"検索中にエラーが発生しました: {e}", name="app.main")
        output.error(f"ERROR: {e}")
        return EXIT_ERROR

    log_print(DEBUG, f"検索完了: {summary}", name="app.main")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
