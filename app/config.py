"""
コマンドライン設定

コマンドライン引数を解析して、検索設定（ScanConfig）を作成する
"""
import os
import sys
import argparse
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from arc.detector import ExtensionDetector, SignatureDetector
from arc.path_utils import normalize_folder


class ConfigError(Exception):
    """コマンドラインや設定の誤り（終了コード1で終了する）"""


class HelpRequested(Exception):
    """ヘルプ表示が要求された（終了コード0で終了する）"""


@dataclass(frozen=True)
class ScanConfig:
    """
    検索設定

    すべてのフィールドで値比較できるよう、除外パターンはタプルで保持する。
    """
    folder: str
    pattern: str
    excludes: Tuple[str, ...] = ()
    by_extension: bool = True
    raw: bool = False
    single_thread: bool = False
    debug: bool = False
    log_file: Optional[str] = None
    max_workers: Optional[int] = None

    @property
    def mode_name(self) -> str:
        """判定方式の表示名"""
        if self.by_extension:
            return ExtensionDetector.mode_name
        return SignatureDetector.mode_name


class _RaisingArgumentParser(argparse.ArgumentParser):
    """エラー時に終了せず ConfigError を送出する ArgumentParser"""

    def error(self, message):
        raise ConfigError(message)


def _worker_count(value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid worker count: {value}")
    if count < 1:
        raise argparse.ArgumentTypeError(f"worker count must be at least 1: {value}")
    return count


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数のパーサーを作成する"""
    parser = _RaisingArgumentParser(
        prog="zipdir",
        description="List the contents of zip files, including nested zip files.",
        epilog=(
            "Example:\n"
            "  zipdir -f .\n"
            "  zipdir --folder /your/docs --pattern *.zip --exclude backup --exclude documents"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument('-f', '--folder', default='.', metavar='<path>',
                        help='Folder to search (default ".")')
    parser.add_argument('-p', '--pattern', default=None, metavar='<str>',
                        help='Zip file pattern (default "*.zip", or "*" with --byte)')
    parser.add_argument('-e', '--exclude', action='append', default=[], metavar='<str>',
                        help='Exclude patterns, can be specified multiple times "-e backup -e documents"')
    parser.add_argument('-b', '--byte', action='store_true',
                        help='Identify zip files by magic number, not extension')
    parser.add_argument('-r', '--raw', action='store_true',
                        help='Raw output, for piping')
    parser.add_argument('-s', '--single-thread', action='store_true',
                        help='Use a single thread for processing')
    parser.add_argument('-w', '--workers', type=_worker_count, default=None, metavar='<n>',
                        help='Number of worker threads (default: number of processors)')
    parser.add_argument('-d', '--debug', action='store_true',
                        help='Enable debug logging on stderr')
    parser.add_argument('--log-file', default=None, metavar='<path>',
                        help='Also write log messages to this file')
    parser.add_argument('-h', '-?', '--help', action='store_true', dest='help',
                        help='Help information')
    return parser


def format_help() -> str:
    """ヘルプ文字列を返す"""
    return build_parser().format_help()


def parse_command_line(argv: Optional[Sequence[str]] = None) -> ScanConfig:
    """
    コマンドライン引数を解析して検索設定を作成する

    Args:
        argv: 引数のリスト（Noneの場合は sys.argv[1:]）

    Returns:
        検索設定

    Raises:
        HelpRequested: -h, -?, --help が指定された場合
        ConfigError: 引数の誤り、もしくはフォルダが存在しない場合
    """
    parser = build_parser()
    args_list: List[str] = list(argv) if argv is not None else sys.argv[1:]

    # ヘルプが要求されていれば他の引数の誤りは無視する
    if any(a in ('-h', '-?', '--help') for a in args_list):
        raise HelpRequested()

    args = parser.parse_args(args_list)
    if args.help:
        raise HelpRequested()

    by_extension = not args.byte

    # パターン未指定の場合: 拡張子判定なら *.zip、シグネチャ判定なら *
    pattern = args.pattern
    if pattern is None:
        if by_extension:
            pattern = ExtensionDetector.default_pattern
        else:
            pattern = SignatureDetector.default_pattern

    folder = normalize_folder(args.folder)
    if not os.path.exists(folder):
        raise ConfigError(f"folder not found: {folder}")
    if not os.path.isdir(folder):
        raise ConfigError(f"not a folder: {folder}")

    return ScanConfig(
        folder=folder,
        pattern=pattern,
        excludes=tuple(args.exclude),
        by_extension=by_extension,
        raw=args.raw,
        single_thread=args.single_thread,
        debug=args.debug,
        log_file=args.log_file,
        max_workers=args.workers,
    )
