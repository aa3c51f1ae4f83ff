"""
表示パスを組み立てるためのユーティリティ

物理パスと書庫内エントリ名から、ネスト階層を '/' で連結した表示パスを作る
"""

import os

# 書庫内エントリのディレクトリマーカーとして扱う末尾文字
DIRECTORY_MARKERS = ('/', '\\')


def normalize_entry_name(entry_name: str) -> str:
    """
    書庫内のエントリ名の区切り文字を '/' に揃える

    ZIPの仕様では '/' だが、'\\' で格納するツールも存在する。

    Args:
        entry_name: 書庫内のエントリ名

    Returns:
        区切り文字を '/' に置換したエントリ名
    """
    if '\\' in entry_name:
        return entry_name.replace('\\', '/')
    return entry_name


def build_display_path(container_path: str, entry_name: str) -> str:
    """
    コンテナパスとエントリ名から表示パスを作成する

    末尾の区切り文字の除去は行わない（ファイル/ディレクトリの判定は呼び出し側）。

    Args:
        container_path: コンテナの表示パス（ルートは物理パスそのまま）
        entry_name: 書庫内のエントリ名

    Returns:
        "<container_path>/<正規化したエントリ名>"
    """
    return f"{container_path}/{normalize_entry_name(entry_name)}"


def build_container_path(container_path: str, entry_name: str) -> str:
    """
    ネスト書庫のコンテナパスを作成する

    コンテナ名にはエントリ名を生のまま使う（正規化は末端ファイルの出力のみ）。
    """
    return f"{container_path}/{entry_name}"


def is_directory_marker(entry_name: str) -> bool:
    """
    エントリ名がディレクトリマーカーかどうかを判定する

    Args:
        entry_name: 書庫内のエントリ名

    Returns:
        名前が空、もしくは末尾が '/' か '\\' の場合はTrue
    """
    return not entry_name or entry_name[-1] in DIRECTORY_MARKERS


def normalize_folder(folder: str) -> str:
    """
    フォルダ名を絶対パスに展開する（'..' などを解決）

    Args:
        folder: 指定されたフォルダ名

    Returns:
        正規化された絶対パス
    """
    return os.path.abspath(os.path.expanduser(folder))
