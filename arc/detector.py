"""
ZIP書庫の判定

拡張子による判定と、先頭4バイトのシグネチャ（PK\\x03\\x04）による判定を
同じインターフェースで提供する。走査処理は生成時に渡された判定器だけを使う。
"""
import os
import zlib
import zipfile
from typing import BinaryIO, Union

from .arc import EntryType, LoggingMixin
from .path_utils import is_directory_marker

# ZIPのローカルファイルヘッダのシグネチャ
ZIP_MAGIC = b'PK\x03\x04'

# ZIPとして扱う拡張子
ZIP_EXTENSION = '.zip'

# シグネチャ読み込み時に「ZIPではない」とみなす例外
_SNIFF_ERRORS = (
    OSError,                # 権限なし、存在しない、読み込みエラー
    EOFError,
    ValueError,             # 既に閉じられたストリーム
    zipfile.BadZipFile,     # 壊れたエントリ
    NotImplementedError,    # 未対応の圧縮方式
    RuntimeError,           # パスワードが必要なエントリ
    zlib.error,
)


def is_archive_by_name(path: str) -> bool:
    """
    拡張子がZIPかどうかを判定する（大文字小文字は区別しない）

    Args:
        path: ファイルパス、もしくは書庫内のエントリ名

    Returns:
        末尾が '.zip' の場合はTrue
    """
    return path.lower().endswith(ZIP_EXTENSION)


def is_archive_by_content(source: Union[str, os.PathLike, BinaryIO]) -> bool:
    """
    先頭4バイトがZIPのシグネチャかどうかを判定する

    パスが渡された場合はこの関数内で開いて閉じる。ストリームが渡された場合は
    最大4バイトを読むだけで、閉じるのは呼び出し側の責任。
    読み込みに失敗した場合や4バイト未満しか読めなかった場合はFalseを返す。

    Args:
        source: ファイルパスもしくは読み込み可能なバイナリストリーム

    Returns:
        ZIPのシグネチャで始まる場合はTrue
    """
    try:
        if isinstance(source, (str, bytes, os.PathLike)):
            with open(source, 'rb') as f:
                head = f.read(len(ZIP_MAGIC))
        else:
            head = source.read(len(ZIP_MAGIC))
    except _SNIFF_ERRORS:
        return False

    return head is not None and len(head) >= len(ZIP_MAGIC) and head[:len(ZIP_MAGIC)] == ZIP_MAGIC


def is_archive_entry_content(zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bool:
    """
    書庫内エントリの先頭4バイトがZIPのシグネチャかどうかを判定する

    Args:
        zf: エントリを含むZipFile
        info: 判定するエントリ

    Returns:
        ZIPのシグネチャで始まる場合はTrue。開けない場合はFalse
    """
    try:
        with zf.open(info) as stream:
            return is_archive_by_content(stream)
    except _SNIFF_ERRORS:
        return False


class ArchiveDetector(LoggingMixin):
    """
    ZIP判定器の基底クラス

    判定方式ごとにサブクラスで is_archive_entry / should_walk をオーバーライドする。
    """

    # 判定方式の表示名（"searching by ..."）
    mode_name = ""
    # 候補数の表示に使う名前（"<n> ... file(s) identified"）
    candidate_label = ""
    # パターン未指定時の既定値
    default_pattern = "*"

    def is_archive_entry(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bool:
        """書庫内のエントリがネストされたZIPかどうか"""
        raise NotImplementedError

    def should_walk(self, path: str) -> bool:
        """物理ファイルを走査対象として書庫を開くかどうか"""
        raise NotImplementedError

    def classify_entry(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> EntryType:
        """
        エントリを分類する

        ネスト書庫の判定をディレクトリマーカーの判定より先に行う。

        Args:
            zf: エントリを含むZipFile
            info: 分類するエントリ

        Returns:
            エントリタイプ
        """
        name = info.filename
        if not name:
            return EntryType.EMPTY
        if self.is_archive_entry(zf, info):
            return EntryType.ARCHIVE
        if is_directory_marker(name):
            return EntryType.DIRECTORY
        return EntryType.FILE


class ExtensionDetector(ArchiveDetector):
    """拡張子（.zip）で判定する"""

    mode_name = "extension"
    candidate_label = "zip"
    default_pattern = "*.zip"

    def is_archive_entry(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bool:
        return is_archive_by_name(info.filename)

    def should_walk(self, path: str) -> bool:
        # パターンとの一致で候補になったファイルはすべて開く
        return True


class SignatureDetector(ArchiveDetector):
    """先頭4バイトのシグネチャで判定する"""

    mode_name = "magic number"
    candidate_label = "potential"
    default_pattern = "*"

    def is_archive_entry(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bool:
        return is_archive_entry_content(zf, info)

    def should_walk(self, path: str) -> bool:
        result = is_archive_by_content(path)
        if not result:
            self.debug_debug(f"ZIPシグネチャなし: {path}")
        return result


def create_detector(by_extension: bool = True) -> ArchiveDetector:
    """
    判定方式に応じた判定器を作成する

    Args:
        by_extension: Trueなら拡張子、Falseならシグネチャで判定する

    Returns:
        判定器
    """
    if by_extension:
        return ExtensionDetector()
    return SignatureDetector()
