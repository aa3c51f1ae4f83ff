"""
ZipDir 書庫処理モジュール

ZIP書庫（ネストされたZIPを含む）のエントリを走査して表示パスを出力する
"""

# 基本型
from .arc import EntryType, WalkStatus, BranchResult

from .detector import (
    ArchiveDetector, ExtensionDetector, SignatureDetector, create_detector,
    is_archive_by_name, is_archive_by_content
)
from .path_utils import build_display_path
from .walker import ArchiveWalker
from .searcher import FolderSearcher, SearchSummary, search_folder

__all__ = [
    'EntryType', 'WalkStatus', 'BranchResult',
    'ArchiveDetector', 'ExtensionDetector', 'SignatureDetector', 'create_detector',
    'is_archive_by_name', 'is_archive_by_content',
    'build_display_path',
    'ArchiveWalker',
    'FolderSearcher', 'SearchSummary', 'search_folder'
]
