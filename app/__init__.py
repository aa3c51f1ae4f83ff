"""
ZipDir コマンドラインアプリケーション

設定の解析、コンソール出力、バージョン表示を提供します。
"""

from .version import __version__

__all__ = ['__version__']
