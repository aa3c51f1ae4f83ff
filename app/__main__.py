"""
ZipDir エントリーポイント

このモジュールは `python -m app` コマンドで実行されたときに
main.py のメイン関数を呼び出します。
"""
import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
