"""
コンソール出力

複数のワーカースレッドから書き込まれる行を、1行単位で排他制御して出力する
"""
import sys
import threading
from typing import Optional, TextIO


class ConsoleOutput:
    """
    ファイル一覧・情報メッセージ・エラー通知の出力先

    raw モードでは情報メッセージだけを抑制する（ファイル行とエラー行は常に出力）。
    """

    def __init__(self, raw: bool = False, stream: Optional[TextIO] = None):
        """
        出力先を初期化する

        Args:
            raw: Trueなら情報メッセージを出力しない
            stream: 出力先のストリーム（省略時は sys.stdout）
        """
        self.raw = raw
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        # sys.stdout の差し替え（テストのキャプチャなど）に追従する
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        with self._lock:
            stream = self.stream
            stream.write(text + "\n")
            stream.flush()

    def write_line(self, line: str) -> None:
        """書庫内で見つかったファイルの表示パスを出力する"""
        self._write(line)

    def message(self, text: str, blank_line: bool = False) -> None:
        """
        情報メッセージを出力する（raw モードでは何もしない）

        Args:
            text: メッセージ
            blank_line: Trueならメッセージの後に空行を出力する
        """
        if self.raw:
            return
        self._write(text + "\n" if blank_line else text)

    def error(self, text: str) -> None:
        """エラー通知を出力する"""
        self._write(text)
