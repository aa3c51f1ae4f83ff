"""
ZIP書庫の再帰走査

書庫内のエントリを中央ディレクトリの順に走査し、通常ファイルの表示パスを出力する。
ネストされたZIPはエントリの内容をメモリに読み込み、新しい書庫として開いて再帰的に走査する。
"""
import io
import zipfile
from typing import Callable, Optional

from .arc import BranchResult, EntryType, LoggingMixin, WalkStatus
from .detector import ArchiveDetector, ExtensionDetector
from .path_utils import build_container_path, build_display_path


class ArchiveWalker(LoggingMixin):
    """
    ZIP書庫の再帰走査クラス

    走査状態はすべて呼び出しスタック上に持つため、1つのインスタンスを
    複数のワーカースレッドから同時に使用できる。
    """

    def __init__(self, detector: Optional[ArchiveDetector] = None, output=None,
                 is_cancelled: Optional[Callable[[], bool]] = None):
        """
        走査クラスを初期化する

        Args:
            detector: ネスト書庫の判定器（省略時は拡張子で判定）
            output: 出力先。write_line(line) と error(text) を持つオブジェクト
            is_cancelled: キャンセル状態を返す関数（省略時はキャンセルなし）
        """
        self.detector = detector or ExtensionDetector()
        self.output = output
        self.is_cancelled = is_cancelled

    def _cancelled(self) -> bool:
        return self.is_cancelled is not None and self.is_cancelled()

    def check_archive(self, path: str) -> WalkStatus:
        """
        物理ファイルの書庫を開いて走査する

        書庫を開けない場合の例外はここでは捕捉せず、呼び出し側に伝播する。

        Args:
            path: 書庫の物理パス（表示パスのルートとしてそのまま使う）

        Returns:
            走査結果（COMPLETED または CANCELLED）

        Raises:
            zipfile.BadZipFile: ZIPとして開けない場合
            OSError: ファイルを読み込めない場合
        """
        with self.open_archive(path) as zf:
            return self.walk(path, zf)

    def open_archive(self, path: str) -> zipfile.ZipFile:
        """
        物理ファイルの書庫を開く（閉じるのは呼び出し側）

        Raises:
            zipfile.BadZipFile: ZIPとして開けない場合
            OSError: ファイルを読み込めない場合
        """
        zf = zipfile.ZipFile(path, 'r')
        self.debug_debug(f"書庫を開きました: {path} ({len(zf.infolist())} エントリ)")
        return zf

    def walk(self, container: str, zf: zipfile.ZipFile) -> WalkStatus:
        """
        開いている書庫のエントリを順に走査する

        Args:
            container: この書庫のコンテナパス
            zf: 走査する書庫

        Returns:
            走査結果
        """
        for info in zf.infolist():
            # エントリごとにキャンセルを確認
            if self._cancelled():
                self.debug_info(f"走査をキャンセルしました: {container}")
                return WalkStatus.CANCELLED

            entry_type = self.detector.classify_entry(zf, info)

            if entry_type == EntryType.ARCHIVE:
                result = self._walk_nested(container, zf, info)
                if result.failed:
                    self.output.error(f"error in nested zip: {result.container} - {result.message}")
                elif result.status == WalkStatus.CANCELLED:
                    return WalkStatus.CANCELLED
            elif entry_type == EntryType.FILE:
                self.output.write_line(build_display_path(container, info.filename))
            # EMPTY と DIRECTORY は出力しない

        return WalkStatus.COMPLETED

    def _walk_nested(self, container: str, zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> BranchResult:
        """
        ネストされた書庫をメモリ上で開いて再帰的に走査する

        エントリの読み込みと書庫としての展開で発生した例外は結果値に変換し、
        兄弟エントリの走査は継続させる。出力先への書き込みの失敗は書庫の
        エラーではないので、そのまま呼び出し側に伝播する。
        ネスト書庫のハンドルは戻る前に必ず閉じる。

        Args:
            container: 親書庫のコンテナパス
            zf: 親書庫
            info: ネスト書庫のエントリ

        Returns:
            処理結果
        """
        nested_container = build_container_path(container, info.filename)

        try:
            # エントリのストリームはシーク不可なのでメモリに読み込む
            with zf.open(info) as stream:
                data = stream.read()
            nested_zf = zipfile.ZipFile(io.BytesIO(data))
        except Exception as e:
            self.debug_warning(f"ネスト書庫の処理に失敗しました: {nested_container} - {e}")
            return BranchResult(WalkStatus.ERROR, nested_container, str(e) or e.__class__.__name__)

        # より深い階層の失敗はその階層で結果値になるので、ここでは出力の失敗だけが伝播する
        with nested_zf:
            self.debug_debug(f"ネスト書庫を開きました: {nested_container} ({len(data)} バイト)")
            status = self.walk(nested_container, nested_zf)

        return BranchResult(status, nested_container)
