"""
ZipDir のバージョン情報
"""
import os
import subprocess
from typing import Optional, Tuple

__version__ = "1.0.0"
__description__ = "ZipDir - list contents of zip files"

# git コマンドの実行ディレクトリ（プロジェクトのルート）
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# 一度取得した git 情報を保持する
_git_info: Optional[Tuple[str, bool]] = None


def _run_git(*args: str) -> Optional[str]:
    try:
        result = subprocess.run(
            ['git', *args],
            cwd=_PROJECT_ROOT,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def get_git_info() -> Tuple[str, bool]:
    """
    git のコミットハッシュと変更の有無を取得する

    プロジェクトのディレクトリ直下に .git がない場合（site-packages への
    インストールなど）は git に問い合わせない。

    Returns:
        (コミットハッシュ, 未コミットの変更があるか)。git が使えない場合は ("", False)
    """
    global _git_info
    if _git_info is None:
        git_hash = ""
        modified = False
        # 作業ツリーでは .git はディレクトリ、worktree ではファイル
        if os.path.exists(os.path.join(_PROJECT_ROOT, '.git')):
            git_hash = (_run_git('rev-parse', 'HEAD') or "").strip()
        if git_hash:
            status = _run_git('status', '--porcelain')
            modified = bool(status and status.strip())
        _git_info = (git_hash, modified)
    return _git_info


def get_version_hash(length: Optional[int] = None) -> str:
    """
    バージョンとコミットハッシュの表示文字列を返す

    Args:
        length: ハッシュの表示桁数（Noneなら全桁）

    Returns:
        "v1.0.0 - <hash>[+]"、ハッシュが取得できない場合は "v1.0.0"
    """
    git_hash, modified = get_git_info()
    if not git_hash:
        return f"v{__version__}"
    if length is not None:
        git_hash = git_hash[:length]
    return f"v{__version__} - {git_hash}{'+' if modified else ''}"


def get_banner(length: Optional[int] = 12) -> str:
    """起動時に表示するバナー文字列"""
    return f"{__description__} {get_version_hash(length)}"
