import subprocess

import pytest

from app import version


@pytest.fixture(autouse=True)
def fresh_git_info(monkeypatch):
    monkeypatch.setattr(version, "_git_info", None)


def test_no_git_lookup_outside_a_checkout(tmp_path, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("git must not be called")

    monkeypatch.setattr(version, "_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setattr(subprocess, "run", fail)

    assert version.get_git_info() == ("", False)
    assert version.get_version_hash() == f"v{version.__version__}"


def test_hash_and_modified_flag_from_checkout(tmp_path, monkeypatch):
    (tmp_path / ".git").mkdir()
    answers = {
        ("rev-parse", "HEAD"): "0123456789abcdef0123456789abcdef01234567\n",
        ("status", "--porcelain"): " M app/main.py\n",
    }
    monkeypatch.setattr(version, "_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setattr(version, "_run_git", lambda *args: answers[args])

    assert version.get_version_hash(12) == f"v{version.__version__} - 0123456789ab+"
    assert version.get_banner(12) == f"{version.__description__} v{version.__version__} - 0123456789ab+"


def test_clean_checkout_has_no_modified_marker(tmp_path, monkeypatch):
    (tmp_path / ".git").write_text("gitdir: /elsewhere\n")
    answers = {
        ("rev-parse", "HEAD"): "fedcba9876543210\n",
        ("status", "--porcelain"): "",
    }
    monkeypatch.setattr(version, "_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setattr(version, "_run_git", lambda *args: answers[args])

    assert version.get_version_hash() == f"v{version.__version__} - fedcba9876543210"
