import zipfile

import pytest

from arc.arc import WalkStatus
from arc.detector import ExtensionDetector, SignatureDetector
from arc.walker import ArchiveWalker
from conftest import CollectingOutput, FailingOutput, make_zip, zip_bytes


def test_flat_archive_lists_files_in_declared_order(tmp_path, output):
    path = str(make_zip(tmp_path / "flat.zip", [
        ("docs/", ""),
        ("docs/readme.txt", "readme"),
        ("b.txt", "b"),
        ("a.txt", "a"),
    ]))

    status = ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert status == WalkStatus.COMPLETED
    assert output.lines == [f"{path}/docs/readme.txt", f"{path}/b.txt", f"{path}/a.txt"]
    assert output.errors == []


def test_directory_markers_are_not_listed(tmp_path, output):
    path = str(make_zip(tmp_path / "dirs.zip", [
        ("folder/", ""),
        ("other\\", ""),
        ("folder/sub/", ""),
    ]))

    ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert output.lines == []


def test_backslash_entries_are_normalized(tmp_path, output):
    path = str(make_zip(tmp_path / "slashes.zip", [("folder\\subfolder\\test.txt", "x")]))

    ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert output.lines == [f"{path}/folder/subfolder/test.txt"]
    assert "\\" not in output.lines[0][len(path):]


def test_nested_archive_is_listed(sample_folder, output):
    path = str(sample_folder / "Archive2.zip")

    ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert output.lines == [
        f"{path}/PicoArgs.cs",
        f"{path}/Program.cs",
        f"{path}/Archive1.zip/PicoArgs.cs",
        f"{path}/Archive1.zip/Program.cs",
    ]


def test_three_levels_of_nesting(tmp_path, output):
    inner = zip_bytes([("leaf.txt", "leaf")])
    middle = zip_bytes([("inner.zip", inner)])
    path = str(make_zip(tmp_path / "Archive2.zip", [("Archive1.zip", middle)]))

    ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert output.lines == [f"{path}/Archive1.zip/inner.zip/leaf.txt"]


def test_nested_entries_are_visited_depth_first(tmp_path, output):
    nested = zip_bytes([("n1.txt", "1"), ("n2.txt", "2")])
    path = str(make_zip(tmp_path / "outer.zip", [
        ("first.txt", "f"),
        ("nested.zip", nested),
        ("last.txt", "l"),
    ]))

    ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert output.lines == [
        f"{path}/first.txt",
        f"{path}/nested.zip/n1.txt",
        f"{path}/nested.zip/n2.txt",
        f"{path}/last.txt",
    ]


def test_corrupted_nested_archive_does_not_stop_siblings(tmp_path, output):
    path = str(make_zip(tmp_path / "outer.zip", [
        ("a.txt", "a"),
        ("broken.zip", "this is not a zip file"),
        ("b.txt", "b"),
    ]))

    status = ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert status == WalkStatus.COMPLETED
    assert output.lines == [f"{path}/a.txt", f"{path}/b.txt"]
    assert len(output.errors) == 1
    assert output.errors[0].startswith(f"error in nested zip: {path}/broken.zip - ")


def test_empty_nested_archive_is_an_error_not_a_file(tmp_path, output):
    path = str(make_zip(tmp_path / "outer.zip", [("empty.zip", b"")]))

    ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert output.lines == []
    assert len(output.errors) == 1
    assert output.errors[0].startswith(f"error in nested zip: {path}/empty.zip")


def test_error_inside_deeper_branch_keeps_other_branches(tmp_path, output):
    good = zip_bytes([("ok.txt", "ok")])
    bad_parent = zip_bytes([("bad.zip", "garbage"), ("after.txt", "after")])
    path = str(make_zip(tmp_path / "outer.zip", [
        ("one.zip", bad_parent),
        ("two.zip", good),
    ]))

    ArchiveWalker(ExtensionDetector(), output).check_archive(path)

    assert output.lines == [f"{path}/one.zip/after.txt", f"{path}/two.zip/ok.txt"]
    assert len(output.errors) == 1
    assert output.errors[0].startswith(f"error in nested zip: {path}/one.zip/bad.zip - ")


def test_signature_mode_finds_renamed_nested_archive(tmp_path):
    nested = zip_bytes([("inside.txt", "x")])
    path = str(make_zip(tmp_path / "outer.zip", [("payload.bin", nested), ("note.zip", "text")]))

    by_content = CollectingOutput()
    ArchiveWalker(SignatureDetector(), by_content).check_archive(path)
    by_name = CollectingOutput()
    ArchiveWalker(ExtensionDetector(), by_name).check_archive(path)

    assert by_content.lines == [f"{path}/payload.bin/inside.txt", f"{path}/note.zip"]
    assert by_content.errors == []
    assert by_name.lines == [f"{path}/payload.bin"]
    assert len(by_name.errors) == 1


def test_cancellation_stops_the_walk(tmp_path, output):
    path = str(make_zip(tmp_path / "many.zip", [(f"f{i}.txt", str(i)) for i in range(5)]))

    walker = ArchiveWalker(ExtensionDetector(), output, is_cancelled=lambda: len(output.lines) >= 2)
    status = walker.check_archive(path)

    assert status == WalkStatus.CANCELLED
    assert output.lines == [f"{path}/f0.txt", f"{path}/f1.txt"]


def test_cancellation_inside_nested_archive_stops_parent(tmp_path, output):
    nested = zip_bytes([("n1.txt", "1"), ("n2.txt", "2")])
    path = str(make_zip(tmp_path / "outer.zip", [("nested.zip", nested), ("after.txt", "a")]))

    walker = ArchiveWalker(ExtensionDetector(), output, is_cancelled=lambda: len(output.lines) >= 1)
    status = walker.check_archive(path)

    assert status == WalkStatus.CANCELLED
    assert output.lines == [f"{path}/nested.zip/n1.txt"]
    assert output.errors == []


def test_top_level_open_failure_propagates(tmp_path, output):
    path = tmp_path / "bad.zip"
    path.write_text("not a zip")

    with pytest.raises(zipfile.BadZipFile):
        ArchiveWalker(ExtensionDetector(), output).check_archive(str(path))

    assert output.lines == []
    assert output.errors == []


def test_missing_top_level_file_propagates(tmp_path, output):
    with pytest.raises(OSError):
        ArchiveWalker(ExtensionDetector(), output).check_archive(str(tmp_path / "missing.zip"))


def test_output_failure_in_nested_archive_propagates(tmp_path):
    nested = zip_bytes([("inner.txt", "x")])
    path = str(make_zip(tmp_path / "outer.zip", [("nested.zip", nested), ("after.txt", "a")]))
    failing = FailingOutput()

    with pytest.raises(BrokenPipeError):
        ArchiveWalker(ExtensionDetector(), failing).check_archive(path)

    assert failing.errors == []


def test_output_failure_at_top_level_propagates(tmp_path):
    path = str(make_zip(tmp_path / "flat.zip", [("a.txt", "a")]))
    failing = FailingOutput()

    with pytest.raises(BrokenPipeError):
        ArchiveWalker(ExtensionDetector(), failing).check_archive(path)

    assert failing.errors == []


@pytest.mark.parametrize("detector", [ExtensionDetector(), SignatureDetector()])
def test_entry_with_empty_name_is_skipped(tmp_path, output, detector):
    path = str(make_zip(tmp_path / "unnamed.zip", [
        (zipfile.ZipInfo(""), "no name"),
        ("named.txt", "named"),
    ]))

    status = ArchiveWalker(detector, output).check_archive(path)

    assert status == WalkStatus.COMPLETED
    assert output.lines == [f"{path}/named.txt"]
    assert output.errors == []
