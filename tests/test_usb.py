import os
from types import SimpleNamespace
from unittest import mock

from matcomguard.usb import (
    Change,
    ChangeKind,
    FileEntry,
    detect_drives,
    diff_states,
    drive_changes,
    scan_path,
    watch_device,
)


def make_tree(root):
    (root / "dir").mkdir()
    (root / "dir" / "sub.txt").write_text("x")
    (root / "top.txt").write_text("y")


def test_scan_path_finds_everything(tmp_path):
    make_tree(tmp_path)
    paths = {entry.path for entry in scan_path(tmp_path)}
    assert paths == {
        os.path.join(tmp_path, "dir"),
        os.path.join(tmp_path, "dir", "sub.txt"),
        os.path.join(tmp_path, "top.txt"),
    }


def test_scan_path_lists_directory_before_contents(tmp_path):
    make_tree(tmp_path)
    order = [entry.path for entry in scan_path(tmp_path)]
    assert order.index(os.path.join(tmp_path, "dir")) < order.index(
        os.path.join(tmp_path, "dir", "sub.txt")
    )


def test_scan_path_marks_files_and_directories(tmp_path):
    make_tree(tmp_path)
    kinds = {entry.name: entry.is_file for entry in scan_path(tmp_path)}
    assert kinds == {"dir": False, "sub.txt": True, "top.txt": True}


def test_scan_path_respects_limit(tmp_path):
    make_tree(tmp_path)
    assert len(scan_path(tmp_path, limit=2)) == 2


def test_scan_path_missing_directory_is_empty(tmp_path):
    assert scan_path(tmp_path / "absent") == []


def entry(path, modified=0, is_file=True):
    return FileEntry(name=os.path.basename(path), path=path, modified=modified, is_file=is_file)


def test_diff_states_orders_removed_added_modified():
    prev = [entry("a"), entry("b", modified=1)]
    curr = [entry("b", modified=2), entry("c")]
    assert diff_states(prev, curr) == [
        Change(ChangeKind.REMOVED, "a"),
        Change(ChangeKind.ADDED, "c"),
        Change(ChangeKind.MODIFIED, "b"),
    ]


def test_diff_states_ignores_directory_time_changes():
    prev = [entry("d", modified=1, is_file=False)]
    curr = [entry("d", modified=2, is_file=False)]
    assert diff_states(prev, curr) == []


def test_diff_states_identical_states_have_no_changes():
    state = [entry("a", modified=5), entry("b", is_file=False)]
    assert diff_states(state, list(state)) == []


def test_change_text_uses_kind_label():
    assert str(Change(ChangeKind.ADDED, "x.txt")) == "NUEVO: x.txt"


def test_drive_changes_reports_both_directions_in_order():
    assert drive_changes({"C:\\", "D:\\"}, {"C:\\", "E:\\"}) == [("D:\\", False), ("E:\\", True)]


def test_drive_changes_unchanged_is_empty():
    assert drive_changes({"C:\\"}, {"C:\\"}) == []


def test_detect_drives_collects_mount_points():
    parts = [SimpleNamespace(mountpoint="C:\\"), SimpleNamespace(mountpoint="E:\\")]
    with mock.patch("matcomguard.usb.psutil.disk_partitions", return_value=parts):
        assert detect_drives() == frozenset({"C:\\", "E:\\"})


def test_watch_device_reports_added_removed_and_modified(tmp_path):
    first = tmp_path / "a.txt"
    first.write_text("a")
    watcher = watch_device(tmp_path, 0)

    second = tmp_path / "b.txt"
    second.write_text("b")
    assert next(watcher) == [Change(ChangeKind.ADDED, os.path.join(tmp_path, "b.txt"))]

    first.unlink()
    assert next(watcher) == [Change(ChangeKind.REMOVED, os.path.join(tmp_path, "a.txt"))]

    stat = second.stat()
    os.utime(second, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))
    assert next(watcher) == [Change(ChangeKind.MODIFIED, os.path.join(tmp_path, "b.txt"))]


def test_watch_device_quiet_directory_yields_nothing(tmp_path):
    make_tree(tmp_path)
    watcher = watch_device(tmp_path, 0)
    assert next(watcher) == []