"""Removable drive watcher: reports drives appearing and files changing on them."""

from __future__ import annotations

import argparse
import os
import time
from dataclasses import dataclass
from enum import Enum
from itertools import islice
from typing import Iterable, Iterator

import psutil

MAX_FILES = 50000
DRIVE_POLL_INTERVAL = 2.0
DEVICE_POLL_INTERVAL = 3.0


@dataclass(frozen=True)
class FileEntry:
    """A file or directory seen during a scan."""

    name: str
    path: str
    modified: int
    is_file: bool


class ChangeKind(Enum):
    REMOVED = "ELIMINADO"
    ADDED = "NUEVO"
    MODIFIED = "MODIFICADO"


@dataclass(frozen=True)
class Change:
    """One difference between two scans."""

    kind: ChangeKind
    path: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.path}"


def _walk(path: str) -> Iterator[FileEntry]:
    try:
        with os.scandir(path) as listing:
            entries = list(listing)
    except OSError:
        return
    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            modified = entry.stat(follow_symlinks=False).st_mtime_ns
        except OSError:
            is_dir, modified = False, 0
        yield FileEntry(name=entry.name, path=entry.path, modified=modified, is_file=not is_dir)
        if is_dir:
            yield from _walk(entry.path)


def scan_path(path: str | os.PathLike[str], limit: int = MAX_FILES) -> list[FileEntry]:
    """List everything below ``path``, each directory before its contents, up to ``limit`` entries."""
    return list(islice(_walk(os.fspath(path)), limit))


def diff_states(prev: list[FileEntry], curr: list[FileEntry]) -> list[Change]:
    """Removed entries, then added ones, then files whose modification time changed."""
    before: dict[str, FileEntry] = {}
    for entry in prev:
        before.setdefault(entry.path, entry)
    after = {entry.path for entry in curr}

    changes = [Change(ChangeKind.REMOVED, e.path) for e in prev if e.path not in after]
    changes += [Change(ChangeKind.ADDED, e.path) for e in curr if e.path not in before]
    changes += [
        Change(ChangeKind.MODIFIED, e.path)
        for e in curr
        if e.path in before and e.is_file and e.modified != before[e.path].modified
    ]
    return changes


def detect_drives() -> frozenset[str]:
    """Mount points of the drives currently present."""
    return frozenset(part.mountpoint for part in psutil.disk_partitions(all=True))


def drive_changes(previous: Iterable[str], current: Iterable[str]) -> list[tuple[str, bool]]:
    """Drives that appeared (True) or vanished (False), in drive order."""
    before, after = set(previous), set(current)
    return sorted((drive, drive in after) for drive in before ^ after)


def _watch(path: str, interval: float, state: list[FileEntry]) -> Iterator[list[Change]]:
    while True:
        current = scan_path(path)
        yield diff_states(state, current)
        state = current
        time.sleep(interval)


def watch_device(
    path: str | os.PathLike[str], interval: float = DEVICE_POLL_INTERVAL
) -> Iterator[list[Change]]:
    """Scan ``path`` now, then yield the changes found by each later scan, forever."""
    path = os.fspath(path)
    return _watch(path, interval, scan_path(path))


def _monitor(device: str, interval: float) -> None:
    print(f"Iniciando monitoreo: {device}")
    initial = scan_path(device)
    print(f"Archivos iniciales: {len(initial)}")
    for batch in _watch(device, interval, initial):
        for change in batch:
            print(change)


def main(argv: list[str] | None = None) -> int:
    """Wait for a new drive, then watch its files until interrupted."""
    parser = argparse.ArgumentParser(prog="matcomguard-usb", description="Removable drive watcher.")
    parser.add_argument(
        "--interval", type=float, default=DEVICE_POLL_INTERVAL, help="seconds between file scans"
    )
    args = parser.parse_args(argv)

    print("Monitor de dispositivos USB")
    known = detect_drives()
    for drive in sorted(known):
        print(f"Unidad {drive} detectada")
    print("Esperando cambios...")
    try:
        while True:
            current = detect_drives()
            for drive, connected in drive_changes(known, current):
                if connected:
                    print(f"Dispositivo {drive} conectado")
                    _monitor(drive, args.interval)
                else:
                    print(f"Dispositivo {drive} desconectado")
            known = current
            time.sleep(DRIVE_POLL_INTERVAL)
    except KeyboardInterrupt:
        return 0