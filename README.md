# matcomguard

A small guard for a workstation, in two parts:

- **Process monitor** (`matcomguard`): samples every running process at a
  fixed interval, works out how much CPU and RAM each one uses, and raises an
  alert when a process stays above a threshold for a number of consecutive
  scans. A process that takes more than 60% of system RAM is terminated. A
  process whose working set is larger than 2 GB is terminated too, together
  with every process that has the same name. Processes on the whitelist are
  never flagged or terminated.
- **Drive watcher** (`matcomguard-usb`): lists the drives present, reports
  drives as they are connected and disconnected, and when a new drive appears,
  walks its files and reports what is added, removed or modified.

Messages printed by both commands are in Spanish.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Process monitor

```
matcomguard [--config PATH] [--interval SECONDS]
```

- `--config`: configuration file to read (default `C:\matcomguard.conf`).
- `--interval`: seconds between scans (default `1.0`).

The monitor prints its settings when it starts and then runs until
interrupted with Ctrl-C.

On each scan, a process is *suspicious* when it is not whitelisted and its CPU
use is above `UMBRAL_CPU` or its RAM use is above `UMBRAL_RAM`. CPU use is
measured against the process's previous sample, so it is 0 on the first scan
a process is seen. The number of consecutive suspicious scans is counted, and
once it reaches `UMBRAL_TIEMPO` an alert is printed on every scan:

```
[2024-01-01 12:00:00] ALERTA: Proceso sospechoso!
PID: 1234
Nombre: hog.exe
Uso CPU: 95.00%
Uso RAM: 12.50%
Tiempo en alerta: 10 segundos
```

### Configuration

Settings are read from a plain text file of `KEY=value` lines. If the file
cannot be opened, or a key is missing or unreadable, these defaults are used:

| Key             | Meaning                                                | Default |
|-----------------|--------------------------------------------------------|---------|
| `UMBRAL_CPU`    | CPU use, in percent, above which a process is flagged  | 70.0    |
| `UMBRAL_RAM`    | RAM use, in percent of system RAM                      | 30.0    |
| `UMBRAL_TIEMPO` | Consecutive flagged scans before an alert is printed   | 10      |
| `WHITELIST`     | Comma-separated process names never to flag            | empty   |

Whitelist names are compared without regard to case. Up to 20 names are kept.

Example:

```
UMBRAL_CPU=85
UMBRAL_RAM=40
UMBRAL_TIEMPO=5
WHITELIST=explorer.exe,python.exe
```

Configuration can also be used from Python:

```python
from matcomguard.config import Config, parse_config, load_config

cfg = parse_config("UMBRAL_CPU=85\nWHITELIST=explorer.exe\n")
cfg.cpu_threshold                     # 85.0
cfg.is_whitelisted("EXPLORER.EXE")    # True

cfg = load_config("guard.conf")       # defaults if the file cannot be opened
```

### Using the monitor from Python

`take_snapshot()` returns a list of `ProcessSample` records (`pid`, `name`,
`cpu_time`, `working_set`, `seen`). A `ProcessMonitor` built from a `Config`
and the total system RAM turns each snapshot into `Verdict` records, carrying
state forward from the previous snapshot:

```python
from matcomguard.config import Config
from matcomguard.monitor import ProcessMonitor, take_snapshot

monitor = ProcessMonitor(Config(), total_ram=16 * 1024**3)
for verdict in monitor.evaluate(take_snapshot()):
    if verdict.alarm:
        print(verdict.sample.name, verdict.cpu, verdict.ram, verdict.alert_count)
```

A `Verdict` has `cpu`, `ram`, `alert_count`, `alarm`, and the flags
`over_ram_limit` (more than 60% of RAM) and `over_size_limit` (working set over
2 GB). `evaluate` only judges; it terminates nothing.

`cpu_usage(prev, curr)` and `ram_usage(working_set, total_ram)` do the
percentage arithmetic (`ram_usage` and `ProcessMonitor` raise `ValueError` for
a total RAM that is not positive). `terminate(pid)` kills one process and
returns whether it could; `terminate_all_named(name)` kills every process of
that name and returns `(pid, name, killed)` for each.

## Drive watcher

```
matcomguard-usb [--interval SECONDS]
```

- `--interval`: seconds between file scans of a new drive (default `3.0`).

It lists the drives present when it starts (by mount point), then checks every
two seconds. When a new drive is connected, it scans the drive, prints the
number of entries found, and from then on reports changes to it:

```
ELIMINADO: E:\old.doc
NUEVO: E:\photos\new.jpg
MODIFICADO: E:\notes.txt
```

Removed entries come first, then added ones, then files whose modification
time changed. Scans stop after 50,000 entries.

The building blocks can be used on their own:

```python
from matcomguard.usb import scan_path, diff_states, watch_device

before = scan_path("/media/stick")
after = scan_path("/media/stick")
for change in diff_states(before, after):
    print(change.kind, change.path)

for batch in watch_device("/media/stick", 3.0):   # runs forever
    for change in batch:
        print(change)
```

`detect_drives()` returns the mount points present now, and
`drive_changes(previous, current)` returns `(drive, connected)` pairs for the
drives that appeared or vanished between two readings.

## Limitations

- Once the drive watcher starts following a new drive, it follows only that
  drive until interrupted; it no longer reports other drives being connected
  or disconnected, and it keeps scanning even if that drive is removed.
- The configuration is read once at start-up; changes to the file need a
  restart.