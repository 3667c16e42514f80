"""Process guard: flags and terminates processes that use too much CPU or RAM."""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from datetime import datetime

import psutil

from matcomguard.config import DEFAULT_CONFIG_PATH, Config, load_config

MONITOR_INTERVAL = 1.0
KILL_RAM_PERCENT = 60.0
KILL_WORKING_SET = 2 * 1024 * 1024 * 1024


@dataclass(frozen=True)
class ProcessSample:
    """One observation of a process."""

    pid: int
    name: str
    cpu_time: float
    working_set: int
    seen: float


@dataclass(frozen=True)
class Verdict:
    """What the monitor concluded about one sample."""

    sample: ProcessSample
    cpu: float
    ram: float
    alert_count: int
    alarm: bool
    over_ram_limit: bool
    over_size_limit: bool


def cpu_usage(prev: ProcessSample, curr: ProcessSample) -> float:
    """Percentage of one CPU used between two samples of the same process."""
    elapsed = curr.seen - prev.seen
    if elapsed <= 0:
        return 0.0
    return (curr.cpu_time - prev.cpu_time) / elapsed * 100.0


def ram_usage(working_set: int, total_ram: int) -> float:
    """Working set as a percentage of total physical memory."""
    if total_ram <= 0:
        raise ValueError("total RAM must be positive")
    return working_set / total_ram * 100.0


def take_snapshot() -> list[ProcessSample]:
    """Sample every process whose times and memory can be read."""
    now = float(int(time.time()))
    samples = []
    for proc in psutil.process_iter(["pid", "name", "cpu_times", "memory_info"]):
        info = proc.info
        times, memory = info["cpu_times"], info["memory_info"]
        if times is None or memory is None:
            continue
        samples.append(
            ProcessSample(
                pid=info["pid"],
                name=info["name"] or "",
                cpu_time=times.user + times.system,
                working_set=memory.rss,
                seen=now,
            )
        )
    return samples


def terminate(pid: int) -> bool:
    """Kill a process; return whether it could be done."""
    try:
        psutil.Process(pid).kill()
    except psutil.Error:
        return False
    return True


def terminate_all_named(name: str) -> list[tuple[int, str, bool]]:
    """Kill every process called ``name`` (ignoring case).

    Returns (pid, name, killed) for each matching process.
    """
    wanted = name.lower()
    results = []
    for proc in psutil.process_iter(["pid", "name"]):
        proc_name = proc.info["name"] or ""
        if proc_name.lower() == wanted:
            pid = proc.info["pid"]
            results.append((pid, proc_name, terminate(pid)))
    return results


class ProcessMonitor:
    """Tracks successive snapshots and counts how long each process stays suspicious."""

    def __init__(self, config: Config, total_ram: int) -> None:
        if total_ram <= 0:
            raise ValueError("total RAM must be positive")
        self.config = config
        self.total_ram = total_ram
        self._previous: dict[int, tuple[ProcessSample, int]] = {}

    def evaluate(self, samples: list[ProcessSample]) -> list[Verdict]:
        """Judge a new snapshot against the previous one."""
        verdicts = []
        current: dict[int, tuple[ProcessSample, int]] = {}
        for sample in samples:
            previous = self._previous.get(sample.pid)
            ram = ram_usage(sample.working_set, self.total_ram)
            cpu = cpu_usage(previous[0], sample) if previous else 0.0
            trusted = self.config.is_whitelisted(sample.name)
            suspicious = not trusted and (
                cpu > self.config.cpu_threshold or ram > self.config.ram_threshold
            )
            if suspicious:
                count = previous[1] + 1 if previous else 1
            else:
                count = 0
            current.setdefault(sample.pid, (sample, count))
            verdicts.append(
                Verdict(
                    sample=sample,
                    cpu=cpu,
                    ram=ram,
                    alert_count=count,
                    alarm=count >= self.config.time_threshold,
                    over_ram_limit=ram > KILL_RAM_PERCENT and not trusted,
                    over_size_limit=sample.working_set > KILL_WORKING_SET and not trusted,
                )
            )
        self._previous = current
        return verdicts


def _report(verdict: Verdict) -> None:
    sample = verdict.sample
    if verdict.alarm:
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        print(f"\n[{stamp}] ALERTA: Proceso sospechoso!")
        print(f"PID: {sample.pid}")
        print(f"Nombre: {sample.name}")
        print(f"Uso CPU: {verdict.cpu:.2f}%")
        print(f"Uso RAM: {verdict.ram:.2f}%")
        print(f"Tiempo en alerta: {verdict.alert_count} segundos\n")
    if verdict.over_ram_limit:
        if terminate(sample.pid):
            print(
                f"[INFO] Proceso '{sample.name}' (PID: {sample.pid}) "
                "terminado por exceder el 60% de RAM."
            )
        else:
            print(f"[ERROR] No se pudo terminar el proceso '{sample.name}' (PID: {sample.pid}).")
    if verdict.over_size_limit:
        print(
            f"[INFO] Buscando y terminando procesos con nombre '{sample.name}' "
            "que superan 2GB de RAM..."
        )
        for pid, name, killed in terminate_all_named(sample.name):
            if killed:
                print(f"[INFO] Proceso '{name}' (PID: {pid}) terminado por exceder 2GB de RAM.")
            else:
                print(f"[ERROR] No se pudo terminar el proceso '{name}' (PID: {pid}).")


def main(argv: list[str] | None = None) -> int:
    """Run the process guard until interrupted."""
    parser = argparse.ArgumentParser(prog="matcomguard", description="Process CPU/RAM guard.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="configuration file")
    parser.add_argument("--interval", type=float, default=MONITOR_INTERVAL, help="seconds between scans")
    args = parser.parse_args(argv)

    print("Guardian del Tesoro Real - Monitoreo")
    config = load_config(args.config)
    print("Configuracion cargada:")
    print(f"Umbral CPU: {config.cpu_threshold:.2f}%")
    print(f"Umbral RAM: {config.ram_threshold:.2f}%")
    print(f"Tiempo alerta: {config.time_threshold} seg")
    print(f"Procesos en lista blanca: {len(config.whitelist)}")

    total_ram = psutil.virtual_memory().total
    if not total_ram:
        print("Error: No se pudo obtener la memoria total", file=sys.stderr)
        return 1

    monitor = ProcessMonitor(config, total_ram)
    try:
        while True:
            samples = take_snapshot()
            if samples:
                for verdict in monitor.evaluate(samples):
                    _report(verdict)
            time.sleep(args.interval)
    except KeyboardInterrupt:
        return 0