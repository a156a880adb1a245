"""Host health sampling."""

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)

# Disks smaller than this are never reported or flagged.
DISK_FLOOR_BYTES = 10 * 1024**3
DISK_FREE_THRESHOLD = 0.85
RAM_THRESHOLD = 0.85
LOAD_THRESHOLD = 0.8

_SYS_BLOCK = Path("/sys/class/block")


@dataclass(slots=True, frozen=True)
class DiskInfo:
    """Raw capacity figures for one mounted disk."""

    mountpoint: str
    total: int  # Bytes
    available: int  # Bytes
    removable: bool = False


@dataclass(slots=True, frozen=True)
class DiskUsage:
    used: int
    total: int
    fraction: float


@dataclass(slots=True, frozen=True)
class SystemSnapshot:
    """Snapshot of overall host state."""

    disk_low: int | None = None
    disks: list[DiskUsage] = field(default_factory=list)
    cpu_avg: tuple[float, float] = (0.0, 0.0)  # (raw 5-min load, load per physical core)
    ram: tuple[int, int] = (0, 0)  # (used, total) bytes
    uptime: int = 0  # Seconds

    def to_dict(self) -> dict:
        return asdict(self)


def cpu_average(load5: float, cores: int | None) -> tuple[float, float]:
    """Raw and per-core 5-minute load; negative load means unavailable."""
    if load5 < 0.0:
        return (0.0, 0.0)
    return (load5, load5 / (cores or 1))


def check_disk(disks: list[DiskInfo]) -> int | None:
    """
    Index of the first disk at or above the size floor whose available
    space exceeds 85% of its capacity.

    Note: this flags disks that are mostly *free*. Removable media are not
    skipped here, only in disk_report().
    """
    for i, disk in enumerate(disks):
        if disk.total < DISK_FLOOR_BYTES:
            continue
        if disk.available / disk.total > DISK_FREE_THRESHOLD:
            return i
    return None


def disk_report(disks: list[DiskInfo]) -> list[DiskUsage]:
    """Usage of fixed disks at or above the size floor."""
    report = []
    for disk in disks:
        if disk.total < DISK_FLOOR_BYTES or disk.removable:
            continue
        used = disk.total - disk.available
        report.append(DiskUsage(used=used, total=disk.total, fraction=used / disk.total))
    return report


def is_overloaded(snapshot: SystemSnapshot) -> bool:
    """True if any health threshold is exceeded."""
    used, total = snapshot.ram
    if total and used / total > RAM_THRESHOLD:
        return True
    if snapshot.cpu_avg[1] > LOAD_THRESHOLD:
        return True
    return snapshot.disk_low is not None


def _mib(num: int) -> int:
    return num // (1024**2)


def render(snapshot: SystemSnapshot) -> str:
    """Human-readable multi-line report for CHECK."""
    lines = []
    if snapshot.disk_low is not None:
        lines.append(f"*warn: disk space low on drive index: {snapshot.disk_low}")
    lines.append("disks:")
    for disk in snapshot.disks:
        lines.append(f"{_mib(disk.used)} MiB / {_mib(disk.total)} MiB {disk.fraction * 100:.1f}%")
    raw, per_core = snapshot.cpu_avg
    lines.append(f"load average: {raw:.2f}")
    lines.append(f"cpu average: {per_core * 100:.1f}% system uptime: {snapshot.uptime // 3600} hrs")
    return "\n".join(lines)


def _is_removable(partition) -> bool:
    if "removable" in partition.opts.split(","):
        return True
    # Linux: partitions inherit the flag from their parent block device
    node = _SYS_BLOCK / Path(partition.device).name
    for candidate in (node / "removable", node.resolve().parent / "removable"):
        try:
            return candidate.read_text().strip() == "1"
        except OSError:
            continue
    return False


def read_disks() -> list[DiskInfo]:
    """Capacity of every physical partition psutil reports."""
    disks = []
    for partition in psutil.disk_partitions(all=False):
        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except OSError:
            # Unmounted optical drives, stale network mounts
            continue
        disks.append(DiskInfo(
            mountpoint=partition.mountpoint,
            total=usage.total,
            available=usage.free,
            removable=_is_removable(partition),
        ))
    return disks


class HealthSampler:
    """
    Holds the latest SystemSnapshot.

    refresh() re-reads every counter and replaces the snapshot wholesale;
    it is blocking, so async callers go through refresh_async().
    """

    def __init__(self) -> None:
        self._snapshot = SystemSnapshot()
        self._sampled_at: float | None = None

    @property
    def snapshot(self) -> SystemSnapshot:
        return self._snapshot

    @property
    def sampled_at(self) -> float | None:
        """Wall-clock time of the last successful refresh."""
        return self._sampled_at

    def refresh(self) -> SystemSnapshot:
        disks = read_disks()
        mem = psutil.virtual_memory()
        load5 = psutil.getloadavg()[1]
        cores = psutil.cpu_count(logical=False) or psutil.cpu_count()

        snapshot = SystemSnapshot(
            disk_low=check_disk(disks),
            disks=disk_report(disks),
            cpu_avg=cpu_average(load5, cores),
            ram=(mem.total - mem.available, mem.total),
            uptime=int(time.time() - psutil.boot_time()),
        )
        self._snapshot = snapshot
        self._sampled_at = time.time()
        return snapshot

    async def refresh_async(self) -> SystemSnapshot:
        return await asyncio.to_thread(self.refresh)

    def is_overloaded(self) -> bool:
        return is_overloaded(self._snapshot)

    def render(self) -> str:
        return render(self._snapshot)

    async def run(self, interval: float) -> None:
        """Refresh every ``interval`` seconds until cancelled."""
        while True:
            try:
                await self.refresh_async()
            except Exception:
                logger.exception("Health sample failed")
            await asyncio.sleep(interval)
