"""Estado de uma execução do recovery-persist.

O flag ``rotated`` vive aqui, num contexto explícito passado ao writer e ao
reconciliador, em vez de uma global de módulo.
"""

from dataclasses import dataclass, field

from ..config.settings import DEFAULT_COMPARE_CHUNK_SIZE, DEFAULT_KEEP_LOG_COUNT
from ..system.logs import RecoveryPaths


@dataclass
class RunStats:
    """Contadores da execução, usados no log final e nas métricas."""

    cache_mounted: bool = False
    pmsg_present: bool = False
    records_seen: int = 0
    records_written: int = 0
    records_unchanged: int = 0
    write_failures: int = 0
    rotations: int = 0
    console_seeded: bool = False
    skipped_reason: str | None = None

    def as_dict(self) -> dict:
        return {
            "cache_mounted": self.cache_mounted,
            "pmsg_present": self.pmsg_present,
            "records_seen": self.records_seen,
            "records_written": self.records_written,
            "records_unchanged": self.records_unchanged,
            "write_failures": self.write_failures,
            "rotations": self.rotations,
            "console_seeded": self.console_seeded,
            "skipped_reason": self.skipped_reason,
        }


@dataclass
class RunContext:
    """Contexto de uma execução.

    ``rotated`` começa False, passa a True na primeira rotação e nunca volta
    atrás dentro da mesma execução (NOT_ROTATED -> ROTATED).
    """

    paths: RecoveryPaths
    keep_log_count: int = DEFAULT_KEEP_LOG_COUNT
    compare_chunk_size: int = DEFAULT_COMPARE_CHUNK_SIZE
    durable_writes: bool = True
    rotated: bool = False
    stats: RunStats = field(default_factory=RunStats)
