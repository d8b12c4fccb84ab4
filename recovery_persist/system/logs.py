"""Subsistema de logs de recovery: caminhos e rotação.

Agrupa os caminhos bem conhecidos usados por uma execução e implementa a
rotação numerada de ``last_log`` / ``last_kmsg``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..config.settings import DEFAULT_KEEP_LOG_COUNT, resolve_paths
from .log_helpers import move_file

logger = logging.getLogger(__name__)


# ========================
# 1. Diretórios e Paths
# ========================


@dataclass(frozen=True)
# Representa os caminhos usados numa execução; alimenta writer e reconciliador
class RecoveryPaths:
    """Agrupa caminhos usados pelo recovery-persist.

    ``data_misc`` é a base à qual os nomes dos registros pmsg são juntados
    (ex.: ``recovery/last_log``). ``last_kmsg`` é o slot de backup semeado a
    partir do buffer de consola.
    """

    data_misc: Path
    recovery_dir: Path
    last_log: Path
    last_kmsg: Path
    last_install: Path
    cache_mount: Path
    cache_last_install: Path
    pmsg: Path
    console: Path
    alt_console: Path

    def console_sources(self) -> tuple[Path, Path]:
        """Fontes de consola na ordem de preferência (primária, alternativa)."""
        return (self.console, self.alt_console)


def get_recovery_paths(paths: dict | None = None, root: str | Path | None = None) -> RecoveryPaths:
    """Resolve os caminhos configurados, opcionalmente sob a raiz `root`."""
    resolved = resolve_paths(paths, root)
    return RecoveryPaths(**{name: resolved[name] for name in RecoveryPaths.__dataclass_fields__})


# ========================
# 2. Rotação
# ========================


def rotation_slot(path: Path, index: int) -> Path:
    """Caminho do slot `index` de `path`; o índice 0 é o próprio ficheiro."""
    path = Path(path)
    if index <= 0:
        return path
    return path.with_name(f"{path.name}.{index}")


def _rotate_one(path: Path, keep: int) -> int:
    moved = 0
    for i in range(keep - 1, -1, -1):
        old = rotation_slot(path, i)
        if not old.exists():
            continue
        if move_file(old, rotation_slot(path, i + 1)):
            moved += 1
    return moved


def rotate_logs(last_log: Path, last_kmsg: Path, keep: int = DEFAULT_KEEP_LOG_COUNT) -> int:
    """Desloca ``last_log`` e ``last_kmsg`` um slot para trás.

    ``X.{keep-1}`` vai para ``X.{keep}`` (sobrescrevendo o mais antigo), ...,
    ``X`` vai para ``X.1``. Slots ausentes são ignorados. Retorna o número de
    ficheiros movidos.
    """
    moved = _rotate_one(last_log, keep) + _rotate_one(last_kmsg, keep)
    logger.debug("rotate_logs: %d ficheiros movidos (keep=%d)", moved, keep)
    return moved
