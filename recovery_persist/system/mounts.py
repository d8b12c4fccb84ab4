"""Inspeção da tabela de montagens via psutil."""

import logging
import os
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)


def is_mounted(mountpoint: str | Path) -> bool:
    """Retorna True se `mountpoint` constar da tabela de montagens.

    Erros ao consultar a tabela são registrados e tratados como "não montado".
    """
    target = os.path.normpath(str(mountpoint))
    try:
        partitions = psutil.disk_partitions(all=True)
    except (OSError, psutil.Error) as exc:
        logger.error("falha ao ler tabela de montagens: %s", exc)
        return False
    return any(os.path.normpath(p.mountpoint) == target for p in partitions)
