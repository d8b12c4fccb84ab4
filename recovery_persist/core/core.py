"""Core do recovery-persist.

Uma execução: verificação do volume /cache, drenagem dos registros pmsg pelo
writer com deduplicação, reconciliação com o buffer de consola e semeadura
do ``last_kmsg``.
"""

import logging
from pathlib import Path

from ..config.settings import DEFAULT_COMPARE_CHUNK_SIZE, DEFAULT_KEEP_LOG_COUNT
from ..system.log_helpers import file_exists, remove_file
from ..system.logs import get_recovery_paths
from ..system.mounts import is_mounted
from ..system.records import RecordSource
from .dedup import DedupWriter
from .reconcile import reconcile, seed_backup_log
from .state import RunContext

logger = logging.getLogger(__name__)

RECORD_CATEGORY = "system"
RECORD_MIN_PRIORITY = "info"
RECORD_PREFIX = "recovery/"


# ========================
# 1. Construção do contexto
# ========================


def build_context(settings: dict, root: str | Path | None = None) -> RunContext:
    """Cria o ``RunContext`` a partir do dicionário de ``load_settings()``."""
    return RunContext(
        paths=get_recovery_paths(settings.get("paths"), root),
        keep_log_count=settings.get("keep_log_count", DEFAULT_KEEP_LOG_COUNT),
        compare_chunk_size=settings.get("compare_chunk_size", DEFAULT_COMPARE_CHUNK_SIZE),
        durable_writes=settings.get("durable_writes", True),
    )


# ========================
# 2. Execução
# ========================


# Função principal do módulo; executa uma passagem completa de persistência
def run_persist(
    ctx: RunContext,
    force_persist: bool = False,
    record_source: RecordSource | None = None,
    cache_mounted: bool | None = None,
) -> RunContext:
    """Executa uma passagem de persistência e retorna o contexto atualizado.

    Parâmetros:
        ctx: contexto da execução (caminhos e estado de rotação).
        force_persist: persiste os registros pmsg mesmo com /cache montado.
        record_source: fonte de registros; None equivale a nenhum registro.
        cache_mounted: resultado pré-calculado da inspeção de montagens.
    """
    paths = ctx.paths
    stats = ctx.stats

    if cache_mounted is None:
        cache_mounted = is_mounted(paths.cache_mount)
    stats.cache_mounted = cache_mounted

    if cache_mounted:
        # Evita reportar duas vezes o mesmo last_install
        _remove_last_install(paths.cache_last_install)
        if not force_persist:
            stats.skipped_reason = "cache_mounted"
            logger.info("%s montado; nada a persistir", paths.cache_mount)
            return ctx

    if not file_exists(paths.pmsg):
        stats.skipped_reason = "no_pmsg"
        logger.info("%s ausente; nada a persistir", paths.pmsg)
        return ctx
    stats.pmsg_present = True

    _drain_records(ctx, record_source)

    if not cache_mounted:
        _remove_last_install(paths.last_install)

    reconcile(ctx)
    seed_backup_log(ctx)

    logger.info("execução concluída: %s", stats.as_dict())
    return ctx


def _drain_records(ctx: RunContext, record_source: RecordSource | None) -> int:
    """Entrega todos os registros ``recovery/`` ao writer; retorna quantos vieram."""
    if record_source is None:
        logger.warning("nenhuma fonte de registros configurada; passagem pmsg ignorada")
        return 0
    writer = DedupWriter(ctx)
    try:
        delivered = record_source(RECORD_CATEGORY, RECORD_MIN_PRIORITY, RECORD_PREFIX, writer.logsave)
    except Exception as exc:
        logger.error("fonte de registros falhou: %s", exc, exc_info=True)
        return 0
    logger.debug("%s registros entregues pela fonte", delivered)
    return delivered


def _remove_last_install(path: Path) -> None:
    if file_exists(path):
        remove_file(path)
