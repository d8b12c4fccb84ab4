"""Reconciliação do backup ``last_kmsg`` com o buffer de consola.

Executado uma vez, depois de drenados os registros pmsg.
"""

import logging
from pathlib import Path

from ..system.log_helpers import compare_files, copy_file, file_exists
from .rotation import rotate_if_needed
from .state import RunContext

logger = logging.getLogger(__name__)


def first_console_source(ctx: RunContext) -> Path | None:
    """Primeira fonte de consola legível (primária, depois alternativa)."""
    for source in ctx.paths.console_sources():
        if file_exists(source):
            return source
    return None


def reconcile(ctx: RunContext) -> bool:
    """Rotaciona se ``last_kmsg`` não corresponder a nenhuma fonte de consola.

    Sem efeito quando já houve rotação nesta execução ou quando nenhuma
    fonte de consola existe. Retorna True se rotacionou.
    """
    if ctx.rotated:
        return False
    if first_console_source(ctx) is None:
        logger.debug("nenhuma fonte de consola presente")
        return False
    backup = ctx.paths.last_kmsg
    for source in ctx.paths.console_sources():
        if compare_files(backup, source, ctx.compare_chunk_size):
            logger.debug("%s já corresponde a %s", backup, source)
            return False
    return rotate_if_needed(ctx)


def seed_backup_log(ctx: RunContext) -> bool:
    """Copia a fonte de consola existente sobre ``last_kmsg`` se houve rotação."""
    if not ctx.rotated:
        return False
    source = first_console_source(ctx)
    if source is None:
        return False
    ok = copy_file(source, ctx.paths.last_kmsg, durable=ctx.durable_writes)
    if ok:
        ctx.stats.console_seeded = True
        logger.info("%s copiado para %s", source, ctx.paths.last_kmsg)
    return ok
