"""Rotação única por execução."""

import logging

from ..system import logs as _logs
from .state import RunContext

logger = logging.getLogger(__name__)


def rotate_if_needed(ctx: RunContext) -> bool:
    """Rotaciona ``last_log``/``last_kmsg`` se ainda não houve rotação nesta execução.

    Não decide se a rotação é necessária; isso cabe a quem chama. Retorna
    True apenas quando a rotação aconteceu nesta chamada.
    """
    if ctx.rotated:
        return False
    moved = _logs.rotate_logs(ctx.paths.last_log, ctx.paths.last_kmsg, ctx.keep_log_count)
    ctx.rotated = True
    ctx.stats.rotations += 1
    logger.info("logs rotacionados (%d ficheiros movidos)", moved)
    return True
