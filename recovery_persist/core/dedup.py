"""Writer com deduplicação para os registros pmsg.

Para cada registro (nome de destino, conteúdo) compara com o que já está em
disco; conteúdo idêntico não toca no filesystem, conteúdo novo dispara a
rotação (uma única vez por execução) e sobrescreve o destino atomicamente.
"""

import logging
from pathlib import Path

from ..system.log_helpers import atomic_write_bytes, read_bytes, safe_destination
from .rotation import rotate_if_needed
from .state import RunContext

logger = logging.getLogger(__name__)


class DedupWriter:
    """Consome registros e converge cada destino para o último conteúdo visto."""

    def __init__(self, ctx: RunContext, base_dir: Path | None = None):
        self.ctx = ctx
        self.base_dir = Path(base_dir) if base_dir is not None else ctx.paths.data_misc

    def on_record(self, destination_name: str, content: bytes) -> int:
        """Processa um registro e retorna os bytes tratados (-1 em falha).

        Conteúdo igual ao existente devolve ``len(content)`` sem escrever.
        """
        stats = self.ctx.stats
        stats.records_seen += 1

        destination = safe_destination(self.base_dir, destination_name)
        if destination is None:
            logger.error("nome de destino recusado: %r", destination_name)
            stats.write_failures += 1
            return -1

        if read_bytes(destination) == content:
            stats.records_unchanged += 1
            logger.debug("%s inalterado (%d bytes)", destination, len(content))
            return len(content)

        # Política simples: um ficheiro, uma rotação. Não tenta detectar vários
        # logs lógicos já rotacionados vindos do mesmo buffer.
        rotate_if_needed(self.ctx)

        written = atomic_write_bytes(destination, content, durable=self.ctx.durable_writes)
        if written < 0:
            stats.write_failures += 1
        else:
            stats.records_written += 1
            logger.info("%s atualizado (%d bytes)", destination, written)
        return written

    def logsave(self, category: str, priority: str, destination_name: str, content: bytes, length: int) -> int:
        """Callback no formato esperado pela fonte de registros."""
        return self.on_record(destination_name, bytes(content[:length]))
