"""Interface com a fonte de registros persistidos (pmsg).

A decodificação do buffer pmsg fica fora deste projeto: a fonte é um
callable injetado que percorre os registros e chama um callback por
registro. Este módulo define o contrato, uma fonte que reproduz registros
em memória e o carregamento de uma fonte configurada como ``"modulo:atributo"``.
"""

import importlib
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

logger = logging.getLogger(__name__)

# Ordem crescente de severidade
PRIORITIES = ("verbose", "debug", "info", "warn", "error", "fatal")

# (category, priority, destination_name, content, length) -> bytes consumidos
RecordCallback = Callable[[str, str, str, bytes, int], int]


class RecordSource(Protocol):
    """Percorre registros e chama `callback` para cada um; retorna quantos entregou."""

    def __call__(self, category: str, min_priority: str, prefix: str, callback: RecordCallback) -> int: ...


@dataclass(frozen=True)
class LogRecord:
    """Registro lógico do buffer: nome de destino e conteúdo."""

    destination_name: str
    content: bytes
    category: str = "system"
    priority: str = "info"


def priority_at_least(priority: str, minimum: str) -> bool:
    """True se `priority` for igual ou mais severa que `minimum`."""
    try:
        return PRIORITIES.index(priority) >= PRIORITIES.index(minimum)
    except ValueError:
        return False


class IterableRecordSource:
    """Fonte que reproduz uma sequência de ``LogRecord`` já em memória."""

    def __init__(self, records: Iterable[LogRecord]):
        self._records = list(records)

    def __call__(self, category: str, min_priority: str, prefix: str, callback: RecordCallback) -> int:
        delivered = 0
        for rec in self._records:
            if rec.category != category or not priority_at_least(rec.priority, min_priority):
                continue
            if not rec.destination_name.startswith(prefix):
                continue
            consumed = callback(rec.category, rec.priority, rec.destination_name, rec.content, len(rec.content))
            if consumed < len(rec.content):
                logger.warning("registro %s consumido parcialmente (%d/%d)", rec.destination_name, consumed, len(rec.content))
            delivered += 1
        return delivered


def load_record_source(spec: str | None) -> RecordSource | None:
    """Importa a fonte configurada em `spec` (formato ``"pacote.modulo:nome"``).

    Retorna None, registrando o motivo, quando `spec` é vazio ou inválido.
    """
    if not spec:
        return None
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        logger.error("fonte de registros inválida (esperado modulo:nome): %s", spec)
        return None
    try:
        module = importlib.import_module(module_name)
        source = getattr(module, attr)
    except Exception as exc:
        logger.error("não foi possível carregar fonte de registros %s: %s", spec, exc, exc_info=True)
        return None
    if not callable(source):
        logger.error("fonte de registros %s não é chamável", spec)
        return None
    return source
