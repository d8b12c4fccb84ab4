"""
Exportação do resumo da execução no formato texto do Prometheus.

Escreve um ficheiro para o textfile collector do node_exporter com os
contadores da última execução. Falhas apenas são registradas.
"""

import logging
from pathlib import Path

from prometheus_client import CollectorRegistry, Gauge, write_to_textfile

from ..core.state import RunContext

logger = logging.getLogger(__name__)

METRIC_PREFIX = "recovery_persist_"

_GAUGES = {
    "records_seen": "Registros pmsg entregues ao writer",
    "records_written": "Registros que sobrescreveram o destino",
    "records_unchanged": "Registros iguais ao conteúdo em disco",
    "write_failures": "Registros cuja escrita falhou",
    "rotations": "Rotações executadas nesta execução",
    "rotated": "1 se houve rotação nesta execução",
    "console_seeded": "1 se last_kmsg foi semeado a partir da consola",
    "cache_mounted": "1 se /cache estava montado",
    "pmsg_present": "1 se o ficheiro pmsg existia",
}


def build_registry(ctx: RunContext) -> CollectorRegistry:
    """Cria um registry isolado com um Gauge por contador da execução."""
    registry = CollectorRegistry()
    values = ctx.stats.as_dict()
    values["rotated"] = ctx.rotated
    for name, doc in _GAUGES.items():
        gauge = Gauge(f"{METRIC_PREFIX}{name}", doc, registry=registry)
        gauge.set(float(values.get(name) or 0))
    return registry


def export_run_metrics(ctx: RunContext, path: str | Path | None) -> bool:
    """Escreve as métricas da execução em `path`; no-op quando `path` é vazio."""
    if not path:
        return False
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        write_to_textfile(str(path), build_registry(ctx))
        return True
    except OSError as exc:
        logger.warning("Falha ao exportar métricas para %s: %s", path, exc)
        return False
