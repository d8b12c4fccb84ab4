"""Pacote core: motor de rotação e deduplicação.

Contém o contexto da execução, a rotação única, o writer com deduplicação,
o reconciliador de consola e a orquestração de uma passagem.
"""

from .core import build_context, run_persist
from .state import RunContext

__all__ = ["build_context", "run_persist", "RunContext"]
