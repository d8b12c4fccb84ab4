"""Parser de argumentos do recovery-persist.

Docstrings e mensagens em português.

Este módulo fornece um parser simples que expõe:
- persistência forçada mesmo com /cache montado (--force-persist)
- raiz alternativa para todos os caminhos (--root)
- verbosidade (-v) e nível de logging (--log-level)

Argumentos desconhecidos são ignorados com aviso: a ferramenta nunca deve
falhar no arranque por causa da linha de comando.
"""

import argparse
import logging
import os
from typing import Sequence

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")

# ========================
# 0. Configuração do parser e argumentos padrão
# ========================


# Função principal do módulo; cria e retorna o ArgumentParser configurado
def configure_argparser() -> argparse.ArgumentParser:
    """Cria e retorna ArgumentParser configurado para o recovery-persist."""
    parser = argparse.ArgumentParser(
        prog="recovery-persist",
        description="Persiste os logs de recovery do pmsg/consola em /data/misc/recovery",
    )
    parser.add_argument(
        "--force-persist",
        dest="force_persist",
        action="store_true",
        default=False,
        help="Ignora a montagem de /cache e persiste sempre o conteúdo do pmsg",
    )
    parser.add_argument(
        "--root",
        dest="root",
        type=str,
        default=None,
        help="Prefixo aplicado a todos os caminhos (substitui RECOVERY_PERSIST_ROOT)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Aumenta a verbosidade (-v)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default=None,
        help="Nível de logging (DEBUG/INFO/WARNING/ERROR). Se ausente, definido por -v",
    )
    return parser


# ========================
# 1. Análise de argumentos
# ========================


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Analisa argv e retorna Namespace; ENV só vale quando a CLI não definiu o valor."""
    parser = configure_argparser()
    try:
        ns, unknown = parser.parse_known_args(argv)
    except SystemExit as exc:
        # --help sai com 0; erros de sintaxe não podem mudar o código de saída
        if exc.code in (0, None):
            raise
        logger.warning("argumentos inválidos %s; usando valores padrão", list(argv or []))
        ns, unknown = parser.parse_known_args([])
    if unknown:
        logger.warning("argumentos ignorados: %s", " ".join(unknown))

    if not ns.force_persist:
        env_force = os.getenv("RECOVERY_PERSIST_FORCE")
        if env_force is not None:
            ns.force_persist = env_force.lower() in _TRUE_VALUES
    if ns.root is None:
        ns.root = os.getenv("RECOVERY_PERSIST_ROOT") or None
    if ns.log_level is None:
        ns.log_level = os.getenv("RECOVERY_PERSIST_LOG_LEVEL") or None
    return ns


# ========================
# 2. Configuração de logging
# ========================


def get_log_config(args: argparse.Namespace, default_level: str = "INFO") -> dict:
    """Retorna dict com configuração de logging ('level')."""
    if getattr(args, "log_level", None):
        level = str(args.log_level).upper()
    elif (getattr(args, "verbose", 0) or 0) >= 1:
        level = "DEBUG"
    else:
        level = str(default_level).upper()
    if not isinstance(getattr(logging, level, None), int):
        logger.warning("nível de logging inválido: %s; usando INFO", level)
        level = "INFO"
    return {"level": level}
