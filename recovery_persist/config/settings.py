"""Configurações do recovery-persist.

Este módulo centraliza os caminhos bem conhecidos (pstore, diretório de
recovery), a política de rotação e as opções de logging. Os valores padrão
podem ser sobrescritos via arquivo ``.env`` ou variáveis de ambiente com
prefixo ``RECOVERY_PERSIST_*``. As funções públicas principais são:

- ``load_settings()`` -> dicionário com chaves: "paths", "keep_log_count",
  "compare_chunk_size", "durable_writes", "log_level", "record_source",
  "metrics_file", "debug_log".
- ``resolve_paths()`` -> caminhos efetivos (com prefixo raiz opcional).

Comentários e mensagens de log estão em português.
"""

import os
from pathlib import Path


# ========================
# Constantes e padrões globais
# ========================

ENV_PREFIX = "RECOVERY_PERSIST_"

DEFAULT_PATHS = {
    "data_misc": "/data/misc",
    "recovery_dir": "/data/misc/recovery",
    "last_log": "/data/misc/recovery/last_log",
    "last_kmsg": "/data/misc/recovery/last_kmsg",
    "last_install": "/data/misc/recovery/last_install",
    "cache_mount": "/cache",
    "cache_last_install": "/cache/recovery/last_install",
    "pmsg": "/sys/fs/pstore/pmsg-ramoops-0",
    "console": "/sys/fs/pstore/console-ramoops-0",
    "alt_console": "/sys/fs/pstore/console-ramoops",
}

DEFAULT_KEEP_LOG_COUNT = 10
DEFAULT_COMPARE_CHUNK_SIZE = 16 * 1024

# O ponto de montagem é um fato da tabela de montagens, não um ficheiro;
# nunca recebe o prefixo de raiz.
_UNPREFIXED_PATHS = ("cache_mount",)

_TRUE_VALUES = ("1", "true", "yes", "on")


# ========================
# 1. Carregamento das configurações
# ========================


# Função principal do módulo; carrega todas as configurações do ambiente
def load_settings() -> dict:
    """Carrega configurações combinando DEFAULTS + .env + ambiente.

    As variáveis em ambiente sobrescrevem valores do arquivo `.env`.
    """
    import logging

    logger = logging.getLogger(__name__)

    project_root = Path(__file__).resolve().parents[2]
    env_path = Path(os.getenv(f"{ENV_PREFIX}ENV_FILE", project_root / ".env"))
    env_items = _merge_env_items(env_path, logger)

    paths = DEFAULT_PATHS.copy()
    _apply_path_overrides(env_items, paths, logger)

    return {
        "paths": paths,
        "keep_log_count": _read_positive_int(
            env_items, f"{ENV_PREFIX}KEEP_LOG_COUNT", DEFAULT_KEEP_LOG_COUNT, logger
        ),
        "compare_chunk_size": _read_positive_int(
            env_items, f"{ENV_PREFIX}COMPARE_CHUNK_SIZE", DEFAULT_COMPARE_CHUNK_SIZE, logger
        ),
        "durable_writes": str(env_items.get(f"{ENV_PREFIX}DURABLE_WRITES", "1")).lower() in _TRUE_VALUES,
        "log_level": str(env_items.get(f"{ENV_PREFIX}LOG_LEVEL") or "INFO").upper(),
        "record_source": env_items.get(f"{ENV_PREFIX}RECORD_SOURCE") or None,
        "metrics_file": env_items.get(f"{ENV_PREFIX}METRICS_FILE") or None,
        "debug_log": env_items.get(f"{ENV_PREFIX}DEBUG_LOG") or None,
    }


# ========================
# 2. Funções auxiliares para ambiente e overrides
# ========================


def _read_env_file(path: Path | str) -> dict:
    """Lê um arquivo `.env` e devolve um dicionário chave->valor.

    Linhas vazias e comentários (começando com '#') são ignorados.
    """
    import logging

    logger = logging.getLogger(__name__)
    result: dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return result
    try:
        with p.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, val = line.split("=", 1)
                result[key.strip()] = val.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Falha ao ler .env em %s: %s", p, exc)
        return {}
    return result


def _merge_env_items(env_path: Path, logger) -> dict:
    """Retorna um mapeamento combinado de `.env` e env vars do processo.

    As variáveis do processo sobrescrevem o arquivo `.env`.
    """
    env_items = _read_env_file(env_path)
    if env_items == {} and env_path.exists():
        logger.warning("Erro ou ficheiro .env vazio em %s", env_path)
    env_items.update(os.environ)
    return env_items


def _apply_path_overrides(env_items: dict, paths: dict, logger) -> None:
    """Aplica overrides de caminhos a partir de ``env_items``.

    Procura chaves com prefixo ``RECOVERY_PERSIST_PATH_<NOME>``.
    """
    prefix = f"{ENV_PREFIX}PATH_"
    for key, raw_val in env_items.items():
        if not key.startswith(prefix):
            continue
        name = key[len(prefix) :].lower()
        if name not in paths:
            logger.debug("Caminho desconhecido ignorado: %s", key)
            continue
        if not raw_val:
            logger.warning("Valor vazio para %s; mantendo %s", key, paths[name])
            continue
        paths[name] = raw_val


def _read_positive_int(env_items: dict, key: str, default: int, logger) -> int:
    """Lê um inteiro positivo de ``env_items``; valores inválidos mantêm o default."""
    raw = env_items.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("%s inválido: %s", key, raw)
        return default
    if value <= 0:
        logger.warning("%s deve ser > 0: %s", key, raw)
        return default
    return value


# ========================
# 3. Resolução de caminhos
# ========================


def resolve_paths(paths: dict | None = None, root: str | Path | None = None) -> dict:
    """Retorna os caminhos como ``Path``, prefixados por ``root`` quando fornecido.

    ``root`` permite executar contra uma árvore de teste ou um chroot.
    """
    raw = DEFAULT_PATHS.copy()
    if paths:
        raw.update(paths)
    resolved: dict[str, Path] = {}
    for name, value in raw.items():
        p = Path(value)
        if root and name not in _UNPREFIXED_PATHS:
            p = Path(root) / str(p).lstrip("/")
        resolved[name] = p
    return resolved
