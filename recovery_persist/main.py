"""Ponto de entrada do recovery-persist.

Este módulo realiza a inicialização: parsing de argumentos CLI, configuração
de logging, instalação opcional de handlers de debug e execução de uma
passagem de persistência. A lógica de runtime fica em `core` para facilitar
testes e reutilização.

O código de saída é sempre 0: falhas na persistência de logs nunca devem
bloquear o arranque do sistema.
"""

import os
import logging as _logging
import sys
from pathlib import Path

from .config.settings import load_settings
from .core.args import get_log_config, parse_args
from .core.core import build_context, run_persist
from .exporter.exporter import export_run_metrics
from .system.records import load_record_source

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main(argv: list[str] | None = None) -> int:
    """Executa uma passagem de persistência e retorna o código de saída (0).

    Args:
        argv: Lista de argumentos (usada em testes). Quando ``None`` a função
            utiliza os argumentos de linha de comando do processo.
    """
    logger = _logging.getLogger(__name__)
    try:
        args = parse_args(argv)
        settings = load_settings()
        _configure_logging(args, settings)
        ctx = build_context(settings, root=args.root)
        source = load_record_source(settings.get("record_source"))
        run_persist(ctx, force_persist=args.force_persist, record_source=source)
        export_run_metrics(ctx, settings.get("metrics_file"))
    except Exception:
        logger.error("falha inesperada na persistência de logs", exc_info=True)
    return 0


def _configure_logging(args, settings: dict) -> None:
    """Configura o logger root e, se pedido, o ficheiro de debug."""
    log_conf = get_log_config(args, settings.get("log_level", "INFO"))
    level = getattr(_logging, log_conf.get("level", "INFO"), _logging.INFO)
    _logging.basicConfig(level=level, format=LOG_FORMAT)

    debug_log = settings.get("debug_log")
    if debug_log:
        try:
            _setup_debug_file_handler(Path(debug_log))
        except OSError as exc:
            _logging.getLogger(__name__).warning("falha ao configurar debug file handler: %s", exc)


class _QuietFileHandler(_logging.FileHandler):
    """FileHandler cujas falhas de escrita nunca interrompem a execução."""

    def handleError(self, record):
        sys.stderr.write(f"recovery-persist: falha ao escrever em {self.baseFilename}\n")


def _setup_debug_file_handler(debug_path: Path) -> None:
    """Anexa ao logger root um ficheiro de debug e instala o ``sys.excepthook``.

    Chamadas repetidas com o mesmo caminho não duplicam o handler.
    """
    debug_path.parent.mkdir(parents=True, exist_ok=True)
    root = _logging.getLogger()
    target = os.path.abspath(debug_path)
    if not any(isinstance(h, _logging.FileHandler) and h.baseFilename == target for h in root.handlers):
        fh = _QuietFileHandler(target, encoding="utf-8")
        fh.setLevel(_logging.DEBUG)
        fh.setFormatter(_logging.Formatter(LOG_FORMAT))
        root.addHandler(fh)

    def _exc_hook(exc_type, exc_value, exc_tb):
        try:
            root.error("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))
        except Exception:
            sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _exc_hook


if __name__ == "__main__":
    sys.exit(main())
