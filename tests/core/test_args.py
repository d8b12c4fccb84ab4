from types import SimpleNamespace

from recovery_persist.core import args as args_mod


def test_configure_argparser_defaults():
    """Teste para configuração de argumentos padrão do parser."""
    ns = args_mod.configure_argparser().parse_args([])
    assert ns.force_persist is False
    assert ns.root is None
    assert ns.verbose == 0


def test_parse_args_force_persist(monkeypatch):
    monkeypatch.delenv("RECOVERY_PERSIST_FORCE", raising=False)
    ns = args_mod.parse_args(["--force-persist", "--root", "/tmp/x"])
    assert ns.force_persist is True
    assert ns.root == "/tmp/x"


def test_parse_args_ignores_unknown(caplog):
    """Argumentos desconhecidos não abortam o programa."""
    ns = args_mod.parse_args(["--bogus", "value"])
    assert ns.force_persist is False
    assert any("argumentos ignorados" in r.message for r in caplog.records)


def test_parse_args_env_fallback(monkeypatch):
    """ENV só é aplicado quando a CLI não definiu o valor."""
    monkeypatch.setenv("RECOVERY_PERSIST_FORCE", "yes")
    monkeypatch.setenv("RECOVERY_PERSIST_ROOT", "/env/root")
    monkeypatch.setenv("RECOVERY_PERSIST_LOG_LEVEL", "warning")
    ns = args_mod.parse_args(["--root", "/cli/root"])
    assert ns.force_persist is True
    assert ns.root == "/cli/root"
    assert ns.log_level == "warning"


def test_get_log_config_levels():
    """Teste para obtenção de níveis de configuração de log."""
    assert args_mod.get_log_config(SimpleNamespace(log_level="debug", verbose=0))["level"] == "DEBUG"
    assert args_mod.get_log_config(SimpleNamespace(log_level=None, verbose=1))["level"] == "DEBUG"
    assert args_mod.get_log_config(SimpleNamespace(log_level=None, verbose=0), "warning")["level"] == "WARNING"
    assert args_mod.get_log_config(SimpleNamespace(log_level="nonsense", verbose=0))["level"] == "INFO"


def test_parse_args_syntax_error_uses_defaults(monkeypatch, caplog):
    """Erros de sintaxe na CLI viram aviso; o parse devolve os valores padrão."""
    monkeypatch.delenv("RECOVERY_PERSIST_FORCE", raising=False)
    monkeypatch.delenv("RECOVERY_PERSIST_ROOT", raising=False)
    for argv in (["--root"], ["--force-persist=1"]):
        ns = args_mod.parse_args(argv)
        assert ns.force_persist is False
        assert ns.root is None
    assert sum("argumentos inválidos" in r.message for r in caplog.records) == 2
