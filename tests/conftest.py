import pytest

from recovery_persist.core.core import build_context


@pytest.fixture
def run_ctx(tmp_path):
    """RunContext com todos os caminhos sob tmp_path e diretórios base criados."""
    ctx = build_context({"durable_writes": False}, root=tmp_path)
    ctx.paths.recovery_dir.mkdir(parents=True, exist_ok=True)
    ctx.paths.pmsg.parent.mkdir(parents=True, exist_ok=True)
    return ctx
