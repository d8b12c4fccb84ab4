import logging
from types import SimpleNamespace

from recovery_persist.system import mounts
from recovery_persist.system import records as rec_mod
from recovery_persist.system.records import IterableRecordSource, LogRecord


def _parts(*mountpoints):
    return [SimpleNamespace(device="dev", mountpoint=m, fstype="ext4", opts="rw") for m in mountpoints]


def test_is_mounted_true_and_false(monkeypatch):
    """is_mounted compara o ponto de montagem normalizado."""
    monkeypatch.setattr(mounts.psutil, "disk_partitions", lambda all=True: _parts("/", "/cache", "/data"))
    assert mounts.is_mounted("/cache")
    assert mounts.is_mounted("/cache/")
    assert not mounts.is_mounted("/cache/recovery")


def test_is_mounted_error_means_not_mounted(monkeypatch, caplog):
    def boom(all=True):
        raise OSError("no mounts")

    monkeypatch.setattr(mounts.psutil, "disk_partitions", boom)
    caplog.set_level(logging.ERROR)
    assert mounts.is_mounted("/cache") is False
    assert any("tabela de montagens" in r.message for r in caplog.records)


def test_priority_at_least():
    assert rec_mod.priority_at_least("error", "info")
    assert rec_mod.priority_at_least("info", "info")
    assert not rec_mod.priority_at_least("debug", "info")
    assert not rec_mod.priority_at_least("bogus", "info")


def test_iterable_record_source_filters():
    """Só registros da categoria, prioridade e prefixo pedidos chegam ao callback."""
    records = [
        LogRecord("recovery/last_log", b"log"),
        LogRecord("recovery/last_install", b"inst", priority="error"),
        LogRecord("other/file", b"x"),
        LogRecord("recovery/verbose", b"v", priority="verbose"),
        LogRecord("recovery/main", b"m", category="main"),
    ]
    seen = []

    def callback(category, priority, name, content, length):
        seen.append((name, content, length))
        return length

    delivered = IterableRecordSource(records)("system", "info", "recovery/", callback)
    assert delivered == 2
    assert seen == [("recovery/last_log", b"log", 3), ("recovery/last_install", b"inst", 4)]


def test_iterable_record_source_warns_on_partial(caplog):
    caplog.set_level(logging.WARNING)
    source = IterableRecordSource([LogRecord("recovery/last_log", b"abc")])
    source("system", "info", "recovery/", lambda *a: -1)
    assert any("parcialmente" in r.message for r in caplog.records)


def test_load_record_source(caplog):
    """Fonte configurada como 'modulo:nome' é importada; specs inválidos dão None."""
    assert rec_mod.load_record_source(None) is None
    assert rec_mod.load_record_source("recovery_persist.system.records:IterableRecordSource") is IterableRecordSource
    caplog.set_level(logging.ERROR)
    assert rec_mod.load_record_source("no-colon") is None
    assert rec_mod.load_record_source("recovery_persist.system.records:nope") is None
    assert rec_mod.load_record_source("recovery_persist.system.records:PRIORITIES") is None


def test_load_record_source_module_raising_on_import(tmp_path, monkeypatch, caplog):
    """Um módulo que falha na importação com qualquer exceção resulta em None."""
    (tmp_path / "rp_source_raises_runtime.py").write_text("raise RuntimeError('boom')\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    caplog.set_level(logging.ERROR)
    assert rec_mod.load_record_source("rp_source_raises_runtime:source") is None
    assert any("não foi possível carregar" in r.message for r in caplog.records)
