"""Helpers de baixo nível para o subsistema de persistência.

Fornece comparação de ficheiros por blocos, leitura tolerante a ausência,
escrita atômica com lock, cópia, movimentação e remoção de ficheiros.
Nenhuma função daqui propaga erros de I/O: todas registram e devolvem um
valor sentinela (False, -1 ou bytes vazios).
"""

from pathlib import Path, PurePosixPath
import os
import logging
import shutil
import stat
import tempfile

import portalocker

logger = logging.getLogger(__name__)

COMPARE_CHUNK_SIZE = 16 * 1024
COPY_CHUNK_SIZE = 4096
TMP_SUFFIX = ".tmp"
DEFAULT_FILE_MODE = 0o640


# -----------------------
# Existência / tamanho
# -----------------------
def file_exists(path) -> bool:
    """Retorna True se `path` existir e for legível."""
    return os.access(str(path), os.R_OK)


def files_exist(path_a, path_b) -> bool:
    """Retorna True somente se ambos os ficheiros forem legíveis."""
    return file_exists(path_a) and file_exists(path_b)


def file_size(path) -> int:
    """Tamanho em bytes de `path`; 0 quando não for possível obter."""
    try:
        return os.stat(str(path)).st_size
    except OSError:
        return 0


# -----------------------
# Comparação
# -----------------------
def _read_fully(fh, count: int) -> bytes | None:
    """Lê exatamente `count` bytes de `fh`; None em leitura curta."""
    chunks = []
    remaining = count
    while remaining > 0:
        chunk = fh.read(remaining)
        if not chunk:
            return None
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def compare_files(path_a, path_b, chunk_size: int = COMPARE_CHUNK_SIZE) -> bool:
    """Compara dois ficheiros byte a byte, em blocos de `chunk_size`.

    Retorna False de imediato quando um dos ficheiros não é legível ou quando
    os tamanhos diferem (nenhum conteúdo é lido nesse caso). Falhas de leitura
    durante a comparação contam como diferença e são registradas.
    """
    if not files_exist(path_a, path_b):
        return False
    size = file_size(path_a)
    if size != file_size(path_b):
        return False
    try:
        with open(path_a, "rb") as fa, open(path_b, "rb") as fb:
            remaining = size
            while remaining > 0:
                count = min(remaining, chunk_size)
                block_a = _read_fully(fa, count)
                if block_a is None:
                    logger.error("compare_files: falha ao ler de %s", path_a)
                    return False
                block_b = _read_fully(fb, count)
                if block_b is None:
                    logger.error("compare_files: falha ao ler de %s", path_b)
                    return False
                if block_a != block_b:
                    return False
                remaining -= count
    except OSError as exc:
        logger.error("compare_files: erro comparando %s e %s: %s", path_a, path_b, exc)
        return False
    return True


# -----------------------
# Leitura / escrita
# -----------------------
def read_bytes(path: Path) -> bytes:
    """Retorna o conteúdo de `path`; ficheiro ausente equivale a conteúdo vazio."""
    try:
        return Path(path).read_bytes()
    except FileNotFoundError:
        return b""
    except OSError as exc:
        logger.error("read_bytes: falha ao ler %s: %s", path, exc)
        return b""


def _lock(fh, path) -> bool:
    try:
        portalocker.lock(fh, portalocker.LOCK_EX)
        return True
    except (portalocker.LockException, OSError) as exc:
        logger.debug("portalocker.lock falhou em %s: %s", path, exc)
        return False


def _unlock(fh, path) -> None:
    try:
        portalocker.unlock(fh)
    except (portalocker.LockException, OSError) as exc:
        logger.debug("portalocker.unlock falhou em %s: %s", path, exc)


def _flush_and_sync(fh, path, durable: bool) -> None:
    fh.flush()
    if durable:
        try:
            os.fsync(fh.fileno())
        except OSError as exc:
            logger.debug("fsync falhou em %s: %s", path, exc)


def _target_mode(path: Path) -> int:
    """Permissões do destino existente; DEFAULT_FILE_MODE para ficheiro novo."""
    try:
        return stat.S_IMODE(os.stat(str(path)).st_mode)
    except FileNotFoundError:
        return DEFAULT_FILE_MODE


def atomic_write_bytes(path: Path, data: bytes, durable: bool = True) -> int:
    """Substitui o conteúdo de `path` por `data` de forma atômica.

    Escreve num ficheiro temporário do mesmo diretório (com lock exclusivo e
    fsync quando `durable`) e faz ``os.replace``. Em caso de falha o destino
    fica intacto, o temporário é removido e retorna -1. Em sucesso retorna o
    número de bytes escritos.
    """
    path = Path(path)
    tmp: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=TMP_SUFFIX, dir=str(path.parent))
        tmp = Path(tmp_name)
        with os.fdopen(fd, "wb") as fh:
            locked = _lock(fh, tmp)
            try:
                fh.write(data)
                _flush_and_sync(fh, tmp, durable)
            finally:
                if locked:
                    _unlock(fh, tmp)
        os.chmod(tmp, _target_mode(path))
        os.replace(tmp, path)
        return len(data)
    except OSError as exc:
        logger.error("atomic_write_bytes: falhou em %s: %s", path, exc, exc_info=True)
        if tmp is not None:
            try:
                tmp.unlink(missing_ok=True)
            except OSError as exc2:
                logger.debug("atomic_write_bytes: não foi possível remover %s: %s", tmp, exc2)
        return -1


def copy_file(source: Path, destination: Path, durable: bool = True) -> bool:
    """Copia `source` sobre `destination` (sobrescrita incondicional).

    A origem é aberta primeiro; se não for legível o destino não é tocado.
    """
    try:
        src_fh = open(source, "rb")
    except OSError as exc:
        logger.error("copy_file: não foi possível abrir %s: %s", source, exc)
        return False
    with src_fh:
        try:
            Path(destination).parent.mkdir(parents=True, exist_ok=True)
            with open(destination, "wb") as dst_fh:
                locked = _lock(dst_fh, destination)
                try:
                    shutil.copyfileobj(src_fh, dst_fh, COPY_CHUNK_SIZE)
                    _flush_and_sync(dst_fh, destination, durable)
                finally:
                    if locked:
                        _unlock(dst_fh, destination)
        except OSError as exc:
            logger.error("copy_file: erro copiando %s -> %s: %s", source, destination, exc, exc_info=True)
            return False
    return True


# -----------------------
# Movimentação / remoção
# -----------------------
def _attempt_rename(s: Path, d: Path) -> bool:
    try:
        s.rename(d)
        return True
    except OSError as exc:
        logger.debug("move_file: rename falhou: %s", exc)
        return False


def _attempt_replace(s: Path, d: Path) -> bool:
    try:
        os.replace(s, d)
        return True
    except OSError as exc:
        logger.debug("move_file: os.replace falhou: %s", exc)
        return False


def move_file(src: Path, dst: Path) -> bool:
    """Move `src` para `dst`, substituindo o destino; False se `src` não existir."""
    src, dst = Path(src), Path(dst)
    if not src.exists():
        return False
    if _attempt_rename(src, dst) or _attempt_replace(src, dst):
        return True
    logger.error("move_file: não foi possível mover %s -> %s", src, dst)
    return False


def remove_file(path: Path) -> bool:
    """Remove `path` se existir. Retorna False apenas em falha real de unlink."""
    try:
        Path(path).unlink(missing_ok=True)
        return True
    except OSError as exc:
        logger.error("Falha ao remover %s: %s", path, exc)
        return False


# -----------------------
# Normalização de destinos
# -----------------------
def safe_destination(base: Path, name: str) -> Path | None:
    """Junta `name` a `base`, recusando nomes absolutos ou que escapem de `base`."""
    if not name or "\x00" in name:
        return None
    rel = PurePosixPath(name)
    if rel.is_absolute() or ".." in rel.parts or not rel.parts:
        return None
    return Path(base).joinpath(*rel.parts)
