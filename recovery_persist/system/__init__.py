"""Pacote system: helpers de ficheiros, rotação, montagens e fonte de registros.

Re-exports úteis para os módulos de core.
"""

from .log_helpers import compare_files, files_exist, atomic_write_bytes, copy_file

__all__ = ["compare_files", "files_exist", "atomic_write_bytes", "copy_file"]
