"""Pacote core: orquestração principal do coletor.

Contém o loop de coleta e o parsing de argumentos.

Re-exports para importações curtas.
"""

from .core import run_cycle, run_loop

__all__ = ["run_cycle", "run_loop"]
