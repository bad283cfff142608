"""Pacote system: inventário de máquinas e escrita durável de arquivos.

Re-exports úteis para o loop de coleta.
"""

from .files import write_payload
from .inventory import InventoryError, Machine, Tunnel, load_inventory

__all__ = ["InventoryError", "Machine", "Tunnel", "load_inventory", "write_payload"]
