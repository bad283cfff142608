"""Inventário de máquinas em JSON.

Formato esperado: um array de objetos ``{"master": {...}}`` com ``host``,
``tunnels`` (``type``, ``user``, ``port``), ``description``, ``name`` e ``id``.
Somente host, porta HTTP e nome são usados pelo loop de coleta.
"""

from __future__ import annotations

import json as _json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


class InventoryError(ValueError):
    """Inventário ausente, inválido ou máquina sem túnel utilizável."""


@dataclass(frozen=True)
class Tunnel:
    type: str = ""
    user: str = ""
    port: str = ""


@dataclass(frozen=True)
class Machine:
    """Máquina descrita no inventário (campo ``master`` do JSON)."""

    host: str
    name: str
    tunnels: List[Tunnel] = field(default_factory=list)
    description: str = ""
    id: int = 0

    def http_port(self) -> str:
        """Porta do primeiro túnel ``http``; sem ele, a do primeiro túnel."""
        if not self.tunnels:
            raise InventoryError(f"máquina {self.name!r} sem túneis")
        for tunnel in self.tunnels:
            if tunnel.type == "http":
                return tunnel.port
        return self.tunnels[0].port


# ========================
# Leitura
# ========================


def load_inventory(path: Path | str) -> List[Machine]:
    """Lê o arquivo de inventário e retorna as máquinas na ordem do arquivo."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = _json.load(fh)
    except OSError as exc:
        raise InventoryError(f"falha ao ler inventário {p}: {exc}") from exc
    except ValueError as exc:
        raise InventoryError(f"inventário {p} não é JSON válido: {exc}") from exc
    return parse_inventory(data)


def parse_inventory(data) -> List[Machine]:
    """Converte o JSON já decodificado em ``Machine``."""
    if not isinstance(data, list):
        raise InventoryError("inventário deve ser um array JSON")
    machines = []
    for idx, entry in enumerate(data):
        master = entry.get("master") if isinstance(entry, dict) else None
        if not isinstance(master, dict):
            raise InventoryError(f"entrada {idx} sem objeto 'master'")
        tunnels = [
            Tunnel(str(t.get("type", "")), str(t.get("user", "")), str(t.get("port", "")))
            for t in master.get("tunnels") or []
            if isinstance(t, dict)
        ]
        try:
            machine_id = int(master.get("id") or 0)
        except (TypeError, ValueError):
            logger.warning("id inválido na entrada %d: %r", idx, master.get("id"))
            machine_id = 0
        machines.append(
            Machine(
                host=str(master.get("host", "")),
                name=str(master.get("name", "")),
                tunnels=tunnels,
                description=str(master.get("description", "")),
                id=machine_id,
            )
        )
    logger.debug("inventário: %d máquinas", len(machines))
    return machines
