# vulture: ignore
"""Escrita segura do payload de saída em disco.

Usa lock exclusivo via `portalocker` e fsync quando a durabilidade está
habilitada (``COLLECTOR_DURABLE_WRITES``, padrão ligado).
"""

from pathlib import Path
import os
import logging
import re

import portalocker

logger = logging.getLogger(__name__)

DURABLE_WRITES = os.environ.get("COLLECTOR_DURABLE_WRITES", "1").lower() in ("1", "true", "yes", "on")


# -----------------------
# Escrita segura
# -----------------------
def write_payload(path: Path | str, data: bytes) -> None:
    """Substitua o conteúdo de `path` por `data` sob lock exclusivo.

    Cria o diretório pai quando necessário. Falhas de lock/fsync são apenas
    registradas; `OSError` na abertura ou escrita é registrado e propagado
    para que o loop contabilize a falha.
    """
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("wb") as fh:
            locked = False
            try:
                try:
                    portalocker.lock(fh, portalocker.LOCK_EX)
                    locked = True
                except portalocker.LockException as exc:
                    logger.debug("write_payload: portalocker.lock falhou em %s: %s", p, exc)

                fh.write(data)
                fh.flush()

                if DURABLE_WRITES:
                    try:
                        os.fsync(fh.fileno())
                    except OSError as exc:
                        logger.debug("write_payload: fsync falhou em %s: %s", p, exc)
            finally:
                if locked:
                    portalocker.unlock(fh)
    except OSError as exc:
        logger.error("write_payload: falhou em %s: %s", p, exc, exc_info=True)
        raise


# -----------------------
# Normalização de nomes
# -----------------------
def sanitize_file_name(raw_name: str, fallback: str = "machine") -> str:
    """Sanitize um nome (ex.: nome da máquina) para uso como nome de arquivo.

    Remove caracteres potencialmente perigosos e limita o comprimento.
    """
    rn = Path(raw_name or fallback).name.lstrip(".")
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", rn)
    if not name:
        name = fallback
    if len(name) > 200:
        name = name[:200]
    return name


def output_path_for(template: Path | str, machine_name: str) -> Path:
    """Resolve o caminho de saída; ``{machine}`` no template vira o nome sanitizado."""
    text = str(template)
    if "{machine}" in text:
        text = text.replace("{machine}", sanitize_file_name(machine_name))
    return Path(text)
