"""Transporte HTTP do coletor: scrape (GET), push (POST) e limpeza (DELETE).

Funções principais:
- fetch_exposition: lê o corpo de exposição de um alvo
- push_exposition: envia o payload ao endpoint de push
- delete_stale: remove o grupo antigo no endpoint antes de um novo push
- build_push_url: compõe ``<base>/<k>/<v>/.../<machine-label>/<machine-name>``

Falhas de rede são registradas e sinalizadas pelo retorno (None/False);
não há retry: a política fica com o loop de coleta.
"""

import logging
from typing import Iterable, Optional, Tuple
from urllib.parse import quote

import requests  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

PUSH_CONTENT_TYPE = "application/octet-stream"
DEFAULT_TIMEOUT = 5.0


def build_push_url(
    push_url: str,
    push_labels: Iterable[Tuple[str, str]],
    machine_label: str,
    machine_name: str,
) -> str:
    """Monta a URL de push do grupo da máquina."""
    segments = []
    for key, value in push_labels:
        segments.append(quote(str(key), safe=""))
        segments.append(quote(str(value), safe=""))
    segments.append(quote(str(machine_label), safe=""))
    segments.append(quote(str(machine_name), safe=""))
    return "/".join([push_url.rstrip("/")] + segments)


def target_url(host: str, port: str, path: str) -> str:
    """URL de scrape ``http://<host>:<port><path>`` (path com barra inicial)."""
    if not path.startswith("/"):
        path = "/" + path
    return f"http://{host}:{port}{path}"


def fetch_exposition(url: str, timeout: float = DEFAULT_TIMEOUT, session=None) -> Optional[bytes]:
    """Executa o GET no alvo e retorna o corpo, ou None se o alvo não respondeu 2xx."""
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.content
    except requests.RequestException as exc:
        logger.warning("Falha ao coletar %s: %s", url, exc)
        return None


def push_exposition(url: str, payload: bytes, timeout: float = DEFAULT_TIMEOUT, session=None) -> bool:
    """Envia o payload via POST; retorna True em caso de sucesso."""
    http = session or requests
    logger.debug("push %s (%d bytes)", url, len(payload))
    try:
        resp = http.post(url, data=payload, headers={"Content-Type": PUSH_CONTENT_TYPE}, timeout=timeout)
        resp.raise_for_status()
        return True
    except requests.RequestException as exc:
        logger.warning("Falha ao enviar métricas para %s: %s", url, exc)
        return False


def delete_stale(url: str, timeout: float = DEFAULT_TIMEOUT, session=None) -> bool:
    """Remove o grupo anterior no endpoint de push (DELETE)."""
    http = session or requests
    try:
        resp = http.delete(url, timeout=timeout)
        resp.raise_for_status()
        return True
    except requests.RequestException as exc:
        logger.warning("Falha ao remover scrape antigo em %s: %s", url, exc)
        return False
