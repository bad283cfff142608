"""Configurações do coletor de métricas.

Este módulo centraliza os valores padrão do coletor e permite overrides via
arquivo ``.env`` ou variáveis de ambiente (prefixo ``COLLECTOR_*``).
As funções públicas principais são:

- ``load_settings()`` -> dicionário com chaves: "default_drop_prefixes",
  "http_timeout", "up_metric_name", "up_metric_help".
- ``CollectorConfig`` -> valor imutável montado na inicialização e passado
  explicitamente ao loop de coleta.

Comentários e mensagens de log estão em português.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from ..relabel.rules import DEFAULT_METRIC_PREFIXES, RelabelRuleSet
from ..relabel.synthetic import UP_METRIC_HELP, UP_METRIC_NAME

logger = logging.getLogger(__name__)


# ========================
# Constantes e padrões globais
# ========================

DEFAULT_HTTP_TIMEOUT = 5.0

DEFAULT_SETTINGS = {
    "default_drop_prefixes": DEFAULT_METRIC_PREFIXES,
    "http_timeout": DEFAULT_HTTP_TIMEOUT,
    "up_metric_name": UP_METRIC_NAME,
    "up_metric_help": UP_METRIC_HELP,
}


@dataclass(frozen=True)
# Configuração completa de uma execução; consumida por core.run_loop
class CollectorConfig:
    """Parâmetros imutáveis do loop de coleta."""

    inventory_path: Path
    push_url: str
    machine_label: str
    read_paths: Tuple[str, ...]
    rules: RelabelRuleSet = field(default_factory=RelabelRuleSet)
    push_labels: Tuple[Tuple[str, str], ...] = ()
    delete_old: bool = False
    out_path: Optional[Path] = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    up_metric_name: str = UP_METRIC_NAME
    up_metric_help: str = UP_METRIC_HELP


# ========================
# 1. Carregamento das configurações
# ========================


# Função principal do módulo; carrega todas as configurações do ambiente
def load_settings() -> dict:
    """Carrega configurações combinando DEFAULTS + .env + ambiente.

    Retorna um dicionário com as chaves de ``DEFAULT_SETTINGS``. As variáveis
    em ambiente sobrescrevem valores do arquivo `.env`; valores inválidos são
    registrados e substituídos pelo padrão.
    """
    settings = dict(DEFAULT_SETTINGS)

    project_root = Path(__file__).resolve().parents[3]
    env_path = Path(os.getenv("COLLECTOR_ENV_FILE", project_root / ".env"))
    env_items = _merge_env_items(env_path)

    raw_prefixes = env_items.get("COLLECTOR_DEFAULT_DROP_PREFIXES")
    if raw_prefixes is not None:
        settings["default_drop_prefixes"] = tuple(p.strip() for p in raw_prefixes.split(",") if p.strip())

    raw_timeout = env_items.get("COLLECTOR_HTTP_TIMEOUT")
    if raw_timeout is not None:
        try:
            timeout = float(raw_timeout)
            if timeout <= 0:
                raise ValueError("timeout deve ser > 0")
            settings["http_timeout"] = timeout
        except (TypeError, ValueError):
            logger.warning("COLLECTOR_HTTP_TIMEOUT inválido: %s", raw_timeout)

    if env_items.get("COLLECTOR_UP_METRIC_NAME"):
        settings["up_metric_name"] = env_items["COLLECTOR_UP_METRIC_NAME"]
    if env_items.get("COLLECTOR_UP_METRIC_HELP"):
        settings["up_metric_help"] = env_items["COLLECTOR_UP_METRIC_HELP"]
    return settings


# ========================
# 2. Funções auxiliares para ambiente
# ========================


# Auxilia load_settings; lê pares KEY=VALUE do arquivo .env
def _read_env_file(path: Path | str) -> dict:
    """Devolve os pares ``KEY=VALUE`` de um `.env`; arquivo ausente gera ``{}``.

    Comentários, linhas vazias e linhas sem ``=`` são ignorados; aspas
    externas do valor são removidas.
    """
    p = Path(path)
    if not p.is_file():
        return {}
    try:
        lines = p.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Não foi possível ler %s: %s", p, exc)
        return {}
    items: dict[str, str] = {}
    for raw in lines:
        text = raw.strip()
        if text.startswith("#"):
            continue
        key, sep, value = text.partition("=")
        if not sep or not key.strip():
            continue
        items[key.strip()] = value.strip().strip("\"'")
    return items


# Auxilia load_settings; o ambiente do processo sobrescreve o .env
def _merge_env_items(env_path: Path) -> dict:
    env_items = _read_env_file(env_path)
    if not env_items and env_path.is_file():
        logger.warning("Arquivo .env vazio ou ilegível: %s", env_path)
    env_items.update({k: v for k, v in os.environ.items() if k.startswith("COLLECTOR_")})
    return env_items
