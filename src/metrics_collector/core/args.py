"""Parser de argumentos do coletor.

Docstrings e mensagens em português.

Este módulo fornece um parser que expõe:
- inventário JSON (--json), endpoint de push (--push-url) e rótulos do grupo
  (--machine-label, --push-label)
- caminhos de scrape (--read-path) e limpeza prévia (--delete-old)
- regras de relabel (-a/--add-label, -d/--drop-metric, --drop-default,
  --in, --in-dir, --out)
- intervalo entre ciclos (-i / --interval) e número de ciclos (-c / --cycles)
- verbosidade (-v) e opções de logging

``build_config`` converte o Namespace validado em ``CollectorConfig``.
"""

import argparse
import logging
import os
from pathlib import Path
from typing import Sequence

from ..config.settings import CollectorConfig, load_settings
from ..relabel.rules import RelabelRuleSet, parse_key_value

# ========================
# 0. Configuração do parser e argumentos padrão
# ========================


# Função principal do módulo; cria e retorna o ArgumentParser configurado
def configure_argparser() -> argparse.ArgumentParser:
    """Cria e retorna ArgumentParser configurado para o coletor."""
    parser = argparse.ArgumentParser(
        prog="metrics-collector",
        description="Coletor de métricas: scrape de máquinas, relabel e push para o agregador",
    )

    parser.add_argument("--json", dest="json", default=None, metavar="file_name", help="Arquivo .json de inventário.")
    parser.add_argument(
        "--delete-old",
        dest="delete_old",
        action="store_true",
        help="Remove scrapes antigos no endpoint de push antes de enviar (caso de queda do servidor)",
    )
    parser.add_argument(
        "--push-label",
        dest="push_labels",
        action="append",
        default=[],
        metavar="<name>=<value>",
        help="Par nome=valor acrescentado ao caminho de push (repetível)",
    )
    parser.add_argument("--machine-label", dest="machine_label", default=None, help="Rótulo da máquina no caminho de push")
    parser.add_argument("--push-url", dest="push_url", default=None, metavar="url", help="URL base do endpoint de push")
    parser.add_argument(
        "--read-path",
        dest="read_paths",
        action="append",
        default=[],
        metavar="read_path",
        help="Caminho a coletar em cada máquina, com barra inicial (repetível)",
    )

    # regras de relabel
    parser.add_argument(
        "-a",
        "--add-label",
        dest="add_labels",
        action="append",
        default=[],
        metavar="<label>=<value>",
        help="Adiciona um rótulo a todas as amostras (repetível)",
    )
    parser.add_argument(
        "-d",
        "--drop-metric",
        dest="drop_metrics",
        action="append",
        default=[],
        metavar="some_metric",
        help="Descarta uma família de métricas pelo nome (repetível)",
    )
    parser.add_argument("--drop-default", dest="drop_default", action="store_true", help="Descarta métricas padrão de runtime")
    parser.add_argument("--in", dest="in_file", default=None, metavar="file_name", help="Lê as métricas de um arquivo")
    parser.add_argument("--in-dir", dest="in_dir", default=None, metavar="dir_name", help="Lê as métricas de um diretório")
    parser.add_argument(
        "--out",
        dest="out_file",
        default=None,
        metavar="file_name",
        help="Escreve em arquivo em vez de enviar; '{machine}' gera um arquivo por máquina",
    )

    # loop e logging
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=0.0,
        help="Intervalo em segundos entre ciclos (float).",
    )
    parser.add_argument(
        "-c",
        "--cycles",
        type=int,
        default=1,
        help="Número de ciclos a executar (0 = infinito).",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Timeout das requisições HTTP em segundos")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Aumenta a verbosidade (-v, -vv)",
    )
    parser.add_argument(
        "--log-root",
        dest="log_root",
        type=str,
        default=None,
        help="Diretório para os arquivos de debug (substitui COLLECTOR_LOG_ROOT)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default=None,
        help="Nível de logging (DEBUG/INFO/WARNING/ERROR). Se ausente, definido por -v",
    )

    return parser


# ========================
# 1. Funções auxiliares para análise e validação de argumentos
# ========================

_ENV_MAP = {
    "interval": "COLLECTOR_INTERVAL_SEC",
    "cycles": "COLLECTOR_CYCLES",
    "log_root": "COLLECTOR_LOG_ROOT",
    "log_level": "COLLECTOR_LOG_LEVEL",
    "timeout": "COLLECTOR_HTTP_TIMEOUT",
    "push_url": "COLLECTOR_PUSH_URL",
    "machine_label": "COLLECTOR_MACHINE_LABEL",
}


# Auxilia metrics_collector.main; criado para analisar argv e validar argumentos
def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Analisa argv e retorna Namespace validado para uso no programa."""
    parser = configure_argparser()
    ns = parser.parse_args(argv)
    # Aplicar overrides via variáveis de ambiente SOMENTE quando o argumento
    # não foi fornecido pela linha de comando (CLI tem precedência).
    for arg, env_var in _ENV_MAP.items():
        env_val = os.getenv(env_var)
        if env_val is None:
            continue
        default_val = parser.get_default(arg)
        current_val = getattr(ns, arg, None)
        if current_val is not None and current_val != default_val:
            continue
        try:
            if arg in ("interval", "timeout"):
                setattr(ns, arg, float(env_val))
            elif arg == "cycles":
                setattr(ns, arg, int(env_val))
            else:
                setattr(ns, arg, env_val)
        except ValueError as exc:
            logging.getLogger(__name__).warning(f"{env_var} inválido ('{env_val}'): {exc}. Usando valor do argumento.")
    validate_args(ns)
    return ns


# Auxilia parse_args; criado para garantir valores corretos e seguros
def validate_args(args: argparse.Namespace) -> None:
    """Valida e normaliza argumentos do coletor."""
    if getattr(args, "interval", 0.0) is None:
        args.interval = 0.0
    try:
        args.interval = float(args.interval)
    except (TypeError, ValueError) as exc:
        raise ValueError("intervalo deve ser um número") from exc
    if args.interval < 0.0:
        raise ValueError("intervalo deve ser >= 0.0")

    try:
        args.cycles = int(args.cycles)
    except (TypeError, ValueError) as exc:
        raise ValueError("cycles deve ser um inteiro >= 0") from exc
    if args.cycles < 0:
        raise ValueError("cycles deve ser >= 0")

    timeout = getattr(args, "timeout", None)
    if timeout is not None and float(timeout) <= 0:
        raise ValueError("timeout deve ser > 0")

    missing = [
        flag
        for flag, attr in (
            ("--json", "json"),
            ("--push-url", "push_url"),
            ("--machine-label", "machine_label"),
            ("--read-path", "read_paths"),
        )
        if not getattr(args, attr, None)
    ]
    if missing:
        raise ValueError(f"argumentos obrigatórios ausentes: {', '.join(missing)}")


# Auxilia metrics_collector.main; monta a configuração imutável do loop
def build_config(args: argparse.Namespace, settings: dict | None = None) -> CollectorConfig:
    """Converte o Namespace validado em ``CollectorConfig``.

    Raises:
        InvalidRuleSet: regras de relabel inválidas (ex.: --in e --in-dir).
    """
    if settings is None:
        settings = load_settings()
    rules = RelabelRuleSet.from_options(
        add_labels=args.add_labels,
        drop_metrics=args.drop_metrics,
        drop_default=args.drop_default,
        in_file=args.in_file,
        in_dir=args.in_dir,
        default_prefixes=settings.get("default_drop_prefixes"),
    )
    timeout = args.timeout if getattr(args, "timeout", None) is not None else settings.get("http_timeout")
    return CollectorConfig(
        inventory_path=Path(args.json),
        push_url=args.push_url,
        machine_label=args.machine_label,
        read_paths=tuple(args.read_paths),
        rules=rules,
        push_labels=tuple(parse_key_value(item) for item in args.push_labels),
        delete_old=bool(args.delete_old),
        out_path=Path(args.out_file) if args.out_file else None,
        http_timeout=float(timeout),
        up_metric_name=settings.get("up_metric_name"),
        up_metric_help=settings.get("up_metric_help"),
    )


# ========================
# 2. Função auxiliar para configuração de logging
# ========================


# Auxilia metrics_collector.main; criado para extrair configuração de logging dos argumentos
def get_log_config(args: argparse.Namespace) -> dict:
    """Retorna dict com configuração de logging ('level' e 'root')."""
    if getattr(args, "log_level", None):
        level = str(args.log_level).upper()
    else:
        v = getattr(args, "verbose", 0) or 0
        if v >= 2:
            level = "DEBUG"
        elif v == 1:
            level = "INFO"
        else:
            level = "WARNING"

    return {"level": level, "root": getattr(args, "log_root", None)}
