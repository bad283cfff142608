"""Ponto de entrada do coletor de métricas.

Responsável apenas pela inicialização: lê configurações e argumentos, monta o
logging (console + arquivos de debug opcionais) e delega os ciclos de coleta
para ``core.run_loop``.
"""

import json as _json
import logging as _logging
import os
import sys
from datetime import datetime
from pathlib import Path

from .config.settings import load_settings
from .core.args import build_config, get_log_config, parse_args
from .core.core import run_loop
from .relabel.errors import InvalidRuleSet

DEBUG_LOG_FILENAME = "debug_log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = _logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Inicializa o coletor e executa os ciclos pedidos.

    Args:
        argv: argumentos da linha de comando; ``None`` usa ``sys.argv``.

    Returns:
        0 quando nenhum ciclo registrou falhas, 1 caso contrário. Argumentos
        ou regras inválidas encerram com ``SystemExit(2)``.
    """
    settings = load_settings()
    try:
        args = parse_args(argv)
    except ValueError as exc:
        logger.error("argumentos inválidos: %s", exc)
        raise SystemExit(2) from exc

    log_conf = get_log_config(args)
    _logging.basicConfig(level=getattr(_logging, log_conf["level"], _logging.WARNING), format=LOG_FORMAT)
    if log_conf.get("root"):
        try:
            _setup_debug_file_handler(Path(log_conf["root"]))
        except OSError as exc:
            logger.warning("falha ao preparar logs de debug em %s: %s", log_conf["root"], exc)

    try:
        config = build_config(args, settings)
    except InvalidRuleSet as exc:
        logger.error("regras de relabel inválidas: %s", exc)
        raise SystemExit(2) from exc

    logger.info(
        "Iniciando coleta: inventário=%s caminhos=%s ciclos=%d intervalo=%.1fs",
        config.inventory_path,
        ",".join(config.read_paths),
        args.cycles,
        args.interval,
    )
    summaries = run_loop(config, interval=args.interval, cycles=args.cycles)
    return 1 if any(s.get("failures") for s in summaries) else 0


# ========================
# Logging em arquivo
# ========================


def get_debug_file_path(root: Path) -> Path:
    """Arquivo de debug do dia (``debug_log-AAAA-MM-DD.txt``) dentro de ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    return root / f"{DEBUG_LOG_FILENAME}-{datetime.now():%Y-%m-%d}.txt"


class JsonLineFormatter(_logging.Formatter):
    """Uma linha JSON por registro, para ingestão por ferramentas de log."""

    def format(self, record):
        obj = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            obj["exc"] = self.formatException(record.exc_info)
        return _json.dumps(obj, ensure_ascii=False)


def _setup_debug_file_handler(root: Path) -> None:
    """Anexa ao logger root um handler texto e um JSONL no diretório ``root``.

    Chamadas repetidas para o mesmo diretório não duplicam handlers. Também
    direciona exceções não tratadas para o logger root.
    """
    text_path = get_debug_file_path(root)
    root_logger = _logging.getLogger()
    existing = {getattr(h, "baseFilename", None) for h in root_logger.handlers}

    for path, formatter in (
        (text_path, _logging.Formatter(LOG_FORMAT)),
        (text_path.with_suffix(".jsonl"), JsonLineFormatter()),
    ):
        if os.path.abspath(path) in existing:
            continue
        handler = _logging.FileHandler(str(path), encoding="utf-8")
        handler.setLevel(_logging.INFO)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    _install_excepthook(root_logger)


def _install_excepthook(root_logger: _logging.Logger) -> None:
    def _hook(exc_type, exc_value, exc_tb):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        root_logger.critical("Exceção não tratada", exc_info=(exc_type, exc_value, exc_tb))

    sys.excepthook = _hook


if __name__ == "__main__":
    sys.exit(main())
