"""Core do coletor de métricas.

Loop principal: para cada ciclo lê o inventário, coleta os caminhos de cada
máquina, aplica o relabel e envia (ou grava) o resultado.
"""

import logging

from ..config.settings import CollectorConfig
from ..exporter.transport import build_push_url, delete_stale, fetch_exposition, push_exposition, target_url
from ..relabel.errors import MalformedExposition, RelabelError
from ..relabel.engine import relabel
from ..relabel.parser import parse_exposition
from ..relabel.serializer import serialize
from ..relabel.sources import load_collections
from ..relabel.synthetic import add_sample, as_collection, new_up_down_family
from ..system.files import output_path_for, write_payload
from ..system.inventory import InventoryError, Machine, load_inventory

logger = logging.getLogger(__name__)


# ========================
# 1. Loop principal
# ========================


# Função principal do módulo; executa os ciclos de coleta
def run_loop(config: CollectorConfig, interval: float, cycles: int) -> list:
    """Loop principal do coletor.

    Parâmetros:
        config: configuração imutável da execução.
        interval: atraso entre ciclos em segundos (float).
        cycles: número de ciclos a executar (0 = infinito).

    Retorna a lista de resumos dos ciclos executados.
    """
    import time

    executed = 0
    summaries = []
    try:
        while True:
            try:
                summaries.append(run_cycle(config))
            except (InventoryError, RelabelError) as exc:
                # falhas do ciclo inteiro (inventário/fonte estática) não derrubam o loop
                logger.error("Ciclo %d abortado: %s", executed + 1, exc)
                summaries.append({"machines": 0, "pushed": 0, "failures": 1, "error": str(exc)})
            executed += 1
            if cycles != 0 and executed >= cycles:
                break
            if interval > 0.0:
                time.sleep(interval)
    except KeyboardInterrupt:
        logger.info("Recebido KeyboardInterrupt, saindo...")
    return summaries


def run_cycle(config: CollectorConfig, session=None) -> dict:
    """Executa um ciclo completo sobre todas as máquinas do inventário.

    Retorna ``{"machines": n, "pushed": n, "failures": n}``.

    Raises:
        InventoryError: inventário ilegível.
        SourceUnavailable / MalformedExposition: fonte estática (--in/--in-dir) inválida.
    """
    machines = load_inventory(config.inventory_path)
    # fontes estáticas são lidas uma vez por ciclo; o merge copia as amostras
    static = load_collections(config.rules.source) if config.rules.source.is_static else None
    summary = {"machines": len(machines), "pushed": 0, "failures": 0}
    for machine in machines:
        try:
            ok = scrape_machine(config, machine, static, session=session)
        except (InventoryError, OSError) as exc:
            logger.warning("Máquina %s ignorada: %s", machine.name, exc)
            ok = False
        if ok:
            summary["pushed"] += 1
        else:
            summary["failures"] += 1
    logger.info(
        "Ciclo concluído: %d máquinas, %d enviadas, %d falhas",
        summary["machines"],
        summary["pushed"],
        summary["failures"],
    )
    return summary


# ========================
# 2. Coleta por máquina
# ========================


def scrape_machine(config: CollectorConfig, machine: Machine, static=None, session=None) -> bool:
    """Coleta os caminhos de uma máquina e entrega o payload relabelado.

    Retorna True quando o payload foi enviado/gravado.
    """
    port = machine.http_port()
    push_path = build_push_url(config.push_url, config.push_labels, config.machine_label, machine.name)
    timeout = config.http_timeout

    if config.delete_old and config.out_path is None:
        delete_stale(push_path, timeout=timeout, session=session)

    up_family = new_up_down_family(config.up_metric_name, config.up_metric_help)
    collections = []
    for path in config.read_paths:
        url = target_url(machine.host, port, path)
        body = fetch_exposition(url, timeout=timeout, session=session)
        add_sample(up_family, path, body is not None)
        if body is None or static is not None:
            continue
        try:
            collections.append(parse_exposition(body, source=url))
        except MalformedExposition as exc:
            logger.warning("Corpo inválido ignorado: %s", exc)

    if static is not None:
        collections.extend(static)
    collections.append(as_collection(up_family))

    payload = serialize(relabel(collections, config.rules))
    if config.out_path is not None:
        dest = output_path_for(config.out_path, machine.name)
        write_payload(dest, payload)
        logger.info("Métricas de %s gravadas em %s", machine.name, dest)
        return True
    return push_exposition(push_path, payload, timeout=timeout, session=session)
