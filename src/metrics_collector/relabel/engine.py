"""Motor de relabel: merge, filtragem e injeção de rótulos.

Funções puras: recebem as coleções do ciclo e o ``RelabelRuleSet`` e
devolvem uma nova coleção, sem modificar as entradas.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .model import MetricFamilyCollection
from .rules import RelabelRuleSet

logger = logging.getLogger(__name__)


def merge_collections(collections: Iterable[MetricFamilyCollection]) -> MetricFamilyCollection:
    """Une coleções família a família, na ordem recebida.

    Amostras de famílias homônimas são concatenadas; HELP/TYPE vêm da
    primeira coleção que os define (metadados posteriores são ignorados).
    """
    merged: MetricFamilyCollection = {}
    for collection in collections:
        for name, family in collection.items():
            target = merged.get(name)
            if target is None:
                merged[name] = family.copy()
                continue
            if target.help is None:
                target.help = family.help
            if target.type is None:
                target.type = family.type
            target.samples.extend(s.copy() for s in family.samples)
    return merged


def is_dropped(name: str, rules: RelabelRuleSet) -> bool:
    """Indica se a família ``name`` deve ser descartada pelas regras."""
    if name in rules.drop_metrics:
        return True
    return bool(rules.drop_default and rules.default_prefixes and name.startswith(tuple(rules.default_prefixes)))


def relabel(collections: Iterable[MetricFamilyCollection], rules: RelabelRuleSet) -> MetricFamilyCollection:
    """Aplica merge, descarte de famílias e injeção de rótulos.

    A ordem de saída é a ordem de merge das famílias que sobreviveram.
    """
    merged = merge_collections(collections)
    out: MetricFamilyCollection = {}
    dropped = 0
    for name, family in merged.items():
        if is_dropped(name, rules):
            dropped += 1
            continue
        for sample in family.samples:
            # atribuição em dict mantém a posição de rótulos já existentes
            sample.labels.update(rules.add_labels)
        out[name] = family
    logger.debug("relabel: %d famílias mantidas, %d descartadas", len(out), dropped)
    return out
