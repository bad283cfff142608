"""Pipeline completo de um ciclo: fontes -> merge -> filtro -> rótulos -> bytes."""

from __future__ import annotations

from typing import Iterable, Optional

from .engine import relabel
from .model import MetricFamilyCollection
from .parser import ExpositionInput
from .rules import RelabelRuleSet
from .serializer import serialize
from .sources import load_collections


def render(
    rules: RelabelRuleSet,
    stream: Optional[ExpositionInput] = None,
    extra: Iterable[MetricFamilyCollection] = (),
) -> bytes:
    """Carrega a fonte das regras, une com ``extra`` (ex.: métrica up) e serializa.

    Propaga ``SourceUnavailable``/``MalformedExposition`` para o chamador.
    """
    collections = load_collections(rules.source, stream)
    collections.extend(extra)
    return serialize(relabel(collections, rules))
