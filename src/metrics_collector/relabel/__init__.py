"""Pacote relabel: parser, regras, motor e serializador do formato de exposição.

Re-exports da API pública usada pelo loop de coleta e pelos testes.
"""

from .engine import is_dropped, merge_collections, relabel
from .errors import InvalidRuleSet, MalformedExposition, RelabelError, SourceUnavailable
from .model import MetricFamily, MetricFamilyCollection, Sample
from .parser import parse_exposition
from .pipeline import render
from .rules import DEFAULT_METRIC_PREFIXES, InputSource, RelabelRuleSet, parse_key_value
from .serializer import serialize
from .sources import load_collections
from .synthetic import add_sample, as_collection, new_up_down_family

__all__ = [
    "DEFAULT_METRIC_PREFIXES",
    "InputSource",
    "InvalidRuleSet",
    "MalformedExposition",
    "MetricFamily",
    "MetricFamilyCollection",
    "RelabelError",
    "RelabelRuleSet",
    "Sample",
    "SourceUnavailable",
    "add_sample",
    "as_collection",
    "is_dropped",
    "load_collections",
    "merge_collections",
    "new_up_down_family",
    "parse_exposition",
    "parse_key_value",
    "relabel",
    "render",
    "serialize",
]
