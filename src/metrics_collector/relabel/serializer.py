"""Serialização da coleção de famílias para o formato de exposição.

A saída é interpretável novamente por ``parse_exposition``.
"""

from __future__ import annotations

from typing import List

from prometheus_client.utils import floatToGoString

from .model import MetricFamily, MetricFamilyCollection, Sample


def serialize(collection: MetricFamilyCollection) -> bytes:
    """Renderiza a coleção em bytes UTF-8, família a família na ordem da coleção."""
    lines: List[str] = []
    for family in collection.values():
        lines.extend(_family_lines(family))
    if not lines:
        return b""
    return ("\n".join(lines) + "\n").encode("utf-8")


def format_value(value: float) -> str:
    """Representação mínima do float, no estilo Go (``1``, ``0.5``, ``1e+06``, ``+Inf``)."""
    s = floatToGoString(value)
    if s.endswith(".0"):
        s = s[:-2]
    return s


def _family_lines(family: MetricFamily) -> List[str]:
    out = []
    if family.help is not None:
        out.append(f"# HELP {family.name} {_escape_help(family.help)}")
    if family.type is not None:
        out.append(f"# TYPE {family.name} {family.type}")
    out.extend(_sample_line(s) for s in family.samples)
    return out


def _sample_line(sample: Sample) -> str:
    line = sample.name
    if sample.labels:
        pairs = ",".join(f'{k}="{_escape_label_value(v)}"' for k, v in sample.labels.items())
        line += "{" + pairs + "}"
    line += " " + format_value(sample.value)
    if sample.timestamp is not None:
        line += f" {sample.timestamp}"
    return line


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _escape_label_value(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')
