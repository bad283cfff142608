"""Métrica sintética de disponibilidade dos alvos (up/down).

Uma família gauge por ciclo, com uma amostra ``path=<caminho>`` por caminho
consultado: 1 quando o alvo respondeu, 0 caso contrário. Registrar o mesmo
caminho duas vezes acrescenta outra amostra (semântica append-only).
"""

from __future__ import annotations

from .model import MetricFamily, MetricFamilyCollection, Sample

UP_METRIC_NAME = "metricscollector_target_up"
UP_METRIC_HELP = "1 if device is up, 0 if it is not."


def new_up_down_family(name: str = UP_METRIC_NAME, help: str = UP_METRIC_HELP) -> MetricFamily:
    """Cria a família gauge vazia."""
    return MetricFamily(name, help, "gauge", [])


def add_sample(family: MetricFamily, path: str, is_up: bool) -> Sample:
    """Acrescenta a amostra do caminho ``path`` e a retorna."""
    sample = Sample(family.name, {"path": path}, 1.0 if is_up else 0.0)
    family.samples.append(sample)
    return sample


def as_collection(family: MetricFamily) -> MetricFamilyCollection:
    """Embala a família numa coleção para o merge do motor."""
    return {family.name: family}
