"""Modelo em memória para o formato de exposição de métricas.

Um documento de exposição é representado como um dicionário ordenado
``nome da família -> MetricFamily`` (a ordem de inserção define a ordem de
saída). Cada família guarda HELP/TYPE opcionais e a sequência de amostras.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

# Tipos reconhecidos em linhas ``# TYPE``; outros tokens são aceitos literalmente
KNOWN_TYPES = ("counter", "gauge", "histogram", "summary", "untyped")


@dataclass
class Sample:
    """Uma amostra: nome, rótulos (ordem de inserção preservada), valor e timestamp opcional (ms)."""

    name: str
    labels: Dict[str, str] = field(default_factory=dict)
    value: float = 0.0
    timestamp: Optional[int] = None

    def copy(self) -> "Sample":
        """Retorna cópia com dicionário de rótulos próprio."""
        return Sample(self.name, dict(self.labels), self.value, self.timestamp)


@dataclass
class MetricFamily:
    """Grupo de amostras que compartilham o nome da família."""

    name: str
    help: Optional[str] = None
    type: Optional[str] = None
    samples: List[Sample] = field(default_factory=list)

    def copy(self) -> "MetricFamily":
        return MetricFamily(self.name, self.help, self.type, [s.copy() for s in self.samples])


# nome da família -> família; dict preserva a ordem de inserção
MetricFamilyCollection = Dict[str, MetricFamily]
