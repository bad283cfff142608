"""Conjunto de regras de relabel.

``RelabelRuleSet`` é um valor imutável construído uma vez (por processo ou
por ciclo) a partir das opções do usuário:

- rótulos a injetar (``label=value``), sobrescrevendo rótulos existentes;
- nomes de famílias a descartar (casamento exato);
- flag ``drop_default`` que descarta famílias de auto-instrumentação
  (prefixos em ``DEFAULT_METRIC_PREFIXES``);
- a fonte de entrada: arquivo único, diretório ou stream em memória.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Optional, Tuple, Union

from .errors import InvalidRuleSet
from .parser import LABEL_NAME_RE

# ========================
# Constantes
# ========================

# Prefixos de auto-instrumentação de runtime/processo (clientes Go e Python)
DEFAULT_METRIC_PREFIXES: Tuple[str, ...] = (
    "go_",
    "process_",
    "promhttp_",
    "python_gc_",
    "python_info",
)

SOURCE_FILE = "file"
SOURCE_DIRECTORY = "directory"
SOURCE_STREAM = "stream"


@dataclass(frozen=True)
class InputSource:
    """Descritor da fonte de entrada: ``kind`` em file/directory/stream."""

    kind: str = SOURCE_STREAM
    path: Optional[Path] = None

    @property
    def is_static(self) -> bool:
        return self.kind in (SOURCE_FILE, SOURCE_DIRECTORY)


@dataclass(frozen=True)
class RelabelRuleSet:
    """Regras imutáveis aplicadas pelo motor de relabel."""

    add_labels: Mapping[str, str] = field(default_factory=dict)
    drop_metrics: frozenset = frozenset()
    drop_default: bool = False
    source: InputSource = InputSource()
    default_prefixes: Tuple[str, ...] = DEFAULT_METRIC_PREFIXES

    @classmethod
    def from_options(
        cls,
        add_labels: Union[Mapping[str, str], Iterable[str], None] = None,
        drop_metrics: Iterable[str] | None = None,
        drop_default: bool = False,
        in_file: str | Path | None = None,
        in_dir: str | Path | None = None,
        default_prefixes: Iterable[str] | None = None,
    ) -> "RelabelRuleSet":
        """Constrói e valida o conjunto de regras a partir das opções da CLI.

        ``add_labels`` aceita um mapeamento ou strings ``label=value``.

        Raises:
            InvalidRuleSet: par malformado, nome de rótulo inválido ou
                ``in_file`` e ``in_dir`` definidos ao mesmo tempo.
        """
        labels = _normalize_labels(add_labels)
        return cls(
            add_labels=labels,
            drop_metrics=frozenset(m.strip() for m in (drop_metrics or ()) if m.strip()),
            drop_default=bool(drop_default),
            source=resolve_source(in_file, in_dir),
            default_prefixes=tuple(default_prefixes) if default_prefixes is not None else DEFAULT_METRIC_PREFIXES,
        )


# ========================
# Auxiliares
# ========================


def parse_key_value(raw: str) -> Tuple[str, str]:
    """Divide ``KEY=VALUE`` no primeiro ``=``; o valor pode conter ``=``."""
    key, sep, value = str(raw).partition("=")
    key = key.strip()
    if not sep or not key:
        raise InvalidRuleSet(f"esperado KEY=VALUE, recebido '{raw}'")
    return key, value


def resolve_source(in_file: str | Path | None = None, in_dir: str | Path | None = None) -> InputSource:
    """Escolhe exatamente uma fonte; sem arquivo nem diretório, usa o stream."""
    if in_file and in_dir:
        raise InvalidRuleSet("--in e --in-dir são mutuamente exclusivos")
    if in_file:
        return InputSource(SOURCE_FILE, Path(in_file))
    if in_dir:
        return InputSource(SOURCE_DIRECTORY, Path(in_dir))
    return InputSource(SOURCE_STREAM)


def _normalize_labels(add_labels) -> dict:
    if not add_labels:
        return {}
    if isinstance(add_labels, Mapping):
        pairs = [(str(k), str(v)) for k, v in add_labels.items()]
    else:
        pairs = [parse_key_value(item) for item in add_labels]
    labels: dict = {}
    for key, value in pairs:
        if not LABEL_NAME_RE.fullmatch(key) or key.startswith("__"):
            raise InvalidRuleSet(f"nome de rótulo inválido: {key!r}")
        labels[key] = value
    return labels
