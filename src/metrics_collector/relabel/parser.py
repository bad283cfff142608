"""Parser do formato de exposição de texto (estilo Prometheus).

Converte linhas de texto em uma coleção ``nome -> MetricFamily``. O parsing
é feito em uma única passagem sobre as linhas, portanto aceita tanto uma
string/bytes completos quanto qualquer iterável de linhas (arquivo aberto,
``response.iter_lines()`` etc.).

Regras principais:
- ``# HELP <nome> <texto>`` e ``# TYPE <nome> <tipo>`` anexam metadados à
  família (criando-a se necessário); tipos desconhecidos são aceitos.
- demais comentários e linhas em branco são ignorados.
- linhas de métrica seguem ``nome[{a="v",...}] valor [timestamp]``.
- amostras ``_bucket``/``_sum``/``_count`` são agrupadas na família base
  quando esta foi declarada como ``histogram``/``summary``.

Qualquer linha inválida gera ``MalformedExposition`` com fonte e linha.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Optional, Tuple, Union

from .errors import MalformedExposition
from .model import MetricFamily, MetricFamilyCollection, Sample

logger = logging.getLogger(__name__)

METRIC_NAME_RE = re.compile(r"[a-zA-Z_:][a-zA-Z0-9_:]*")
LABEL_NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

# sufixo da amostra -> tipos de família que o aceitam
_GROUPING_SUFFIXES = {
    "_bucket": ("histogram",),
    "_sum": ("histogram", "summary"),
    "_count": ("histogram", "summary"),
}

_LABEL_ESCAPES = {"\\": "\\", '"': '"', "n": "\n"}

ExpositionInput = Union[str, bytes, Iterable[Union[str, bytes]]]


class _LineError(ValueError):
    """Erro interno de uma linha; convertido em MalformedExposition pelo laço principal."""


# ========================
# 1. Entrada pública
# ========================


def parse_exposition(data: ExpositionInput, source: str = "<stream>") -> MetricFamilyCollection:
    """Interpreta um documento de exposição e retorna a coleção de famílias.

    Args:
        data: texto completo (str/bytes) ou iterável de linhas.
        source: identificador da origem usado nas mensagens de erro.

    Raises:
        MalformedExposition: linha inválida ou conteúdo não UTF-8.
    """
    families: MetricFamilyCollection = {}
    for lineno, line in _iter_lines(data, source):
        text = line.rstrip("\r\n")
        if not text.strip():
            continue
        try:
            stripped = text.lstrip()
            if stripped.startswith("#"):
                _parse_comment(stripped, families)
            else:
                sample = _parse_sample(stripped)
                family_name = _family_name_for(sample.name, families)
                family = families.get(family_name)
                if family is None:
                    family = families[family_name] = MetricFamily(family_name)
                family.samples.append(sample)
        except _LineError as exc:
            raise MalformedExposition(str(exc), source=source, line=lineno) from None
    logger.debug("parse_exposition: %s -> %d famílias", source, len(families))
    return families


def _iter_lines(data: ExpositionInput, source: str) -> Iterator[Tuple[int, str]]:
    if isinstance(data, (bytes, bytearray)):
        data = _decode(bytes(data), source, None)
    if isinstance(data, str):
        data = data.split("\n")
    for lineno, line in enumerate(data, start=1):
        if isinstance(line, (bytes, bytearray)):
            line = _decode(bytes(line), source, lineno)
        yield lineno, line


def _decode(raw: bytes, source: str, lineno: Optional[int]) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedExposition(f"conteúdo não é UTF-8 válido: {exc}", source=source, line=lineno) from exc


# ========================
# 2. Comentários (HELP / TYPE)
# ========================


def _parse_comment(text: str, families: MetricFamilyCollection) -> None:
    parts = text[1:].split(None, 2)
    if not parts or parts[0] not in ("HELP", "TYPE"):
        # comentário comum
        return
    directive = parts[0]
    if len(parts) < 2:
        raise _LineError(f"# {directive} sem nome de métrica")
    name = parts[1]
    if not METRIC_NAME_RE.fullmatch(name):
        raise _LineError(f"nome de métrica inválido em # {directive}: {name!r}")
    family = families.get(name)
    if family is None:
        family = families[name] = MetricFamily(name)
    if directive == "HELP":
        family.help = _unescape_help(parts[2]) if len(parts) > 2 else ""
        return
    tokens = parts[2].split() if len(parts) > 2 else []
    if len(tokens) != 1:
        raise _LineError(f"# TYPE {name} requer exatamente um tipo")
    # tipos desconhecidos são mantidos como vieram
    family.type = tokens[0]


def _unescape_help(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] in ("\\", "n"):
            out.append("\n" if text[i + 1] == "n" else "\\")
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


# ========================
# 3. Linhas de métrica
# ========================


def _parse_sample(text: str) -> Sample:
    m = METRIC_NAME_RE.match(text)
    if not m:
        raise _LineError(f"nome de métrica inválido: {text.split()[0]!r}")
    name = m.group(0)
    pos = _skip_blank(text, m.end())
    labels: dict = {}
    if pos < len(text) and text[pos] == "{":
        labels, pos = _parse_labels(text, pos + 1)
    else:
        pos = m.end()
    rest = text[pos:]
    if rest and not rest[0].isspace():
        raise _LineError(f"caractere inesperado após {name!r}: {rest[0]!r}")
    tokens = rest.split()
    if not tokens:
        raise _LineError(f"amostra {name!r} sem valor")
    if len(tokens) > 2:
        raise _LineError(f"tokens extras na amostra {name!r}: {tokens[2:]}")
    value = _parse_value(tokens[0])
    timestamp = _parse_timestamp(tokens[1]) if len(tokens) == 2 else None
    return Sample(name, labels, value, timestamp)


def _parse_labels(text: str, pos: int) -> Tuple[dict, int]:
    """Lê o bloco de rótulos a partir de ``pos`` (logo após ``{``); retorna (rótulos, posição após ``}``)."""
    labels: dict = {}
    n = len(text)
    while True:
        pos = _skip_blank(text, pos)
        if pos >= n:
            raise _LineError("bloco de rótulos sem '}'")
        if text[pos] == "}":
            return labels, pos + 1
        m = LABEL_NAME_RE.match(text, pos)
        if not m:
            raise _LineError(f"nome de rótulo inválido na coluna {pos + 1}")
        label = m.group(0)
        pos = _skip_blank(text, m.end())
        if pos >= n or text[pos] != "=":
            raise _LineError(f"esperado '=' após o rótulo {label!r}")
        pos = _skip_blank(text, pos + 1)
        if pos >= n or text[pos] != '"':
            raise _LineError(f"valor do rótulo {label!r} deve estar entre aspas")
        value, pos = _read_quoted(text, pos + 1)
        if label in labels:
            raise _LineError(f"rótulo duplicado: {label!r}")
        labels[label] = value
        pos = _skip_blank(text, pos)
        if pos >= n:
            raise _LineError("bloco de rótulos sem '}'")
        if text[pos] == ",":
            pos += 1
            continue
        if text[pos] == "}":
            return labels, pos + 1
        raise _LineError(f"caractere inesperado {text[pos]!r} no bloco de rótulos (aspas sem escape?)")


def _read_quoted(text: str, pos: int) -> Tuple[str, int]:
    out = []
    n = len(text)
    while pos < n:
        ch = text[pos]
        if ch == "\\":
            if pos + 1 >= n or text[pos + 1] not in _LABEL_ESCAPES:
                raise _LineError(f"escape inválido no valor de rótulo na coluna {pos + 1}")
            out.append(_LABEL_ESCAPES[text[pos + 1]])
            pos += 2
            continue
        if ch == '"':
            return "".join(out), pos + 1
        out.append(ch)
        pos += 1
    raise _LineError("valor de rótulo sem aspas de fechamento")


def _skip_blank(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    return pos


def _parse_value(token: str) -> float:
    # float() aceitaria '1_000'; o formato de exposição não
    if "_" in token:
        raise _LineError(f"valor numérico inválido: {token!r}")
    try:
        return float(token)
    except ValueError:
        raise _LineError(f"valor numérico inválido: {token!r}") from None


def _parse_timestamp(token: str) -> int:
    if "_" in token:
        raise _LineError(f"timestamp inválido: {token!r}")
    try:
        return int(token)
    except ValueError:
        raise _LineError(f"timestamp inválido: {token!r}") from None


def _family_name_for(sample_name: str, families: MetricFamilyCollection) -> str:
    """Resolve a família de uma amostra, agrupando sufixos de histogram/summary."""
    if sample_name in families:
        return sample_name
    for suffix, types in _GROUPING_SUFFIXES.items():
        if sample_name.endswith(suffix):
            base = families.get(sample_name[: -len(suffix)])
            if base is not None and base.type in types:
                return base.name
    return sample_name
