"""Leitura das fontes de entrada do motor de relabel.

Arquivo único, diretório (cada arquivo regular é um documento
independente) ou stream em memória. No modo diretório os arquivos são
ordenados pelo nome e interpretados em paralelo, mas o resultado mantém a
ordem dos nomes para que o merge seja determinístico.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from .errors import InvalidRuleSet, SourceUnavailable
from .model import MetricFamilyCollection
from .parser import ExpositionInput, parse_exposition
from .rules import SOURCE_DIRECTORY, SOURCE_FILE, SOURCE_STREAM, InputSource

logger = logging.getLogger(__name__)

_MAX_WORKERS = 4


def load_collections(source: InputSource, stream: Optional[ExpositionInput] = None) -> List[MetricFamilyCollection]:
    """Retorna as coleções interpretadas da fonte, na ordem de merge.

    Para ``stream`` sem conteúdo (ex.: alvo fora do ar) retorna lista vazia.

    Raises:
        SourceUnavailable: arquivo/diretório ausente ou ilegível.
        MalformedExposition: conteúdo inválido em qualquer documento.
    """
    if source.kind == SOURCE_FILE:
        return [parse_file(source.path)]
    if source.kind == SOURCE_DIRECTORY:
        return parse_directory(source.path)
    if source.kind == SOURCE_STREAM:
        if stream is None:
            return []
        return [parse_exposition(stream, source="<stream>")]
    raise InvalidRuleSet(f"tipo de fonte desconhecido: {source.kind!r}")


def parse_file(path: Path | str | None) -> MetricFamilyCollection:
    """Lê e interpreta um arquivo de exposição."""
    if path is None:
        raise SourceUnavailable("caminho de arquivo não informado")
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError as exc:
        raise SourceUnavailable(f"falha ao ler arquivo: {exc.strerror or exc}", source=str(p)) from exc
    return parse_exposition(raw, source=str(p))


def list_directory(path: Path | str | None) -> List[Path]:
    """Lista arquivos regulares do diretório em ordem lexicográfica do nome."""
    if path is None:
        raise SourceUnavailable("diretório não informado")
    d = Path(path)
    if not d.is_dir():
        raise SourceUnavailable("diretório inexistente", source=str(d))
    try:
        files = [p for p in d.iterdir() if p.is_file()]
    except OSError as exc:
        raise SourceUnavailable(f"falha ao listar diretório: {exc.strerror or exc}", source=str(d)) from exc
    return sorted(files, key=lambda p: p.name)


def parse_directory(path: Path | str | None) -> List[MetricFamilyCollection]:
    """Interpreta todos os arquivos do diretório; ordem do resultado = ordem dos nomes."""
    files = list_directory(path)
    if not files:
        logger.info("parse_directory: nenhum arquivo em %s", path)
        return []
    # executor.map preserva a ordem de entrada independentemente da conclusão
    with ThreadPoolExecutor(max_workers=min(_MAX_WORKERS, len(files))) as pool:
        return list(pool.map(parse_file, files))
