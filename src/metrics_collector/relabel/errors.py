"""Erros do motor de relabel.

Nenhuma função do motor encerra o processo: toda falha é uma exceção
derivada de ``RelabelError`` que o chamador decide tratar (pular a fonte
ou abortar o ciclo).
"""

from __future__ import annotations

from typing import Optional


class RelabelError(Exception):
    """Base para erros do motor de relabel."""


class MalformedExposition(RelabelError):
    """Linha de exposição não interpretável; inclui fonte e número da linha."""

    def __init__(self, message: str, source: str = "<stream>", line: Optional[int] = None):
        self.message = message
        self.source = source
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.source}: {self.message}"
        return f"{self.source}:{self.line}: {self.message}"


class InvalidRuleSet(RelabelError):
    """Regras de relabel conflitantes ou inválidas (ex.: --in e --in-dir juntos)."""


class SourceUnavailable(RelabelError):
    """Arquivo ou diretório de entrada ausente ou ilegível."""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)
