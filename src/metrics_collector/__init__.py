"""Coletor de métricas: scrape de máquinas do inventário, relabel e push.

O motor de relabel (``metrics_collector.relabel``) é independente de I/O;
``metrics_collector.core`` faz a orquestração dos ciclos.
"""

__version__ = "0.1.0"
