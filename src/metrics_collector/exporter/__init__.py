"""Pacote exporter: transporte HTTP entre alvos e o endpoint de push.

Re-exports para manter importações curtas como
``from metrics_collector.exporter import push_exposition``.
"""

from .transport import build_push_url, delete_stale, fetch_exposition, push_exposition, target_url

__all__ = ["build_push_url", "delete_stale", "fetch_exposition", "push_exposition", "target_url"]
