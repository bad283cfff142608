# conftest.py
# Configuração global para pytest: adiciona 'src' ao sys.path para importar
# o pacote metrics_collector sem instalação, e fixtures compartilhadas.
import json
import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture
def inventory_file(tmp_path):
    """Inventário com duas máquinas: uma com túnel http explícito, outra só com ssh."""
    data = [
        {
            "master": {
                "host": "10.0.0.1",
                "tunnels": [{"type": "ssh", "user": "root", "port": "22"}, {"type": "http", "user": "", "port": "8080"}],
                "description": "primeira",
                "name": "alpha",
                "id": 1,
            }
        },
        {
            "master": {
                "host": "10.0.0.2",
                "tunnels": [{"type": "ssh", "user": "root", "port": "2222"}],
                "description": "segunda",
                "name": "beta",
                "id": 2,
            }
        },
    ]
    path = tmp_path / "inventory.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_collector_env(monkeypatch, tmp_path):
    """Isola os testes de variáveis COLLECTOR_* e de um .env do projeto."""
    import os

    for key in list(os.environ):
        if key.startswith("COLLECTOR_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("COLLECTOR_ENV_FILE", str(tmp_path / "missing.env"))
