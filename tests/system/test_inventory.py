import pytest

from metrics_collector.system.inventory import InventoryError, Machine, Tunnel, load_inventory, parse_inventory


def test_load_inventory_reads_machines(inventory_file):
    """Lê host, nome, túneis e id de cada máquina, na ordem do arquivo."""
    machines = load_inventory(inventory_file)
    assert [m.name for m in machines] == ["alpha", "beta"]
    alpha = machines[0]
    assert alpha.host == "10.0.0.1"
    assert alpha.id == 1
    assert alpha.tunnels[1] == Tunnel("http", "", "8080")


def test_http_port_prefers_http_tunnel_then_first(inventory_file):
    """Porta do túnel http; sem ele, a do primeiro túnel."""
    alpha, beta = load_inventory(inventory_file)
    assert alpha.http_port() == "8080"
    assert beta.http_port() == "2222"


def test_http_port_without_tunnels():
    """Máquina sem túneis não tem porta utilizável."""
    with pytest.raises(InventoryError):
        Machine(host="h", name="n").http_port()


def test_load_inventory_errors(tmp_path):
    """Arquivo ausente, JSON inválido e formato errado geram InventoryError."""
    with pytest.raises(InventoryError):
        load_inventory(tmp_path / "nao-existe.json")
    bad = tmp_path / "bad.json"
    bad.write_text("[{", encoding="utf-8")
    with pytest.raises(InventoryError):
        load_inventory(bad)
    with pytest.raises(InventoryError):
        parse_inventory({"master": {}})
    with pytest.raises(InventoryError):
        parse_inventory([{"sem_master": 1}])


def test_parse_inventory_tolerates_missing_fields(caplog):
    """Campos ausentes viram vazios; id inválido vira 0 com aviso."""
    [m] = parse_inventory([{"master": {"host": "h", "name": "n", "id": "x", "tunnels": [{"port": 80}]}}])
    assert m.id == 0
    assert m.tunnels == [Tunnel("", "", "80")]
    assert any("id inválido" in r.getMessage() for r in caplog.records)
