import logging
import sys

import pytest

from metrics_collector import main as main_mod


def _args(inventory):
    return ["--json", str(inventory), "--push-url", "http://gw:9091/metrics", "--machine-label", "machine", "--read-path", "/metrics"]


def test_main_returns_zero_without_failures(monkeypatch, inventory_file):
    """main devolve 0 quando os ciclos não registram falhas."""
    seen = {}

    def fake_loop(config, interval, cycles):
        seen["config"] = config
        seen["cycles"] = cycles
        return [{"machines": 2, "pushed": 2, "failures": 0}]

    monkeypatch.setattr("metrics_collector.main.run_loop", fake_loop)
    assert main_mod.main(_args(inventory_file) + ["-a", "env=prod"]) == 0
    assert seen["cycles"] == 1
    assert seen["config"].rules.add_labels == {"env": "prod"}
    assert seen["config"].read_paths == ("/metrics",)


def test_main_returns_one_on_failures(monkeypatch, inventory_file):
    monkeypatch.setattr(
        "metrics_collector.main.run_loop",
        lambda config, interval, cycles: [{"machines": 2, "pushed": 1, "failures": 1}],
    )
    assert main_mod.main(_args(inventory_file)) == 1


def test_main_conflicting_sources_exit_2(monkeypatch, inventory_file, tmp_path):
    """--in e --in-dir juntos encerram com código 2 antes de qualquer coleta."""
    monkeypatch.setattr("metrics_collector.main.run_loop", lambda *a, **k: pytest.fail("não deveria coletar"))
    argv = _args(inventory_file) + ["--in", str(tmp_path / "a.prom"), "--in-dir", str(tmp_path)]
    with pytest.raises(SystemExit) as ei:
        main_mod.main(argv)
    assert ei.value.code == 2


def test_main_missing_required_args_exit_2():
    with pytest.raises(SystemExit) as ei:
        main_mod.main(["--json", "inv.json"])
    assert ei.value.code == 2


def test_setup_debug_file_handler_installs_handlers(tmp_path):
    """Instala handlers texto + JSONL uma única vez e o excepthook."""
    root_logger = logging.getLogger()
    before = list(root_logger.handlers)
    old_hook = sys.excepthook
    try:
        main_mod._setup_debug_file_handler(tmp_path / "logs")
        main_mod._setup_debug_file_handler(tmp_path / "logs")
        added = [h for h in root_logger.handlers if h not in before]
        assert len(added) == 2
        assert sys.excepthook is not old_hook

        logging.getLogger("metrics_collector.teste").warning("mensagem de teste")
        for h in added:
            h.flush()
        debug_path = main_mod.get_debug_file_path(tmp_path / "logs")
        assert "mensagem de teste" in debug_path.read_text(encoding="utf-8")
        assert '"msg": "mensagem de teste"' in debug_path.with_suffix(".jsonl").read_text(encoding="utf-8")
    finally:
        for h in list(root_logger.handlers):
            if h not in before:
                root_logger.removeHandler(h)
                h.close()
        sys.excepthook = old_hook
