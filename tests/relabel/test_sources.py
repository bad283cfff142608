import pytest

from metrics_collector.relabel.engine import relabel
from metrics_collector.relabel.errors import MalformedExposition, SourceUnavailable
from metrics_collector.relabel.pipeline import render
from metrics_collector.relabel.rules import InputSource, RelabelRuleSet
from metrics_collector.relabel.serializer import serialize
from metrics_collector.relabel.sources import list_directory, load_collections
from metrics_collector.relabel.synthetic import add_sample, as_collection, new_up_down_family


def test_directory_files_with_same_family_are_merged(tmp_path):
    """Dois arquivos com m{a="1"} 1 resultam em uma família m com duas amostras."""
    (tmp_path / "one.prom").write_text('m{a="1"} 1\n', encoding="utf-8")
    (tmp_path / "two.prom").write_text('m{a="1"} 1\n', encoding="utf-8")
    rules = RelabelRuleSet.from_options(in_dir=tmp_path)

    out = relabel(load_collections(rules.source), rules)

    assert list(out) == ["m"]
    assert len(out["m"].samples) == 2


def test_directory_order_is_lexicographic(tmp_path):
    """Arquivos são lidos em ordem de nome, ignorando subdiretórios."""
    (tmp_path / "b.prom").write_text("m 2\n", encoding="utf-8")
    (tmp_path / "a.prom").write_text("m 1\nonly_a 1\n", encoding="utf-8")
    (tmp_path / "c.prom").write_text("m 3\n", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "z.prom").write_text("ignored 1\n", encoding="utf-8")

    assert [p.name for p in list_directory(tmp_path)] == ["a.prom", "b.prom", "c.prom"]

    rules = RelabelRuleSet.from_options(in_dir=tmp_path)
    first = render(rules)
    second = render(rules)
    assert first == second
    assert first == b"m 1\nm 2\nm 3\nonly_a 1\n"


def test_missing_file_and_directory_are_unavailable(tmp_path):
    """Fonte inexistente gera SourceUnavailable."""
    with pytest.raises(SourceUnavailable):
        load_collections(InputSource("file", tmp_path / "nao-existe.prom"))
    with pytest.raises(SourceUnavailable):
        load_collections(InputSource("directory", tmp_path / "nao-existe"))


def test_malformed_file_reports_file_and_line(tmp_path):
    """Erro de parsing aponta o arquivo e a linha."""
    bad = tmp_path / "bad.prom"
    bad.write_text('ok 1\nm{a="1" 1\n', encoding="utf-8")
    with pytest.raises(MalformedExposition) as ei:
        load_collections(InputSource("file", bad))
    assert ei.value.source == str(bad)
    assert ei.value.line == 2


def test_stream_source(tmp_path):
    """Fonte stream usa o corpo recebido; sem corpo, lista vazia."""
    src = InputSource("stream")
    assert load_collections(src) == []
    [collection] = load_collections(src, b"up 1\n")
    assert list(collection) == ["up"]


def test_render_file_source_with_up_family(tmp_path):
    """render une a fonte com a família sintética e aplica as regras."""
    f = tmp_path / "static.prom"
    f.write_text("# TYPE go_threads gauge\ngo_threads 9\napp_items 4\n", encoding="utf-8")
    rules = RelabelRuleSet.from_options(in_file=f, drop_default=True, add_labels=["env=prod"])
    up = new_up_down_family()
    add_sample(up, "/metrics", True)

    out = render(rules, extra=[as_collection(up)]).decode("utf-8")

    assert "go_threads" not in out
    assert 'app_items{env="prod"} 4' in out
    assert 'metricscollector_target_up{path="/metrics",env="prod"} 1' in out


def test_directory_merge_metadata_from_first_file(tmp_path):
    """Metadados conflitantes: vence o primeiro arquivo em ordem de nome."""
    (tmp_path / "10.prom").write_text("# HELP m de 10\nm 1\n", encoding="utf-8")
    (tmp_path / "02.prom").write_text("# HELP m de 02\nm 2\n", encoding="utf-8")
    rules = RelabelRuleSet.from_options(in_dir=tmp_path)
    out = serialize(relabel(load_collections(rules.source), rules))
    assert out == b"# HELP m de 02\nm 2\nm 1\n"
