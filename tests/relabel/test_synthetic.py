from metrics_collector.relabel.engine import relabel
from metrics_collector.relabel.parser import parse_exposition
from metrics_collector.relabel.rules import RelabelRuleSet
from metrics_collector.relabel.serializer import serialize
from metrics_collector.relabel.synthetic import (
    UP_METRIC_HELP,
    UP_METRIC_NAME,
    add_sample,
    as_collection,
    new_up_down_family,
)


def test_new_family_is_empty_gauge():
    """A família nasce vazia, do tipo gauge e com HELP."""
    fam = new_up_down_family()
    assert fam.name == UP_METRIC_NAME
    assert fam.help == UP_METRIC_HELP
    assert fam.type == "gauge"
    assert fam.samples == []


def test_add_sample_up_and_down():
    """Alvo no ar vale 1, fora do ar vale 0, com rótulo path."""
    fam = new_up_down_family("target_up", "help")
    add_sample(fam, "/metrics", True)
    add_sample(fam, "/health", False)
    assert [(s.labels, s.value) for s in fam.samples] == [({"path": "/metrics"}, 1.0), ({"path": "/health"}, 0.0)]


def test_repeated_path_appends_duplicate_sample():
    """O mesmo caminho duas vezes no ciclo gera duas amostras."""
    fam = new_up_down_family()
    add_sample(fam, "/metrics", True)
    add_sample(fam, "/metrics", False)
    assert len(fam.samples) == 2
    text = serialize(as_collection(fam)).decode("utf-8")
    assert text.count('metricscollector_target_up{path="/metrics"}') == 2


def test_up_family_merges_with_scraped_family_of_same_name():
    """Merge com família homônima já coletada concatena as amostras."""
    scraped = parse_exposition('metricscollector_target_up{path="/old"} 1\n')
    fam = new_up_down_family()
    add_sample(fam, "/metrics", True)
    out = relabel([scraped, as_collection(fam)], RelabelRuleSet())
    merged = out[UP_METRIC_NAME]
    assert [s.labels["path"] for s in merged.samples] == ["/old", "/metrics"]
    assert merged.type == "gauge"
