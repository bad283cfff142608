import math

import pytest

from metrics_collector.relabel.engine import relabel
from metrics_collector.relabel.model import MetricFamily, Sample
from metrics_collector.relabel.parser import parse_exposition
from metrics_collector.relabel.rules import RelabelRuleSet
from metrics_collector.relabel.serializer import format_value, serialize


def test_serialize_injects_label_after_parsed_labels():
    """Cenário de referência: env=prod é acrescentado após os rótulos originais."""
    collection = parse_exposition('# TYPE up gauge\nup{path="/health"} 1\n')
    rules = RelabelRuleSet.from_options(add_labels={"env": "prod"})

    out = serialize(relabel([collection], rules))

    assert out == b'# TYPE up gauge\nup{path="/health",env="prod"} 1\n'


@pytest.mark.parametrize(
    "value,expected",
    [
        (1.0, "1"),
        (0.0, "0"),
        (0.5, "0.5"),
        (-2.0, "-2"),
        (123456.0, "123456"),
        (1e6, "1e+06"),
        (1234567.0, "1.234567e+06"),
        (1e-05, "1e-05"),
        (math.inf, "+Inf"),
        (-math.inf, "-Inf"),
        (math.nan, "NaN"),
    ],
)
def test_format_value(value, expected):
    """Valores usam a menor representação, no estilo Go."""
    assert format_value(value) == expected


def test_serialize_help_type_order_and_timestamp():
    """HELP antes de TYPE, depois amostras na ordem da família; timestamp preservado."""
    fam = MetricFamily(
        "jobs",
        help="Jobs\nem fila \\ total",
        type="counter",
        samples=[Sample("jobs", {"q": 'a"b'}, 3.0, 1700000000000), Sample("jobs", {}, 4.0)],
    )
    out = serialize({"jobs": fam}).decode("utf-8")

    assert out.splitlines() == [
        "# HELP jobs Jobs\\nem fila \\\\ total",
        "# TYPE jobs counter",
        'jobs{q="a\\"b"} 3 1700000000000',
        "jobs 4",
    ]


def test_serialize_empty_collection():
    """Coleção vazia vira payload vazio."""
    assert serialize({}) == b""


def test_round_trip_parse_serialize():
    """Parse(Serialize(C)) reproduz C para famílias sem nomes duplicados."""
    collection = {
        "a": MetricFamily("a", "ajuda com \\ e\nquebra", "gauge", [Sample("a", {"x": 'q"\\\n', "y": "2"}, 0.25)]),
        "b": MetricFamily("b", None, "weird", [Sample("b", {}, -math.inf, 5), Sample("b", {"k": ""}, 1e21)]),
        "c": MetricFamily("c", "só metadados", None, []),
        "h": MetricFamily(
            "h",
            None,
            "histogram",
            [Sample("h_bucket", {"le": "+Inf"}, 2.0), Sample("h_sum", {}, 1.5), Sample("h_count", {}, 2.0)],
        ),
    }

    assert parse_exposition(serialize(collection)) == collection
