from search_insights.domain.metric_ids import NGRAM_ACCESSORS, SEARCH_TERM_ACCESSORS, NgramMetric, SearchTermMetric
from search_insights.domain.models import CalculatedSearchTermRecord, NgramRecord


def test_accessor_tables_cover_every_metric():
    assert set(SEARCH_TERM_ACCESSORS) == set(SearchTermMetric)
    assert set(NGRAM_ACCESSORS) == set(NgramMetric)


def test_metric_values_match_record_fields():
    assert {metric.value for metric in SearchTermMetric} == set(CalculatedSearchTermRecord.__dataclass_fields__)
    assert {metric.value for metric in NgramMetric} == set(NgramRecord.__dataclass_fields__)


def test_text_metrics():
    assert SearchTermMetric.CAMPAIGN.is_text
    assert NgramMetric.NGRAM.is_text
    assert not SearchTermMetric.ROAS.is_text
    assert not NgramMetric.COUNT.is_text


def test_accessors_read_the_named_field():
    record = NgramRecord("red shoes", 2, 10.0, 3.0, 4.5, 1.0, 9.0)
    for metric, accessor in NGRAM_ACCESSORS.items():
        assert accessor(record) == getattr(record, metric.value)
