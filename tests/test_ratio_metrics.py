import math

import polars as pl
import pytest

from search_insights.ratio_metrics import RatioMetricsCalculator, calculate


def test_calculate_scenario(scenario_records):
    first, second = calculate(scenario_records)

    assert first.ctr == pytest.approx(0.05)
    assert second.ctr == pytest.approx(0.06)
    assert first.cpa == pytest.approx(10.0)
    assert second.cpa == 0.0
    assert first.cpc == pytest.approx(2.0)
    assert first.cvr == pytest.approx(0.2)
    assert first.roas == pytest.approx(2.0)
    assert second.roas == 0.0


def test_calculate_preserves_length_and_order(record_factory):
    records = [record_factory(f"term {idx}", cost=float(idx + 1)) for idx in range(5)]
    calculated = calculate(records)

    assert len(calculated) == len(records)
    assert [item.search_term for item in calculated] == [item.search_term for item in records]
    assert [item.cost for item in calculated] == [1.0, 2.0, 3.0, 4.0, 5.0]


def test_calculate_empty_input():
    assert calculate([]) == []


def test_zero_impressions_gives_zero_ctr(record_factory):
    result = calculate([record_factory(impressions=0, clicks=3)])[0]
    assert result.ctr == 0.0


def test_zero_clicks_gives_zero_cpc_and_cvr(record_factory):
    result = calculate([record_factory(clicks=0, cost=12, conversions=2)])[0]
    assert result.cpc == 0.0
    assert result.cvr == 0.0


def test_zero_conversions_gives_zero_cpa(record_factory):
    result = calculate([record_factory(conversions=0, cost=12)])[0]
    assert result.cpa == 0.0


def test_zero_cost_with_value_gives_infinite_roas(record_factory):
    result = calculate([record_factory(cost=0, conversion_value=50)])[0]
    assert math.isinf(result.roas)
    assert result.roas > 0


def test_zero_cost_without_value_gives_zero_roas(record_factory):
    result = calculate([record_factory(cost=0, conversion_value=0)])[0]
    assert result.roas == 0.0


def test_zero_cost_with_negative_value_gives_zero_roas(record_factory):
    result = calculate([record_factory(cost=0, conversion_value=-5)])[0]
    assert result.roas == 0.0


def test_nan_cost_propagates(record_factory):
    result = calculate([record_factory(cost=float("nan"))])[0]
    assert math.isnan(result.cpc)
    assert math.isnan(result.cpa)
    assert math.isnan(result.roas)


def test_negative_values_are_not_sanitized(record_factory):
    result = calculate([record_factory(cost=-10, clicks=5)])[0]
    assert result.cpc == pytest.approx(-2.0)
    assert result.cost == -10.0


def test_calculate_keeps_source_fields(record_factory):
    record = record_factory("Running Shoes", campaign="Perf", ad_group="Run")
    result = calculate([record])[0]

    assert result.search_term == "Running Shoes"
    assert result.campaign == "Perf"
    assert result.ad_group == "Run"
    assert result.conversion_value == record.conversion_value


def test_calculate_frame_requires_columns():
    with pytest.raises(ValueError, match="Missing required columns"):
        RatioMetricsCalculator().calculate_frame(pl.DataFrame({"search_term": ["a"]}))


def test_calculate_frame_casts_integer_metrics():
    df = pl.DataFrame(
        {
            "search_term": ["a"],
            "campaign": ["c"],
            "ad_group": ["g"],
            "impressions": [10],
            "clicks": [2],
            "cost": [4],
            "conversions": [1],
            "conversion_value": [8],
        }
    )
    result = RatioMetricsCalculator().calculate_frame(df)

    assert result.columns == RatioMetricsCalculator.RESULT_COLUMNS
    assert result["ctr"].to_list() == [pytest.approx(0.2)]
    assert result["roas"].to_list() == [pytest.approx(2.0)]
