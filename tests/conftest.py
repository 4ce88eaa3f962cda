from pathlib import Path

import pytest

from search_insights.domain.models import SearchTermRecord


def make_record(search_term="buy red shoes", **overrides):
    values = {
        "search_term": search_term,
        "campaign": "Brand",
        "ad_group": "Shoes",
        "impressions": 100.0,
        "clicks": 5.0,
        "cost": 10.0,
        "conversions": 1.0,
        "conversion_value": 20.0,
    }
    values.update(overrides)
    return SearchTermRecord(**values)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def scenario_records():
    return [
        make_record("buy red shoes", cost=10, clicks=5, impressions=100, conversions=1, conversion_value=20),
        make_record("buy blue shoes", cost=6, clicks=3, impressions=50, conversions=0, conversion_value=0),
    ]


@pytest.fixture
def search_terms_csv(tmp_path: Path) -> Path:
    path = tmp_path / "search_terms.csv"
    path.write_text(
        "search_term,campaign,ad_group,impr,clicks,cost,conv,value\n"
        "buy red shoes,Brand,Shoes,100,5,10,1,20\n"
        "buy blue shoes,Brand,Shoes,50,3,6,0,0\n"
        "red shoes sale,Generic,Sale,40,2,0,1,15\n",
        encoding="utf-8",
    )
    return path
