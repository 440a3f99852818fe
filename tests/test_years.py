from __future__ import annotations

import pytest

from researchmap_digest.extract import RecordExtractor
from researchmap_digest.extract.years import year_pair, year_token


@pytest.mark.parametrize(
    "record, expected",
    [
        ({"from_date": "2015/04 - 2019/03"}, "2015-2019"),
        ({"from_date": "2020-04", "to_date": "9999"}, "2020-present"),
        ({"start_date": "2016", "end_date": "2018-12"}, "2016-2018"),
        ({"publication_date": "2018-03-01"}, "2018"),
        ({"year": 2011}, "2011"),
        ({"from_date": "2020 - 9999"}, "2020-present"),
        ({"title": "No dates here"}, ""),
        ({"from_date": "1850"}, ""),
        ("not a record", ""),
    ],
)
def test_year_range(extractor: RecordExtractor, record, expected: str) -> None:
    assert extractor.year(record) == expected


def test_year_range_reads_localized_dates(extractor: RecordExtractor) -> None:
    assert extractor.year({"publication_date": {"en": "2021-07"}}) == "2021"


def test_year_token_and_pair() -> None:
    assert year_token("2004-04-01") == "2004"
    assert year_token("9999-12") == "present"
    assert year_token("") == ""
    assert year_pair("2001 to 2003 and 2005") == ["2001", "2003"]
    assert year_pair("2001/2001") == ["2001"]


def test_start_year_sort_key(extractor: RecordExtractor) -> None:
    assert extractor.start_year({"from_date": "2012-04"}) == 2012
    assert extractor.start_year({"from_date": "9999"}) == 9999
    assert extractor.start_year({}) == -1


@pytest.mark.parametrize(
    "record, expected",
    [
        ({"publication_date": "2018年"}, "2018"),
        ({"from_date": "2015年4月 - 2019年3月"}, "2015-2019"),
        ({"from_date": "2020年4月", "to_date": "9999年"}, "2020-present"),
        ({"from_date": {"ja": "2012年4月"}}, "2012"),
    ],
)
def test_year_range_reads_japanese_dates(extractor: RecordExtractor, record, expected: str) -> None:
    assert extractor.year(record) == expected


def test_start_year_reads_japanese_dates(extractor: RecordExtractor) -> None:
    assert extractor.start_year({"from_date": "2012年4月"}) == 2012
