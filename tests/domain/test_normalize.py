from types import MappingProxyType

import pytest

from permanent_record.domain.errors import ConfigurationError, EmptySourceError
from permanent_record.domain.normalize import (
    attributes_from_data,
    canonical_value,
    format_data,
)

BOOKS = [
    {"title": "A", "author": "X"},
    {"title": "B", "author": "Y"},
    {"title": "C", "author": "Z"},
]


def test_format_data_assigns_sequential_ids() -> None:
    data = format_data(BOOKS)
    assert len(data) == len(BOOKS)
    assert [r["id"] for r in data] == [1, 2, 3]
    assert [r["title"] for r in data] == ["A", "B", "C"]


def test_format_data_keeps_supplied_ids() -> None:
    data = format_data([{"id": "X1", "title": "Cosmos"}, {"title": "Other"}])
    assert data[0]["id"] == "X1"
    # Positions are still 1-based for records without an id
    assert data[1]["id"] == 2


def test_format_data_puts_id_first_and_stringifies_keys() -> None:
    data = format_data([{"title": "A", 7: "seven"}, {"title": "B", "id": 9, 7: "x"}])
    assert list(data[0].keys()) == ["id", "title", "7"]
    assert list(data[1].keys()) == ["id", "title", "7"]


def test_format_data_does_not_mutate_input() -> None:
    raw = [{"title": "A"}]
    data = format_data(raw)
    assert raw == [{"title": "A"}]
    assert isinstance(data[0], MappingProxyType)
    with pytest.raises(TypeError):
        data[0]["title"] = "changed"  # type: ignore[index]


def test_format_data_accepts_tuples_and_empty_input() -> None:
    assert format_data(({"a": 1},))[0]["id"] == 1
    assert format_data([]) == ()


@pytest.mark.parametrize("raw", [[1, 2], "abc", [{"a": 1}, None]])
def test_format_data_rejects_non_mapping_sources(raw: object) -> None:
    with pytest.raises(ConfigurationError):
        format_data(raw)  # type: ignore[arg-type]


def test_attributes_from_first_record() -> None:
    data = format_data([{"title": "A", "author": "X"}, {"title": "B", "extra": 1}])
    assert attributes_from_data(data) == ("id", "title", "author")


def test_attributes_from_empty_data_fails() -> None:
    with pytest.raises(EmptySourceError):
        attributes_from_data(())


def test_canonical_value() -> None:
    assert canonical_value(1) == canonical_value("1")
    assert canonical_value(None) == ""
