import pytest

from core.errors import ValidationError
from core.inputs import (
    normalize_code,
    normalize_date,
    normalize_event_id,
    normalize_limit,
    normalize_page,
    normalize_page_size,
    normalize_version,
)


def test_normalize_code_strips():
    assert normalize_code("  GRGRMAT01 ") == "GRGRMAT01"


@pytest.mark.parametrize("bad", ["", "   ", "../etc", "GR GR", "a/b"])
def test_normalize_code_rejects(bad):
    with pytest.raises(ValidationError):
        normalize_code(bad)


def test_normalize_limit_defaults_and_caps():
    assert normalize_limit(None) == 50
    assert normalize_limit(10) == 10
    assert normalize_limit(1000) == 200


@pytest.mark.parametrize("bad", [0, -5])
def test_normalize_limit_rejects_non_positive(bad):
    with pytest.raises(ValidationError):
        normalize_limit(bad)


def test_normalize_version():
    assert normalize_version(None) is None
    assert normalize_version(3) == 3
    with pytest.raises(ValidationError):
        normalize_version(0)


def test_normalize_date():
    assert normalize_date(None) is None
    assert normalize_date("  ") is None
    assert normalize_date("2024-08-01") == "2024-08-01"
    with pytest.raises(ValidationError):
        normalize_date("01/08/2024")


def test_normalize_event_id_allows_dots():
    assert normalize_event_id(" i.uoh.ltu.v.12 ") == "i.uoh.ltu.v.12"


@pytest.mark.parametrize("bad", ["", ".", "..", "a/b", "a b", "../x"])
def test_normalize_event_id_rejects(bad):
    with pytest.raises(ValidationError):
        normalize_event_id(bad)


def test_normalize_page_and_size():
    assert normalize_page(None) == 0
    assert normalize_page(3) == 3
    assert normalize_page_size(None) == 20
    assert normalize_page_size(500) == 100
    with pytest.raises(ValidationError):
        normalize_page(-1)
    with pytest.raises(ValidationError):
        normalize_page_size(0)
