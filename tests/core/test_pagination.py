import pytest

from app.core.exceptions import ValidationFailed
from app.core.pagination import PaginationMeta, PaginationParams, get_pagination_params


def test_defaults():
    params = PaginationParams()

    assert (params.page, params.limit, params.skip) == (1, 10, 0)


def test_skip():
    assert PaginationParams(page=3, limit=20).skip == 40


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 101), (-2, 5)])
def test_out_of_range_values_fail_validation(page, limit):
    with pytest.raises(ValidationFailed) as exc:
        get_pagination_params(page=page, limit=limit)

    assert exc.value.status_code == 400
    assert exc.value.issues[0]["loc"][0] == "query"


@pytest.mark.parametrize("total, expected", [(0, 0), (1, 1), (10, 1), (11, 2), (100, 10)])
def test_total_pages(total, expected):
    meta = PaginationMeta.build(PaginationParams(limit=10), total)

    assert meta.total_pages == expected


def test_meta_serializes_in_camel_case():
    meta = PaginationMeta.build(PaginationParams(page=2, limit=5), 11)

    assert meta.model_dump(by_alias=True) == {"page": 2, "limit": 5, "total": 11, "totalPages": 3}
