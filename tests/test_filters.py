from base.filters import FILTER_MAPPINGS, create_api_filters, has_active_filters, month_and_year


def test_string_mapping_renames_keys():
    params = create_api_filters(2, 20, "ann", {"class": "c1", "gender": "female"}, FILTER_MAPPINGS["students"])
    assert params == {"page": 2, "limit": 20, "search": "ann", "classId": "c1", "gender": "female"}


def test_empty_and_unknown_filters_are_dropped():
    params = create_api_filters(1, 10, "", {"status": "", "unknown": "x"}, FILTER_MAPPINGS["students"])
    assert params == {"page": 1, "limit": 10, "search": ""}


def test_callable_mapping_expands_into_several_parameters():
    params = create_api_filters(1, 10, "", {"payrollMonth": "2024-03"}, FILTER_MAPPINGS["payroll"])
    assert params["month"] == 3
    assert params["year"] == 2024
    assert "payrollMonth" not in params


def test_month_and_year_accepts_full_dates():
    assert month_and_year("2023-11-15") == {"month": 11, "year": 2023}


def test_has_active_filters():
    assert not has_active_filters({"status": "", "class": None})
    assert has_active_filters({"status": "active"})
    assert not has_active_filters(None)


def test_unparseable_month_drops_the_filter():
    assert month_and_year("March 2024") == {}
    params = create_api_filters(1, 10, "", {"payrollMonth": "bogus"}, FILTER_MAPPINGS["payroll"])
    assert params == {"page": 1, "limit": 10, "search": ""}
