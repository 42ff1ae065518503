import pytest
from datetime import date

from cashbook.core.exceptions import InvalidFilterError
from cashbook.engine.aggregation import UNSPECIFIED, UNSPECIFIED_KEY, GrandSummary, GroupBy, aggregate
from cashbook.engine.balance import compute_running_balances
from cashbook.engine.filters import LedgerFilter, apply_filter
from cashbook.engine.ordering import order_entries


@pytest.fixture(name="mixed_rows")
def mixed_rows_fixture(make_entry):
    entries = [
        make_entry("cash_in", 10, date(2024, 4, 3), party_id="p2", party_name="Ravi Traders",
                   category_id="c1", category_name="Sales", payment_mode="Online"),
        make_entry("cash_out", 20, date(2024, 4, 1), party_id="p1", party_name="Asha",
                   payment_mode="Cash"),
        make_entry("cash_in", 30, date(2024, 4, 2), category_id="c2", category_name="Interest"),
        make_entry("cash_out", 1, date(2024, 4, 2), party_id="p2", party_name="Ravi Traders",
                   category_id="c1", category_name="Sales", payment_mode="Cash"),
        make_entry("cash_in", 99999, date(2024, 4, 1), party_id="p1", payment_mode="UPI"),
        make_entry("cash_out", 333, date(2024, 4, 3)),
    ]
    return compute_running_balances(order_entries(entries))


def test_day_grouping_scenario(sample_entries):
    rows = compute_running_balances(order_entries(sample_entries))

    result = aggregate(rows, GroupBy.DAY)

    assert [(g.key, g.cash_in, g.cash_out, g.balance) for g in result.groups] == [
        ("2024-01-01", 10000, 4000, 6000),
        ("2024-01-02", 2500, 0, 2500),
    ]
    assert result.grand == GrandSummary(total_cash_in=12500, total_cash_out=4000, final_balance=8500, entry_count=3)


def test_no_grouping_returns_single_implicit_group(sample_entries):
    rows = compute_running_balances(order_entries(sample_entries))

    result = aggregate(rows, GroupBy.NONE)

    assert len(result.groups) == 1
    group = result.groups[0]
    assert (group.cash_in, group.cash_out, group.balance, group.entry_count) == (12500, 4000, 8500, 3)
    assert group.balance == rows[-1].running_balance


def test_empty_set_is_zero_summary_not_error():
    for group_by in GroupBy:
        result = aggregate([], group_by)
        assert result.groups == ()
        assert result.grand == GrandSummary(0, 0, 0, 0)


@pytest.mark.parametrize("group_by", list(GroupBy))
def test_group_totals_reconcile_exactly(mixed_rows, group_by):
    result = aggregate(mixed_rows, group_by)

    assert sum(g.cash_in for g in result.groups) == result.grand.total_cash_in
    assert sum(g.cash_out for g in result.groups) == result.grand.total_cash_out
    assert sum(g.balance for g in result.groups) == result.grand.final_balance
    assert sum(g.entry_count for g in result.groups) == result.grand.entry_count == len(mixed_rows)


def test_unspecified_bucket_collects_missing_attributes(mixed_rows):
    by_party = aggregate(mixed_rows, GroupBy.PARTY)
    by_category = aggregate(mixed_rows, GroupBy.CATEGORY)
    by_mode = aggregate(mixed_rows, GroupBy.PAYMENT_MODE)

    assert [g.key for g in by_party.groups].count(UNSPECIFIED_KEY) == 1
    unspecified = next(g for g in by_party.groups if g.key == UNSPECIFIED_KEY)
    assert (unspecified.cash_in, unspecified.cash_out, unspecified.entry_count) == (30, 333, 2)

    assert next(g for g in by_category.groups if g.key == UNSPECIFIED_KEY).entry_count == 3
    assert next(g for g in by_mode.groups if g.key == UNSPECIFIED_KEY).entry_count == 2


def test_attribute_groups_follow_first_appearance(mixed_rows):
    # Ledger order: 04-01 out 20 p1, 04-01 in 99999 p1, 04-02 in 30 -, 04-02 out 1 p2, 04-03 in 10 p2, 04-03 out 333 -
    by_party = aggregate(mixed_rows, GroupBy.PARTY)
    by_mode = aggregate(mixed_rows, GroupBy.PAYMENT_MODE)

    assert [g.key for g in by_party.groups] == ["p1", UNSPECIFIED_KEY, "p2"]
    assert [g.label for g in by_party.groups] == ["Asha", UNSPECIFIED, "Ravi Traders"]
    assert [g.key for g in by_mode.groups] == ["Cash", "UPI", UNSPECIFIED_KEY, "Online"]


def test_literal_unspecified_value_keeps_its_own_group(make_entry):
    rows = compute_running_balances(order_entries([
        make_entry("cash_in", 100, date(2024, 5, 1), payment_mode="Unspecified"),
        make_entry("cash_in", 200, date(2024, 5, 1)),
    ]))

    result = aggregate(rows, GroupBy.PAYMENT_MODE)

    assert [(g.key, g.label, g.cash_in) for g in result.groups] == [
        ("Unspecified", "Unspecified", 100),
        (UNSPECIFIED_KEY, UNSPECIFIED, 200),
    ]


def test_day_groups_ascend_even_for_unsorted_input(mixed_rows):
    result = aggregate(list(reversed(mixed_rows)), GroupBy.DAY)

    assert [g.key for g in result.groups] == ["2024-04-01", "2024-04-02", "2024-04-03"]


def test_grouping_filtered_rows(mixed_rows):
    filtered = apply_filter(mixed_rows, LedgerFilter(entry_type="cash_out"))

    result = aggregate(filtered, GroupBy.PARTY)

    assert result.grand.entry_count == 3
    assert result.grand.total_cash_in == 0
    assert result.grand.final_balance == -354
    assert [g.balance for g in result.groups] == [-20, -1, -333]


def test_group_by_parse():
    assert GroupBy.parse(None) is GroupBy.NONE
    assert GroupBy.parse("all") is GroupBy.NONE
    assert GroupBy.parse("Payment_Mode") is GroupBy.PAYMENT_MODE
    with pytest.raises(InvalidFilterError):
        GroupBy.parse("week")
