from decimal import Decimal

from tracker.domain import Kind
from tracker.errors import InvalidAmount, InvalidKind
from tracker.functional import (
    Left, Nothing, Right, Some,
    parse_amount, parse_kind, safe_budget_limit,
)


def test_maybe_map():
    doubled = Some(5).map(lambda x: x * 2)
    assert doubled.is_some()
    assert doubled.get_or_else(0) == 10

    nothing = Nothing().map(lambda x: x * 2)
    assert nothing.is_none()
    assert nothing.get_or_else(0) == 0


def test_either_map_and_bind():
    assert Right(5).map(lambda x: x + 1) == Right(6)
    assert Right(5).bind(lambda x: Left("too big") if x > 3 else Right(x)) == Left("too big")

    left = Left("error")
    assert left.map(lambda x: x * 2).is_left()
    assert left.bind(lambda x: Right(x)).get_error() == "error"
    assert left.get_or_else(0) == 0


def test_parse_amount():
    assert parse_amount("12.50") == Right(Decimal("12.50"))
    assert parse_amount(" 7 ") == Right(Decimal("7"))
    assert parse_amount(Decimal("1")) == Right(Decimal("1"))

    for bad in ("0", "-3", "abc", "", "NaN"):
        result = parse_amount(bad)
        assert result.is_left()
        assert isinstance(result.get_error(), InvalidAmount)


def test_parse_amount_rounds_to_cents():
    assert parse_amount("1.005") == Right(Decimal("1.01"))
    assert parse_amount(2.675) == Right(Decimal("2.68"))
    assert parse_amount("0.005") == Right(Decimal("0.01"))
    assert str(parse_amount("7").get_or_else(None)) == "7.00"

    for bad in ("0.004", Decimal("0.0001"), "1e40"):
        result = parse_amount(bad)
        assert result.is_left()
        assert isinstance(result.get_error(), InvalidAmount)


def test_parse_kind():
    assert parse_kind("Income") == Right(Kind.INCOME)
    assert parse_kind(Kind.EXPENSE) == Right(Kind.EXPENSE)
    assert isinstance(parse_kind("refund").get_error(), InvalidKind)


def test_safe_budget_limit():
    limits = {"Food": Decimal("300")}
    assert safe_budget_limit(limits, "Food") == Some(Decimal("300"))
    assert safe_budget_limit(limits, "food").is_none()
