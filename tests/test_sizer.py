import random
from decimal import Decimal

import pytest

from auto_swapper.markets.pairs import TradingPair
from auto_swapper.trading.sizer import AmountSizer, SizingDecision, to_human

from conftest import ETH, USDT, FixedRandom


def test_balance_above_reserve_sizes_between_zero_and_available(eth_usdt):
    sizer = AmountSizer(rng=random.Random(3))

    # 0.01 ETH with a 0.005 reserve leaves 0.005 ETH to trade.
    decision = sizer.size_trade(eth_usdt, 10**16)

    assert decision.viable
    assert decision.available == Decimal("0.005")
    assert 0 < decision.amount < 5 * 10**15
    assert Decimal("0.30") <= decision.fraction < Decimal("0.70")


def test_balance_below_reserve_is_not_viable(eth_usdt):
    decision = AmountSizer().size_trade(eth_usdt, 3 * 10**15)

    assert not decision.viable
    assert decision.amount is None
    assert decision.available == 0


def test_balance_exactly_at_reserve_is_not_viable(eth_usdt):
    assert not AmountSizer().size_trade(eth_usdt, 5 * 10**15).viable


def test_zero_balance_is_not_viable(usdt_btc):
    assert not AmountSizer().size_trade(usdt_btc, 0).viable


def test_lowest_fraction_truncates_to_source_decimals(usdt_btc):
    sizer = AmountSizer(rng=FixedRandom(0.0))

    # 110.000001 USDT - 10 reserve = 100.000001, * 0.30 = 30.0000003 -> 30.000000
    decision = sizer.size_trade(usdt_btc, 110_000_001)

    assert decision.fraction == Decimal("0.30")
    assert decision.amount == 30_000_000
    assert decision.human_amount(6) == Decimal("30")


def test_top_of_range_stays_below_seventy_percent(usdt_btc):
    sizer = AmountSizer(rng=FixedRandom(0.999999999))

    decision = sizer.size_trade(usdt_btc, 110_000_000)

    assert decision.amount < 70_000_000
    assert decision.amount > 69_000_000


def test_dust_that_truncates_to_zero_is_not_viable():
    pair = TradingPair(ETH, USDT, "ETH", "USDT", 0, Decimal("10"))

    # One whole unit above the reserve; 30-70% of it rounds down to nothing.
    decision = AmountSizer(rng=random.Random(1)).size_trade(pair, 11)

    assert not decision.viable


def test_result_never_touches_the_reserve(eth_usdt, usdt_btc):
    sizer = AmountSizer(rng=random.Random(11))
    reserve_raw = {eth_usdt: 5 * 10**15, usdt_btc: 10 * 10**6}

    for pair, balance in [(eth_usdt, 5 * 10**15 + 1000), (eth_usdt, 7 * 10**18), (usdt_btc, 10_000_011)]:
        for _ in range(200):
            decision = sizer.size_trade(pair, balance)
            if decision.viable:
                assert 0 < decision.amount < balance - reserve_raw[pair]


def test_fraction_concentrates_in_thirty_to_seventy_percent(eth_usdt):
    sizer = AmountSizer(rng=random.Random(2024))
    available_raw = 5 * 10**15

    ratios = [sizer.size_trade(eth_usdt, 10**16).amount / available_raw for _ in range(2000)]

    assert all(0.29 < r < 0.70 for r in ratios)
    assert abs(sum(ratios) / len(ratios) - 0.5) < 0.02
    assert min(ratios) < 0.32
    assert max(ratios) > 0.68


def test_large_balances_keep_full_precision(eth_usdt):
    sizer = AmountSizer(rng=FixedRandom(0.5))

    decision = sizer.size_trade(eth_usdt, 10**30 + 5 * 10**15)

    # available = 10**12 ETH, fraction = 0.5
    assert decision.amount == 5 * 10**29


@pytest.mark.parametrize("low,high", [(0, 0.5), (0.5, 0.5), (0.7, 0.3), (0.3, 1)])
def test_invalid_fraction_range_is_rejected(low, high):
    with pytest.raises(ValueError):
        AmountSizer(min_fraction=low, max_fraction=high)


def test_human_amount_keeps_every_digit():
    decision = SizingDecision(amount=123456789012345678901234567891, available=Decimal(0))

    assert str(decision.human_amount(18)) == "123456789012.345678901234567891"
    assert to_human(123456789012345678901234567891, 18) == Decimal("123456789012.345678901234567891")
