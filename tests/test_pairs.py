import random
from decimal import Decimal

import pytest

from auto_swapper.config import TokenConfig
from auto_swapper.markets.pairs import PairCatalog, TradingPair, build_default_catalog

from conftest import BTC, ETH, USDT


def _tokens():
    return TokenConfig(usdt_address=USDT, eth_address=ETH, btc_address=BTC)


def test_default_catalog_has_six_directed_pairs():
    catalog = build_default_catalog(_tokens())

    labels = [(p.source_symbol, p.destination_symbol) for p in catalog]
    assert len(catalog) == 6
    assert len(set(labels)) == 6
    for source, destination in labels:
        assert (destination, source) in labels


def test_every_pair_trades_between_different_assets():
    for pair in build_default_catalog(_tokens()):
        assert pair.source_asset != pair.destination_asset


def test_default_decimals_and_reserves():
    by_symbol = {p.source_symbol: p for p in build_default_catalog(_tokens())}

    assert by_symbol["ETH"].decimals == 18
    assert by_symbol["ETH"].min_reserve == Decimal("0.005")
    assert by_symbol["USDT"].decimals == 6
    assert by_symbol["USDT"].min_reserve == Decimal("10")
    assert by_symbol["BTC"].decimals == 8
    assert by_symbol["BTC"].min_reserve == Decimal("0.0005")


def test_pair_rejects_same_asset_on_both_sides():
    with pytest.raises(ValueError):
        TradingPair(ETH, ETH, "ETH", "ETH", 18, Decimal("0"))


def test_pair_rejects_negative_decimals_and_reserve():
    with pytest.raises(ValueError):
        TradingPair(ETH, USDT, "ETH", "USDT", -1, Decimal("0"))
    with pytest.raises(ValueError):
        TradingPair(ETH, USDT, "ETH", "USDT", 18, Decimal("-0.1"))


def test_float_reserve_is_stored_as_decimal():
    pair = TradingPair(ETH, USDT, "ETH", "USDT", 18, 0.005)

    assert pair.min_reserve == Decimal("0.005")
    assert pair.min_reserve_raw == 5 * 10**15


def test_empty_catalog_is_rejected():
    with pytest.raises(ValueError):
        PairCatalog([])


def test_selection_covers_the_whole_catalog():
    catalog = build_default_catalog(_tokens(), rng=random.Random(7))

    picked = {catalog.select_random_pair() for _ in range(600)}

    assert picked == set(catalog)
