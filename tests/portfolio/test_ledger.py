"""
Tests for the order and position ledger.
"""

import copy
import random
import pytest

from futures_simulator.portfolio.ledger import Ledger
from futures_simulator.portfolio.position import Position
from futures_simulator.core.models import Order
from futures_simulator.core.types import ExecutionStatus, OrderSide, OrderStatus, OrderType, PositionDirection
from futures_simulator.core.exceptions import (
    InvalidArgumentError, InvalidLeverageError, InvalidPriceError, InvalidQuantityError,
    OrderNotFoundError, PositionNotFoundError
)


def ledger_state(ledger):
    return (copy.deepcopy(ledger.positions), copy.deepcopy(ledger.orders), len(ledger.trades))


class TestMarketOrders:
    def test_market_buy_opens_long(self, sample_ledger, btc):
        """Test market buy opens long"""
        result = sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 0.5, mid_price=67840.0)

        assert result.status is ExecutionStatus.EXECUTED
        assert result.order is None
        assert len(sample_ledger.positions) == 1
        position = sample_ledger.positions[0]
        assert position.direction is PositionDirection.LONG
        assert position.size == 0.5
        assert position.entry_price == 67840.0
        assert position.liquidation_price == pytest.approx(67840.0 * 0.9)
        assert position.unrealized_pnl == 0
        assert sample_ledger.orders == []

    def test_market_sell_opens_short(self, sample_ledger, eth):
        """Test market sell opens short"""
        sample_ledger.place_order(eth, OrderSide.SELL, OrderType.MARKET, 2, mid_price=3500.0)
        position = sample_ledger.positions[0]

        assert position.direction is PositionDirection.SHORT
        assert position.liquidation_price == pytest.approx(3500.0 * 1.1)

    def test_second_buy_adds_size_without_averaging(self, sample_ledger, btc):
        """Test second buy adds size without averaging"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 0.5, mid_price=67840.0)
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 0.25, mid_price=70000.0)

        assert len(sample_ledger.positions) == 1
        position = sample_ledger.positions[0]
        assert position.size == pytest.approx(0.75)
        assert position.entry_price == 67840.0

    def test_average_entry_extension(self, manual_clock, btc):
        """Test average entry extension"""
        ledger = Ledger(25000.0, average_entry=True, clock=manual_clock)
        ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 1.0, mid_price=100.0)
        ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 1.0, mid_price=200.0)

        position = ledger.positions[0]
        assert position.entry_price == pytest.approx(150.0)
        assert position.liquidation_price == pytest.approx(135.0)

    def test_opposite_sides_coexist(self, sample_ledger, btc):
        """Test opposite sides coexist"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 1.0, mid_price=100.0)
        sample_ledger.place_order(btc, OrderSide.SELL, OrderType.MARKET, 1.0, mid_price=100.0)

        directions = {p.direction for p in sample_ledger.get_positions("BTC-PERP")}
        assert directions == {PositionDirection.LONG, PositionDirection.SHORT}

    def test_market_fill_is_logged(self, sample_ledger, btc):
        """Test market fill is logged"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 0.1, mid_price=67840.0)
        trade = sample_ledger.trades[-1]
        assert trade.side is OrderSide.BUY
        assert trade.price == 67840.0
        assert trade.realized_pnl is None

    def test_market_without_mid_rejected(self, sample_ledger, btc):
        """Test market without mid rejected"""
        with pytest.raises(InvalidArgumentError):
            sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 1.0, mid_price=None)
        assert sample_ledger.positions == []

    def test_balance_not_debited(self, sample_ledger, btc):
        """Test balance not debited"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 1.0, mid_price=67840.0)
        assert sample_ledger.balance == 25000.0


class TestRestingOrders:
    def test_limit_buy_rests(self, sample_ledger, btc):
        """Test limit buy rests"""
        result = sample_ledger.place_order(btc, OrderSide.BUY, OrderType.LIMIT, 0.1, price=66500.0)

        assert result.status is ExecutionStatus.ACCEPTED
        assert len(sample_ledger.orders) == 1
        order = sample_ledger.orders[0]
        assert order.symbol == "BTC-PERP"
        assert order.side is OrderSide.BUY
        assert order.order_type is OrderType.LIMIT
        assert order.price == 66500.0
        assert order.quantity == 0.1
        assert order.status is OrderStatus.OPEN
        assert sample_ledger.positions == []

    def test_stop_order_rests(self, sample_ledger, btc):
        """Test stop order rests"""
        sample_ledger.place_order(btc, OrderSide.SELL, OrderType.STOP, 1, price=60000.0, mid_price=67840.0)
        assert sample_ledger.orders[0].order_type is OrderType.STOP
        assert sample_ledger.positions == []

    def test_crossing_limit_never_fills(self, sample_ledger, btc):
        """Test crossing limit never fills"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.LIMIT, 1, price=90000.0)
        sample_ledger.recompute_pnl({"BTC-PERP": 67840.0})
        assert len(sample_ledger.orders) == 1
        assert sample_ledger.positions == []

    def test_cancel_order(self, sample_ledger, btc):
        """Test cancel order"""
        result = sample_ledger.place_order(btc, OrderSide.BUY, OrderType.LIMIT, 0.1, price=66500.0)
        cancelled = sample_ledger.cancel_order(result.order.id)

        assert cancelled.id == result.order.id
        assert sample_ledger.orders == []
        assert sample_ledger.get_order(result.order.id) is None

    def test_cancel_unknown_order(self, sample_ledger, btc):
        """Test cancel unknown order"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.LIMIT, 0.1, price=66500.0)
        before = copy.deepcopy(sample_ledger.orders)

        with pytest.raises(OrderNotFoundError) as exc:
            sample_ledger.cancel_order("ORDMISSING")

        assert exc.value.order_id == "ORDMISSING"
        assert sample_ledger.orders == before

    def test_order_ids_unique(self, sample_ledger, btc):
        """Test order ids unique"""
        for _ in range(100):
            sample_ledger.place_order(btc, OrderSide.BUY, OrderType.LIMIT, 1, price=100.0)
        assert len({o.id for o in sample_ledger.orders}) == 100


class TestValidation:
    @pytest.mark.parametrize("order_type", [OrderType.MARKET, OrderType.LIMIT, OrderType.STOP])
    @pytest.mark.parametrize("quantity", [0, -0.5, None])
    def test_invalid_quantity_no_mutation(self, sample_ledger, btc, order_type, quantity):
        """Test invalid quantity no mutation"""
        before = ledger_state(sample_ledger)
        with pytest.raises(InvalidQuantityError):
            sample_ledger.place_order(btc, OrderSide.BUY, order_type, quantity, price=100.0, mid_price=100.0)
        assert ledger_state(sample_ledger) == before

    @pytest.mark.parametrize("price", [None, 0, -1, float('nan')])
    def test_invalid_limit_price_no_mutation(self, sample_ledger, btc, price):
        """Test invalid limit price no mutation"""
        before = ledger_state(sample_ledger)
        with pytest.raises(InvalidPriceError):
            sample_ledger.place_order(btc, OrderSide.BUY, OrderType.LIMIT, 1, price=price)
        assert ledger_state(sample_ledger) == before

    def test_invalid_leverage_no_mutation(self, sample_ledger, btc):
        """Test invalid leverage no mutation"""
        with pytest.raises(InvalidLeverageError):
            sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 1, mid_price=100.0, leverage=500)
        assert sample_ledger.positions == []
        assert sample_ledger.trades == []


class TestClosePosition:
    def test_close_removes_symbol(self, sample_ledger, btc, eth):
        """Test close removes symbol"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 1, mid_price=67840.0)
        sample_ledger.place_order(btc, OrderSide.SELL, OrderType.MARKET, 1, mid_price=67840.0)
        sample_ledger.place_order(eth, OrderSide.BUY, OrderType.MARKET, 1, mid_price=3520.0)

        closed = sample_ledger.close_position("BTC-PERP", mark_price=68000.0)

        assert len(closed) == 2
        assert sample_ledger.get_positions("BTC-PERP") == []
        assert len(sample_ledger.get_positions("ETH-PERP")) == 1

    def test_close_records_realized_pnl(self, sample_ledger, btc):
        """Test close records realized pnl"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 2, mid_price=100.0)
        sample_ledger.close_position("BTC-PERP", mark_price=110.0)

        trade = sample_ledger.trades[-1]
        assert trade.side is OrderSide.SELL
        assert trade.realized_pnl == pytest.approx(20.0)
        assert sample_ledger.balance == 25000.0

    def test_close_missing_symbol(self, sample_ledger):
        """Test close missing symbol"""
        with pytest.raises(PositionNotFoundError) as exc:
            sample_ledger.close_position("BTC-PERP")
        assert exc.value.symbol == "BTC-PERP"


class TestPnl:
    def test_long_and_short_pnl(self, sample_ledger, btc, eth):
        """Test long and short pnl"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 2, mid_price=100.0)
        sample_ledger.place_order(eth, OrderSide.SELL, OrderType.MARKET, 3, mid_price=50.0)

        total = sample_ledger.recompute_pnl({"BTC-PERP": 110.0, "ETH-PERP": 40.0})

        assert sample_ledger.get_positions("BTC-PERP")[0].unrealized_pnl == pytest.approx(20.0)
        assert sample_ledger.get_positions("ETH-PERP")[0].unrealized_pnl == pytest.approx(30.0)
        assert total == pytest.approx(50.0)

    def test_missing_mark_skips_position(self, sample_ledger, btc):
        """Test missing mark skips position"""
        sample_ledger.place_order(btc, OrderSide.BUY, OrderType.MARKET, 1, mid_price=100.0)
        sample_ledger.recompute_pnl({"BTC-PERP": 105.0})
        sample_ledger.recompute_pnl({})
        sample_ledger.recompute_pnl({"BTC-PERP": 0})

        assert sample_ledger.positions[0].unrealized_pnl == pytest.approx(5.0)

    def test_seeded_position_pnl_none_until_marked(self, sample_ledger):
        """Test seeded position pnl none until marked"""
        position = sample_ledger.seed_position("BTC-PERP", PositionDirection.LONG, 0.05, 67200.0, 62800.0)
        assert position.unrealized_pnl is None
        assert sample_ledger.total_unrealized_pnl == 0.0

        sample_ledger.recompute_pnl({"BTC-PERP": 67300.0})
        assert position.unrealized_pnl == pytest.approx(5.0)

    def test_total_matches_sum_under_random_actions(self, sample_ledger, btc, eth):
        """Test total matches sum under random actions"""
        rnd = random.Random(5)
        prices = {"BTC-PERP": 67840.0, "ETH-PERP": 3520.0}
        instruments = [btc, eth]

        for _ in range(300):
            action = rnd.choice(["market", "limit", "cancel", "close", "mark"])
            inst = rnd.choice(instruments)
            side = rnd.choice([OrderSide.BUY, OrderSide.SELL])
            if action == "market":
                sample_ledger.place_order(inst, side, OrderType.MARKET, rnd.uniform(0.01, 2),
                                          mid_price=prices[inst.symbol])
            elif action == "limit":
                sample_ledger.place_order(inst, side, OrderType.LIMIT, 1, price=prices[inst.symbol] * 0.99)
            elif action == "cancel" and sample_ledger.orders:
                sample_ledger.cancel_order(rnd.choice(sample_ledger.orders).id)
            elif action == "close" and sample_ledger.get_positions(inst.symbol):
                sample_ledger.close_position(inst.symbol, prices[inst.symbol])
            else:
                for symbol in prices:
                    prices[symbol] *= 1 + rnd.uniform(-0.01, 0.01)
                sample_ledger.recompute_pnl(prices)

            expected = sum(p.unrealized_pnl or 0.0 for p in sample_ledger.positions)
            assert sample_ledger.total_unrealized_pnl == pytest.approx(expected)
            pairs = [(p.symbol, p.direction) for p in sample_ledger.positions]
            assert len(pairs) == len(set(pairs))


class TestPosition:
    def test_position_defaults_liquidation(self):
        """Test position defaults liquidation"""
        pos = Position("BTC-PERP", PositionDirection.SHORT, 1.0, 100.0)
        assert pos.liquidation_price == pytest.approx(110.0)

    def test_position_rejects_bad_size(self):
        """Test position rejects bad size"""
        with pytest.raises(ValueError):
            Position("BTC-PERP", PositionDirection.LONG, 0.0, 100.0)

    def test_pnl_percent(self):
        """Test pnl percent"""
        pos = Position("BTC-PERP", PositionDirection.LONG, 2.0, 100.0)
        assert pos.pnl_percent(110.0) == pytest.approx(10.0)
        assert pos.notional(110.0) == pytest.approx(220.0)

    def test_seed_order_duplicate_id(self, sample_ledger):
        """Test seed order duplicate id"""
        order = Order("BTC-PERP", OrderSide.BUY, OrderType.LIMIT, 0.1, 66500.0, id="ORD001")
        sample_ledger.seed_order(order)
        with pytest.raises(ValueError):
            sample_ledger.seed_order(order)
