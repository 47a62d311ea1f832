"""
Basic demonstration of the futures simulator.
"""

import argparse
import asyncio
import logging

from futures_simulator import create_demo_engine
from futures_simulator.config.simulation_config import SimulationConfig
from futures_simulator.core.types import OrderSide, OrderType
from futures_simulator.realtime.notifier import ActionNotifier, format_price
from futures_simulator.trading.snapshot import Snapshot


def print_snapshot(snapshot: Snapshot):
    """Render a snapshot as plain text"""
    symbol = snapshot.selected_symbol
    state = snapshot.price_by_symbol[symbol]
    print(f"\n--- Tick {snapshot.tick_count} | {symbol} {format_price(state.last_price)} "
          f"({state.percent_change:+.2f}%) ---")

    book = snapshot.book
    if book is not None:
        for level in reversed(book.asks[:3]):
            print(f"  ask {format_price(level.price):>14} {level.size:>7.3f} {level.cumulative:>14,.0f}")
        print(f"  mid {format_price(book.mid_price):>14}")
        for level in book.bids[:3]:
            print(f"  bid {format_price(level.price):>14} {level.size:>7.3f} {level.cumulative:>14,.0f}")

    for position in snapshot.positions:
        pnl = position.unrealized_pnl or 0.0
        print(f"  {position.symbol:<9} {position.direction.value.upper():<5} {position.size:>8} "
              f"entry {format_price(position.entry_price)} pnl {pnl:+,.2f}")
    print(f"  balance ${snapshot.balance:,.2f} | total PnL {snapshot.total_pnl:+,.2f} | "
          f"{len(snapshot.orders)} pending order(s)")


def demo_actions(notifier: ActionNotifier):
    """Exercise the user actions and print their notifications"""
    print("=== Order Actions Demo ===")
    print(notifier.place_order(OrderSide.BUY, OrderType.MARKET, 0.02))
    print(notifier.place_order(OrderSide.BUY, OrderType.LIMIT, 0.1, price=65000))
    print(notifier.place_order(OrderSide.SELL, OrderType.LIMIT, 0))
    print(notifier.cancel_order("ORD002"))
    print(notifier.cancel_order("ORD999"))

    estimate = notifier.engine.estimate_order(OrderType.MARKET, 0.05, leverage=20)
    print(f"Estimate 0.05 @ 20x: notional ${estimate.notional:,.2f}, "
          f"margin ${estimate.margin:,.2f}, fee ${estimate.fee:,.2f}")


async def run_demo(ticks: int, config: SimulationConfig):
    engine = create_demo_engine(config)
    notifier = ActionNotifier(engine)

    demo_actions(notifier)

    print("\n=== Live Ticks ===")
    engine.register_tick_callback(print_snapshot)
    await engine.start(max_ticks=ticks)

    print("\n=== Closing ===")
    print(notifier.close_position("BTC-PERP"))
    print(notifier.close_position("BTC-PERP"))
    print(engine.get_status())


def main():
    parser = argparse.ArgumentParser(description="Run the futures trading simulator demo")
    parser.add_argument("--ticks", type=int, default=10, help="Number of ticks to simulate")
    parser.add_argument("--interval-ms", type=int, default=600, help="Tick interval in milliseconds")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = SimulationConfig(tick_interval_ms=args.interval_ms, seed=args.seed)
    asyncio.run(run_demo(args.ticks, config))


if __name__ == "__main__":
    main()
