"""Command line entry point: compound calculator, live TRY rates and history."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from fx_lira import FxLira
from fx_lira.accumulation import validate_inputs
from fx_lira.exceptions import AllProvidersExhausted, ThrottleError
from fx_lira.ingestion.models import EnrichedRateQuote
from fx_lira.utils.logger import get_logger
from fx_lira.utils.numbers import format_currency, number_to_turkish

LOGGER = get_logger(__name__)

__all__ = ["parse_args", "main"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="fx-lira", description=__doc__)
    parser.add_argument(
        "--db",
        dest="db_url",
        default=None,
        help="History database DSN (defaults to the bundled SQLite file)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    calc = sub.add_parser("accumulate", help="Compound PRINCIPAL by RATE percent per day")
    calc.add_argument("principal", type=float)
    calc.add_argument("rate", type=float, help="Daily rate in percent, e.g. 5 for 5%%")
    calc.add_argument("days", type=int)
    calc.add_argument("--save", action="store_true", help="Log the result to the history store")

    rates = sub.add_parser("rates", help="Fetch current buy/sell rates in TRY")
    rates.add_argument("--evds-key", dest="evds_key", help="TCMB EVDS API key")
    rates.add_argument(
        "--metals",
        action="store_true",
        help="Show precious metals only (requires XAU/XAG/XPT/XPD instruments)",
    )

    sub.add_parser("history", help="List saved calculations")
    return parser.parse_args(argv)


def _format_quote(quote: EnrichedRateQuote) -> str:
    return (
        f"{quote.code:<4} {quote.name:<20} "
        f"alış {quote.buy_rate:>10.4f} ({quote.buy_change:+.4f}, {quote.buy_change_percent:+.2f}%)  "
        f"satış {quote.sell_rate:>10.4f} ({quote.sell_change:+.4f}, {quote.sell_change_percent:+.2f}%)"
    )


def _run_accumulate(fx: FxLira, args: argparse.Namespace) -> int:
    for problem in validate_inputs(args.principal, args.rate, args.days):
        LOGGER.warning("Outside calculator range: %s", problem)
    result = fx.accumulate(args.principal, args.rate, args.days)
    print(f"Genel Toplam: {format_currency(result.final_amount)} TL")
    print(f"              {number_to_turkish(result.final_amount)}")
    print(f"Toplam Kâr:   {format_currency(result.profit)} TL")
    print(f"Toplam Artış: %{format_currency(result.profit_percent)}")
    if args.save:
        record = fx.save_calculation(args.principal, args.rate, args.days)
        print(f"Kaydedildi (#{record.id})")
    return 0


def _run_rates(fx: FxLira, args: argparse.Namespace) -> int:
    try:
        fx.refresh_rates()
    except ThrottleError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except AllProvidersExhausted as exc:
        print(str(exc), file=sys.stderr)
        return 1
    quotes = fx.metals() if args.metals else fx.rates()
    for quote in quotes:
        print(_format_quote(quote))
    if not quotes and args.metals:
        print("Değerli maden kuru tanımlı değil.", file=sys.stderr)
        return 1
    if not quotes:
        print("Kur verileri şu anda kullanılamıyor.", file=sys.stderr)
        return 1
    return 0


def _run_history(fx: FxLira) -> int:
    for record in fx.calculations():
        print(
            f"#{record.id} {record.created_at:%Y-%m-%d %H:%M} "
            f"{record.start_amount} × %{record.daily_percent} × {record.days} gün "
            f"= {record.total_result} (kâr {record.total_profit})"
        )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    fx = FxLira(args.db_url, evds_key=getattr(args, "evds_key", None))
    try:
        if args.command == "accumulate":
            return _run_accumulate(fx, args)
        if args.command == "rates":
            return _run_rates(fx, args)
        return _run_history(fx)
    finally:
        fx.close()


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
