import argparse
import logging

import pandas as pd

from config import ReconConfig
from ingest import load_csv
from mapping import apply_mapping, load_column_map
from match import auto_match
from models import Side
from report import write_outputs
from rules import load_rules
from standardize import standardize
from stats import compute_stats
from store import ReconciliationStore


def parse_args(argv=None) -> argparse.Namespace:
    defaults = ReconConfig()
    ap = argparse.ArgumentParser(description="Match a bank statement against accounting books.")
    ap.add_argument("--bank", default=defaults.bank_path, help="Bank statement CSV")
    ap.add_argument("--books", default=defaults.books_path, help="Accounting records CSV")
    ap.add_argument("--column-map", default=defaults.column_map_path, help="Column map JSON")
    ap.add_argument("--rules", default=defaults.rules_path, help="Matching rules JSON")
    ap.add_argument("--out", default=defaults.outputs_dir, help="Output directory")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    return ap.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    cfg = ReconConfig(
        bank_path=args.bank,
        books_path=args.books,
        column_map_path=args.column_map,
        rules_path=args.rules,
        outputs_dir=args.out,
    )
    rules = load_rules(cfg.rules_path)
    column_map = load_column_map(cfg.column_map_path)

    bank_raw = apply_mapping(load_csv(cfg.bank_path), "bank", column_map)
    books_raw = apply_mapping(load_csv(cfg.books_path), "books", column_map)

    bank, ex_bank = standardize(bank_raw, Side.LEFT)
    books, ex_books = standardize(books_raw, Side.RIGHT)
    exceptions = pd.concat([ex_bank, ex_books], ignore_index=True)

    result = auto_match(bank, books, rules.amount_tolerance, rules.day_tolerance)

    store = ReconciliationStore()
    store.initialize(result)
    stats = compute_stats(store.state)

    write_outputs(cfg.outputs_dir, store.state, exceptions, stats)

    print(f"Wrote outputs to {cfg.outputs_dir}/")
    print(f"Matched: {stats.matched} of {stats.total} bank rows ({stats.match_rate}%) | "
          f"Unmatched bank: {stats.unmatched_left} | Unmatched books: {stats.unmatched_right} | "
          f"Exceptions: {len(exceptions)}")
    print("Match breakdown:", {"exact": stats.exact_matches,
                               "fuzzy": stats.fuzzy_matches,
                               "manual": stats.manual_matches})

if __name__ == "__main__":
    main()
