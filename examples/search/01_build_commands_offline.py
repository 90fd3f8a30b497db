"""Build search commands and decode canned replies without a server."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "mini_search").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mini_search import (
    AggregateBuilder,
    GroupByBuilder,
    IndexOptions,
    NumericAttribute,
    QueryBuilder,
    QueryOptions,
    TagAttribute,
    decode_aggregate_reply,
    decode_search_reply,
)
from mini_search.core import create_index_args, reduce_count, search_args


def main() -> None:
    # Index definition for hashes under `account:`.
    index = IndexOptions(
        prefix=["account:"],
        schema=[TagAttribute("id"), NumericAttribute("balance", sortable=True)],
    )
    print("Create:", create_index_args("accounts", index))

    # Key-only lookup by tag.
    options = QueryOptions(no_content=True)
    print("Search:", search_args("accounts", "@id:{1121175}", options))

    # The same page arrives in either reply encoding.
    legacy = decode_search_reply([1, "account:1121175"], options)
    modern = decode_search_reply(
        {"total_results": 1, "results": [{"id": "account:1121175", "values": []}]},
        options,
    )
    print("Legacy keys:", legacy.keys())
    print("Modern keys:", modern.keys())

    # Builder form with scores and a numeric range.
    scored = (
        QueryBuilder()
        .with_scores()
        .filter("balance", 0, 100)
        .sort_by("balance")
        .descending()
        .limit(0, 3)
        .options()
    )
    print("Scored search:", search_args("accounts", "*", scored))

    # Aggregate with a grouping step.
    aggregate = (
        AggregateBuilder()
        .group_by(GroupByBuilder().property("@id").reduce(reduce_count("n")))
        .options()
    )
    print("Aggregate:", aggregate.serialize())
    rows = decode_aggregate_reply([1, ["id", "1121175", "n", "1"]], aggregate)
    print("Rows:", rows.rows)


if __name__ == "__main__":
    main()
