"""End-to-end search flow against a Redis server with the search module.

Set `MINI_SEARCH_REDIS_URL` to point at a server other than localhost.
"""

from __future__ import annotations

import os
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
    IndexOptions,
    Limit,
    NumericAttribute,
    QueryOptions,
    RedisTransport,
    SearchClient,
    TagAttribute,
)


def main() -> None:
    url = os.getenv("MINI_SEARCH_REDIS_URL", "redis://localhost:6379/0")
    transport = RedisTransport.from_url(url, protocol=3)
    client = SearchClient(transport)

    client.create_index(
        "example_accounts",
        IndexOptions(
            prefix=["example:account:"],
            schema=[TagAttribute("id"), NumericAttribute("balance", sortable=True)],
        ),
    )
    try:
        for number in range(1121170, 1121177):
            transport.client.hset(
                f"example:account:{number}",
                mapping={"id": str(number), "balance": str(number % 100)},
            )

        hits = client.search("example_accounts", "@id:{1121175}", QueryOptions(no_content=True))
        print("Tag lookup:", hits.keys())

        # Walk every record three at a time.
        for record in client.iterate("example_accounts", "*", QueryOptions(limit=Limit(0, 3))):
            print(record.key, record.fields)

        info = client.info("example_accounts")
        print("Documents:", info.num_docs, "schema:", info.index.schema)
    finally:
        client.drop_index("example_accounts", delete_documents=True)
        transport.close()


if __name__ == "__main__":
    main()
