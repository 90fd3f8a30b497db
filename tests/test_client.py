from __future__ import annotations

import unittest

from mini_search.core.aggregate import (
    AggregateBuilder,
    AggregateCursor,
    AggregateOptions,
    GroupByBuilder,
    reduce_count,
)
from mini_search.core.client import SearchClient
from mini_search.core.client_async import AsyncSearchClient
from mini_search.core.errors import ReplyDecodeError
from mini_search.core.query import QueryBuilder, QueryOptions
from mini_search.core.schema import IndexOptions, NumericAttribute, TagAttribute
from tests.search_test_helpers import AsyncScriptedTransport, ScriptedTransport


class SearchClientTests(unittest.TestCase):
    def test_search_by_tag_without_content(self) -> None:
        transport = ScriptedTransport([[1, "account:1121175"]])
        client = SearchClient(transport)

        results = client.search("accounts", "@id:{1121175}", QueryOptions(no_content=True))

        self.assertEqual(transport.calls, [["FT.SEARCH", "accounts", "@id:{1121175}", "NOCONTENT"]])
        self.assertEqual(results.keys(), ["account:1121175"])
        self.assertIsNone(results[0].values)

    def test_search_defaults(self) -> None:
        transport = ScriptedTransport([[1, "account:1", ["name", "alice"]]])

        results = SearchClient(transport).search("accounts", "alice")

        self.assertEqual(transport.calls, [["FT.SEARCH", "accounts", "alice"]])
        self.assertEqual(results.key("account:1").fields, {"name": "alice"})

    def test_search_json_with_builder_options(self) -> None:
        transport = ScriptedTransport(
            [{"total_results": 1, "results": [{"id": "doc:1", "extra_attributes": {"$": '{"n": 1}'}}]}]
        )
        options = QueryBuilder().limit(0, 5).param("n", 1).options()

        results = SearchClient(transport).search("docs", "@n:[$n $n]", options, on_json=True)

        self.assertEqual(
            transport.calls[0],
            ["FT.SEARCH", "docs", "@n:[$n $n]", "LIMIT", 0, 5, "PARAMS", 1, "n", 1],
        )
        self.assertEqual(results[0].values.unmarshal(), {"n": 1})

    def test_search_decode_error_propagates(self) -> None:
        client = SearchClient(ScriptedTransport(["OK"]))

        with self.assertRaises(ReplyDecodeError):
            client.search("idx", "*")

    def test_transport_errors_propagate(self) -> None:
        client = SearchClient(ScriptedTransport([ConnectionError("down")]))

        with self.assertRaises(ConnectionError):
            client.list_indexes()

    def test_aggregate_with_cursor(self) -> None:
        transport = ScriptedTransport(
            [
                [[2, ["city", "London", "n", "2"]], 77],
                [[2, ["city", "Paris", "n", "1"]], 0],
                "OK",
            ]
        )
        client = SearchClient(transport)
        options = (
            AggregateBuilder()
            .group_by(GroupByBuilder().property("@city").reduce(reduce_count("n")))
            .cursor(count=1)
            .options()
        )

        first = client.aggregate("accounts", "*", options)
        second = client.cursor_read("accounts", first.cursor_id, count=1)
        deleted = client.cursor_delete("accounts", first.cursor_id)

        self.assertEqual(
            transport.calls,
            [
                [
                    "FT.AGGREGATE",
                    "accounts",
                    "*",
                    "GROUPBY",
                    1,
                    "@city",
                    "REDUCE",
                    "COUNT",
                    0,
                    "AS",
                    "n",
                    "WITHCURSOR",
                    "COUNT",
                    1,
                ],
                ["FT.CURSOR", "READ", "accounts", 77, "COUNT", 1],
                ["FT.CURSOR", "DEL", "accounts", 77],
            ],
        )
        self.assertEqual(first.rows, [{"city": "London", "n": "2"}])
        self.assertEqual(first.cursor_id, 77)
        self.assertEqual(second.rows, [{"city": "Paris", "n": "1"}])
        self.assertEqual(second.cursor_id, 0)
        self.assertTrue(deleted)

    def test_aggregate_without_cursor(self) -> None:
        transport = ScriptedTransport([[1, ["n", "3"]]])

        results = SearchClient(transport).aggregate("accounts", "*")

        self.assertEqual(transport.calls, [["FT.AGGREGATE", "accounts", "*"]])
        self.assertEqual(results.rows, [{"n": "3"}])

    def test_index_lifecycle_commands(self) -> None:
        transport = ScriptedTransport(["OK", "OK", "OK", ["accounts"]])
        client = SearchClient(transport)
        options = IndexOptions(
            prefix=["account:"],
            schema=[TagAttribute("id"), NumericAttribute("balance", sortable=True)],
        )

        self.assertTrue(client.create_index("accounts", options))
        self.assertTrue(client.drop_index("accounts"))
        self.assertTrue(client.drop_index("accounts", delete_documents=True))
        self.assertEqual(client.list_indexes(), ["accounts"])

        self.assertEqual(
            transport.calls,
            [
                [
                    "FT.CREATE",
                    "accounts",
                    "ON",
                    "HASH",
                    "PREFIX",
                    1,
                    "account:",
                    "SCORE",
                    "1",
                    "SCHEMA",
                    "id",
                    "TAG",
                    "balance",
                    "NUMERIC",
                    "SORTABLE",
                ],
                ["FT.DROPINDEX", "accounts"],
                ["FT.DROPINDEX", "accounts", "DD"],
                ["FT._LIST"],
            ],
        )

    def test_create_index_validation_happens_before_sending(self) -> None:
        transport = ScriptedTransport([])

        with self.assertRaises(ValueError):
            SearchClient(transport).create_index("empty", IndexOptions())
        self.assertEqual(transport.calls, [])

    def test_info(self) -> None:
        transport = ScriptedTransport([["index_name", "accounts", "num_docs", "3"]])

        info = SearchClient(transport).info("accounts")

        self.assertEqual(transport.calls, [["FT.INFO", "accounts"]])
        self.assertEqual((info.index_name, info.num_docs), ("accounts", 3))

    def test_administration_commands(self) -> None:
        cases = [
            ("tag_values", ("accounts", "id"), ["1", "2"], ["FT.TAGVALS", "accounts", "id"], ["1", "2"]),
            ("config_get", (), [["TIMEOUT", "500"]], ["FT.CONFIG", "GET", "*"], {"TIMEOUT": "500"}),
            ("config_set", ("TIMEOUT", "100"), "OK", ["FT.CONFIG", "SET", "TIMEOUT", "100"], True),
            ("dict_add", ("slang", "lol", "brb"), 2, ["FT.DICTADD", "slang", "lol", "brb"], 2),
            ("dict_delete", ("slang", "lol"), 1, ["FT.DICTDEL", "slang", "lol"], 1),
            ("dict_dump", ("slang",), ["brb"], ["FT.DICTDUMP", "slang"], ["brb"]),
            (
                "synonym_update",
                ("accounts", "g1", "boy", "child"),
                "OK",
                ["FT.SYNUPDATE", "accounts", "g1", "boy", "child"],
                True,
            ),
            ("synonym_dump", ("accounts",), ["boy", ["g1"]], ["FT.SYNDUMP", "accounts"], {"boy": ["g1"]}),
            ("alias_add", ("people", "accounts"), "OK", ["FT.ALIASADD", "people", "accounts"], True),
            ("alias_update", ("people", "accounts"), "OK", ["FT.ALIASUPDATE", "people", "accounts"], True),
            ("alias_delete", ("people",), "OK", ["FT.ALIASDEL", "people"], True),
        ]
        for method, args, reply, expected_command, expected_result in cases:
            with self.subTest(method=method):
                transport = ScriptedTransport([reply])
                result = getattr(SearchClient(transport), method)(*args)
                self.assertEqual(transport.calls, [expected_command])
                self.assertEqual(result, expected_result)

    def test_synonym_update_skips_initial_scan(self) -> None:
        transport = ScriptedTransport(["OK"])

        SearchClient(transport).synonym_update("accounts", "g1", "boy", skip_initial_scan=True)

        self.assertEqual(
            transport.calls, [["FT.SYNUPDATE", "accounts", "g1", "SKIPINITIALSCAN", "boy"]]
        )


class AsyncSearchClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_search_over_async_transport(self) -> None:
        transport = AsyncScriptedTransport(
            [
                {
                    "total_results": 1,
                    "results": [{"id": "account:1121175", "values": []}],
                    "format": "STRING",
                }
            ]
        )
        client = AsyncSearchClient(transport)

        results = await client.search("accounts", "@id:{1121175}", QueryOptions(no_content=True))

        self.assertEqual(results.keys(), ["account:1121175"])
        self.assertEqual(
            transport.calls, [["FT.SEARCH", "accounts", "@id:{1121175}", "NOCONTENT"]]
        )

    async def test_aggregate_and_cursor(self) -> None:
        transport = AsyncScriptedTransport(
            [[[1, ["n", "1"]], 5], [[1, ["n", "2"]], 0], "OK"]
        )
        client = AsyncSearchClient(transport)
        options = AggregateOptions(cursor=AggregateCursor(count=1))

        first = await client.aggregate("idx", "*", options)
        second = await client.cursor_read("idx", first.cursor_id)
        deleted = await client.cursor_delete("idx", first.cursor_id)

        self.assertEqual((first.cursor_id, second.cursor_id), (5, 0))
        self.assertTrue(deleted)
        self.assertEqual(transport.calls[1], ["FT.CURSOR", "READ", "idx", 5])

    async def test_administration_over_sync_transport(self) -> None:
        transport = ScriptedTransport(
            ["OK", ["index_name", "idx"], ["idx"], ["a"], {"TIMEOUT": "500"}, "OK", 1, 1, ["x"]]
        )
        client = AsyncSearchClient(transport)

        self.assertTrue(await client.create_index("idx", IndexOptions(schema=[TagAttribute("id")])))
        self.assertEqual((await client.info("idx")).index_name, "idx")
        self.assertEqual(await client.list_indexes(), ["idx"])
        self.assertEqual(await client.tag_values("idx", "id"), ["a"])
        self.assertEqual(await client.config_get("TIMEOUT"), {"TIMEOUT": "500"})
        self.assertTrue(await client.config_set("TIMEOUT", "500"))
        self.assertEqual(await client.dict_add("d", "x"), 1)
        self.assertEqual(await client.dict_delete("d", "x"), 1)
        self.assertEqual(await client.dict_dump("d"), ["x"])
        self.assertEqual(transport.calls[4], ["FT.CONFIG", "GET", "TIMEOUT"])

    async def test_synonyms_and_aliases(self) -> None:
        transport = AsyncScriptedTransport(
            ["OK", {"boy": ["g1"]}, "OK", "OK", "OK", "OK"]
        )
        client = AsyncSearchClient(transport)

        self.assertTrue(await client.synonym_update("idx", "g1", "boy", skip_initial_scan=True))
        self.assertEqual(await client.synonym_dump("idx"), {"boy": ["g1"]})
        self.assertTrue(await client.alias_add("a", "idx"))
        self.assertTrue(await client.alias_update("a", "idx"))
        self.assertTrue(await client.alias_delete("a"))
        self.assertTrue(await client.drop_index("idx", delete_documents=True))
        self.assertEqual(
            transport.calls[0], ["FT.SYNUPDATE", "idx", "g1", "SKIPINITIALSCAN", "boy"]
        )
        self.assertEqual(transport.calls[-1], ["FT.DROPINDEX", "idx", "DD"])


if __name__ == "__main__":
    unittest.main()
