from __future__ import annotations

import unittest
from datetime import timedelta

from mini_search.core.errors import ReplyDecodeError, SchemaParseError
from mini_search.core.info import CursorStats, DialectStats, parse_info
from mini_search.core.schema import (
    IndexOptions,
    NumericAttribute,
    TagAttribute,
    TextAttribute,
    VectorAttribute,
)

LEGACY_INFO = [
    "index_name",
    "accounts",
    "index_options",
    [],
    "index_definition",
    ["key_type", "HASH", "prefixes", ["account:"], "default_score", "1"],
    "attributes",
    [
        ["identifier", "id", "attribute", "id", "type", "TAG", "SEPARATOR", ","],
        ["identifier", "balance", "attribute", "balance", "type", "NUMERIC", "SORTABLE"],
    ],
    "num_docs",
    "3",
    "max_doc_id",
    "3",
    "num_terms",
    "0",
    "num_records",
    "6",
    "inverted_sz_mb",
    "0.0012",
    "total_inverted_index_blocks",
    "4",
    "indexing",
    "0",
    "percent_indexed",
    "1",
    "hash_indexing_failures",
    "0",
    "total_indexing_time",
    "1.5",
    "number_of_uses",
    2,
    "gc_stats",
    [
        "bytes_collected",
        "0",
        "total_ms_run",
        "12",
        "total_cycles",
        "1",
        "average_cycle_time_ms",
        "nan",
        "last_run_time_ms",
        "12",
    ],
    "cursor_stats",
    ["global_idle", 0, "global_total", 0, "index_capacity", 128, "index_total", 0],
    "dialect_stats",
    ["dialect_1", 0, "dialect_2", 5, "dialect_3", 0, "dialect_4", 0],
]

MODERN_INFO = {
    "index_name": "docs",
    "index_options": ["NOOFFSETS", "NOHL"],
    "index_definition": {
        "key_type": "JSON",
        "prefixes": ["doc:"],
        "default_score": 0.5,
        "default_language": "german",
        "filter": "@age>1",
    },
    "attributes": [
        {
            "identifier": "$.title",
            "attribute": "title",
            "type": "TEXT",
            "WEIGHT": 1,
            "flags": ["SORTABLE"],
        },
        {
            "identifier": "$.vec",
            "attribute": "vec",
            "type": "VECTOR",
            "hnsw": {"type": "FLOAT32", "dim": 4, "distance_metric": "L2", "m": 16},
        },
    ],
    "stopwords_list": ["a", "the"],
    "num_docs": 2,
    "vector_index_sz_mb": 0.25,
}


class ParseInfoTests(unittest.TestCase):
    def test_legacy_reply(self) -> None:
        info = parse_info(LEGACY_INFO)

        self.assertEqual(info.index_name, "accounts")
        self.assertEqual(
            info.index,
            IndexOptions(
                prefix=["account:"],
                schema=[TagAttribute("id"), NumericAttribute("balance", sortable=True)],
            ),
        )
        self.assertEqual(info.num_docs, 3)
        self.assertEqual(info.num_records, 6)
        self.assertEqual(info.inverted_size_mb, 0.0012)
        self.assertEqual(info.percent_indexed, 1.0)
        self.assertEqual(info.number_of_uses, 2)
        self.assertEqual(info.total_indexing_time, timedelta(seconds=1.5))
        self.assertEqual(info.gc_stats.total_ms_run, timedelta(milliseconds=12))
        self.assertEqual(info.gc_stats.average_cycle_time, timedelta(0))
        self.assertEqual(info.cursor_stats, CursorStats(index_capacity=128))
        self.assertEqual(info.dialect_stats, DialectStats(dialect_2=5))

    def test_modern_reply(self) -> None:
        info = parse_info(MODERN_INFO)

        self.assertEqual(info.index.on, "JSON")
        self.assertEqual(info.index.prefix, ["doc:"])
        self.assertEqual(info.index.score, 0.5)
        self.assertEqual(info.index.language, "german")
        self.assertEqual(info.index.filter, "@age>1")
        self.assertTrue(info.index.no_offsets)
        self.assertFalse(info.index.no_highlight)
        self.assertEqual(info.index.stop_words, ["a", "the"])
        self.assertEqual(
            info.index.schema,
            [
                TextAttribute("$.title", alias="title", sortable=True),
                VectorAttribute(
                    "$.vec",
                    alias="vec",
                    algorithm="HNSW",
                    dim=4,
                    distance_metric="L2",
                    m=16,
                ),
            ],
        )
        self.assertEqual(info.vector_index_size_mb, 0.25)

    def test_absent_counters_read_as_zero(self) -> None:
        info = parse_info(["index_name", "empty"])

        self.assertEqual(info.num_docs, 0)
        self.assertEqual(info.doc_table_size_mb, 0.0)
        self.assertEqual(info.total_indexing_time, timedelta(0))
        self.assertEqual(info.gc_stats.bytes_collected, 0)
        self.assertEqual(info.index.schema, [])

    def test_english_language_reads_as_unset(self) -> None:
        info = parse_info(
            {"index_name": "x", "index_definition": {"default_language": "English"}}
        )

        self.assertIsNone(info.index.language)

    def test_non_numeric_counter_raises(self) -> None:
        with self.assertRaises(ReplyDecodeError):
            parse_info({"index_name": "x", "num_docs": "many"})

    def test_unknown_attribute_type_raises(self) -> None:
        reply = {
            "index_name": "x",
            "attributes": [["identifier", "f", "attribute", "f", "type", "SPARSE"]],
        }

        with self.assertRaises(SchemaParseError) as ctx:
            parse_info(reply)

        self.assertEqual(ctx.exception.attribute_type, "SPARSE")

    def test_reply_without_name_raises(self) -> None:
        for reply in ({"num_docs": 1}, ["num_docs", 1]):
            with self.subTest(reply=reply):
                with self.assertRaises(ReplyDecodeError):
                    parse_info(reply)

    def test_snapshot_is_frozen(self) -> None:
        info = parse_info(["index_name", "x"])

        with self.assertRaises(AttributeError):
            info.num_docs = 5  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
