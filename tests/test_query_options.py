from __future__ import annotations

import unittest
from datetime import timedelta

from mini_search.core.query import (
    GeoFilter,
    Limit,
    QueryBuilder,
    QueryFilter,
    QueryHighlight,
    QueryOptions,
    QueryReturn,
    QuerySummarize,
)


class QueryOptionsSerializationTests(unittest.TestCase):
    def test_defaults_serialize_to_nothing(self) -> None:
        self.assertEqual(QueryOptions().serialize(), [])

    def test_flags_in_grammar_order(self) -> None:
        options = QueryOptions(
            no_content=True,
            verbatim=True,
            no_stop_words=True,
            with_scores=True,
            with_payloads=True,
            with_sort_keys=True,
        )

        self.assertEqual(
            options.serialize(),
            ["NOCONTENT", "VERBATIM", "NOSTOPWORDS", "WITHSCORES", "WITHPAYLOADS", "WITHSORTKEYS"],
        )

    def test_full_option_order(self) -> None:
        options = QueryOptions(
            with_scores=True,
            explain_score=True,
            in_order=True,
            filters=[QueryFilter.between("age", 18, 65, exclude_max=True)],
            geo_filters=[GeoFilter("loc", -0.12, 51.5, 10, "km")],
            return_fields=[QueryReturn("name"), QueryReturn("$.age", "age")],
            summarize=QuerySummarize.defaults(["body"]),
            highlight=QueryHighlight(["title"], "<b>", "</b>"),
            slop=1,
            timeout=timedelta(milliseconds=500),
            language="english",
            expander="SYNONYM",
            scorer="BM25",
            in_keys=["a:1", "a:2"],
            in_fields=["title"],
            sort_by="age",
            sort_order="desc",
            limit=Limit(20, 5),
            params={"lo": 18},
            dialect=3,
        )

        self.assertEqual(
            options.serialize(),
            [
                "WITHSCORES",
                "FILTER",
                "age",
                "18.000000",
                "(65.000000",
                "GEOFILTER",
                "loc",
                -0.12,
                51.5,
                10,
                "km",
                "RETURN",
                4,
                "name",
                "$.age",
                "AS",
                "age",
                "SUMMARIZE",
                "FIELDS",
                1,
                "body",
                "FRAGS",
                3,
                "LEN",
                20,
                "SEPARATOR",
                "...",
                "HIGHLIGHT",
                "FIELDS",
                1,
                "title",
                "TAGS",
                "<b>",
                "</b>",
                "SLOP",
                1,
                "TIMEOUT",
                500,
                "INORDER",
                "LANGUAGE",
                "english",
                "EXPANDER",
                "SYNONYM",
                "SCORER",
                "BM25",
                "INKEYS",
                2,
                "a:1",
                "a:2",
                "INFIELDS",
                1,
                "title",
                "EXPLAINSCORE",
                "SORTBY",
                "age",
                "DESC",
                "LIMIT",
                20,
                5,
                "PARAMS",
                1,
                "lo",
                18,
                "DIALECT",
                3,
            ],
        )

    def test_explain_score_requires_scores(self) -> None:
        options = QueryOptions(explain_score=True)

        self.assertNotIn("EXPLAINSCORE", options.serialize())
        self.assertFalse(options.explains_scores())

    def test_limit_and_dialect_defaults_are_omitted(self) -> None:
        cases = [
            ("default_limit", QueryOptions(limit=Limit(0, 10)), []),
            ("no_limit", QueryOptions(limit=None), []),
            ("zero_num", QueryOptions(limit=Limit(0, 0)), ["LIMIT", 0, 0]),
            ("dialect_two", QueryOptions(dialect=2), []),
            ("dialect_one", QueryOptions(dialect=1), ["DIALECT", 1]),
            ("zero_timeout", QueryOptions(timeout=0), []),
            ("zero_slop", QueryOptions(slop=0), ["SLOP", 0]),
        ]
        for name, options, expected in cases:
            with self.subTest(name=name):
                self.assertEqual(options.serialize(), expected)

    def test_filters_format_numbers_and_pass_strings_through(self) -> None:
        self.assertEqual(
            QueryFilter("price", 10, "(100").serialize(),
            ["FILTER", "price", "10.000000", "(100"],
        )
        self.assertEqual(
            QueryFilter.unbounded("price").serialize(),
            ["FILTER", "price", "-inf", "+inf"],
        )

    def test_summarize_and_highlight_without_optional_parts(self) -> None:
        self.assertEqual(QuerySummarize().serialize(), ["SUMMARIZE"])
        self.assertEqual(QueryHighlight().serialize(), ["HIGHLIGHT"])

    def test_result_size_for_all_content_and_score_combinations(self) -> None:
        cases = [
            (False, False, 2),
            (False, True, 3),
            (True, False, 1),
            (True, True, 2),
        ]
        for no_content, with_scores, expected in cases:
            with self.subTest(no_content=no_content, with_scores=with_scores):
                options = QueryOptions(no_content=no_content, with_scores=with_scores)
                self.assertEqual(options.result_size(), expected)

    def test_payloads_and_sort_keys_do_not_change_result_size(self) -> None:
        options = QueryOptions(with_payloads=True, with_sort_keys=True)

        self.assertEqual(options.result_size(), 2)


class QueryBuilderTests(unittest.TestCase):
    def test_empty_builder_matches_defaults(self) -> None:
        self.assertEqual(QueryBuilder().options(), QueryOptions())

    def test_builder_populates_options(self) -> None:
        options = (
            QueryBuilder()
            .no_content()
            .with_scores()
            .explain_score()
            .limit(10, 50)
            .return_field("name", "n")
            .filter("age", 18, "+inf")
            .geo_filter("loc", 1.0, 2.0, 5, "mi")
            .in_keys(["a", "b"])
            .in_field("title")
            .sort_by("age")
            .descending()
            .slop(2)
            .param("lo", 1)
            .params({"hi": 2})
            .dialect(3)
            .options()
        )

        self.assertTrue(options.no_content)
        self.assertTrue(options.explains_scores())
        self.assertEqual(options.limit, Limit(10, 50))
        self.assertEqual(options.return_fields, [QueryReturn("name", "n")])
        self.assertEqual(options.filters, [QueryFilter("age", 18, "+inf")])
        self.assertEqual(options.geo_filters, [GeoFilter("loc", 1.0, 2.0, 5, "mi")])
        self.assertEqual(options.in_keys, ["a", "b"])
        self.assertEqual(options.in_fields, ["title"])
        self.assertEqual((options.sort_by, options.sort_order), ("age", "DESC"))
        self.assertEqual(options.slop, 2)
        self.assertEqual(options.params, {"lo": 1, "hi": 2})
        self.assertEqual(options.dialect, 3)

    def test_builder_summarize_and_highlight(self) -> None:
        options = (
            QueryBuilder()
            .summarize(["body"], separator="|", length=10, frags=2)
            .highlight(["title"], "[", "]")
            .options()
        )

        self.assertEqual(
            options.serialize(),
            [
                "SUMMARIZE",
                "FIELDS",
                1,
                "body",
                "FRAGS",
                2,
                "LEN",
                10,
                "SEPARATOR",
                "|",
                "HIGHLIGHT",
                "FIELDS",
                1,
                "title",
                "TAGS",
                "[",
                "]",
            ],
        )


if __name__ == "__main__":
    unittest.main()
