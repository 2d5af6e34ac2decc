"""Unit tests for store_ratings.services.query_builder: pagination, sort, where-clauses, combinators."""

import unittest
from datetime import UTC, datetime

from sqlalchemy import true
from sqlalchemy.sql.elements import BooleanClauseList, True_

from store_ratings.core.permissions import Role
from store_ratings.models import Rating, Store, User
from store_ratings.services.query_builder import (
    combine_and,
    combine_or,
    date_range,
    numeric_range,
    paginate,
    search_clause,
    sort,
    where_from_filters,
)
from tests.support import DatabaseTestCase


class TestPaginate(unittest.TestCase):
    """paginate(page, limit) -> skip=(page-1)*limit, take=limit."""

    def test_first_page_defaults(self) -> None:
        window = paginate()
        self.assertEqual((window.skip, window.take), (0, 10))

    def test_absent_values_fall_back_to_defaults(self) -> None:
        window = paginate(None, None)
        self.assertEqual((window.skip, window.take), (0, 10))

    def test_skip_formula_over_range(self) -> None:
        for page in (1, 2, 7, 50):
            for limit in (1, 10, 33, 100):
                window = paginate(page, limit)
                self.assertEqual(window.skip, (page - 1) * limit)
                self.assertEqual(window.take, limit)

    def test_slice_matches_window(self) -> None:
        rows = list(range(25))
        self.assertEqual(paginate(3, 10).slice(rows), [20, 21, 22, 23, 24])
        self.assertEqual(paginate(4, 10).slice(rows), [])


class TestSort(unittest.TestCase):
    columns = {"name": Store.name, "createdAt": Store.created_at}

    def test_no_field_gives_no_ordering(self) -> None:
        self.assertEqual(sort(self.columns, None), [])

    def test_unknown_field_is_ignored(self) -> None:
        self.assertEqual(sort(self.columns, "password"), [])

    def test_direction(self) -> None:
        (asc,) = sort(self.columns, "name")
        (desc,) = sort(self.columns, "createdAt", "desc")
        self.assertIn("ASC", str(asc))
        self.assertIn("stores.name", str(asc))
        self.assertIn("DESC", str(desc))
        self.assertIn("stores.created_at", str(desc))


class TestCombinators(unittest.TestCase):
    def test_empty_input_is_always_true(self) -> None:
        self.assertIsInstance(combine_and([]), True_)
        self.assertIsInstance(combine_or([None, true()]), True_)

    def test_single_clause_returned_unwrapped(self) -> None:
        clause = Store.name == "a"
        self.assertIs(combine_and([None, clause, true()]), clause)
        self.assertIs(combine_or([clause]), clause)

    def test_multiple_clauses_are_wrapped(self) -> None:
        a = Store.name == "a"
        b = Store.email == "b"
        combined_and = combine_and([a, None, b])
        combined_or = combine_or([a, b])
        self.assertIsInstance(combined_and, BooleanClauseList)
        self.assertEqual(len(combined_and.clauses), 2)
        self.assertIn(" AND ", str(combined_and))
        self.assertIn(" OR ", str(combined_or))

    def test_ranges_empty_without_bounds(self) -> None:
        self.assertIsNone(date_range(Rating.created_at))
        self.assertIsNone(numeric_range(Rating.rating))

    def test_ranges_are_inclusive(self) -> None:
        text = str(numeric_range(Rating.rating, 2, 4))
        self.assertIn("ratings.rating >=", text)
        self.assertIn("ratings.rating <=", text)
        one_sided = date_range(Rating.created_at, start=datetime(2025, 1, 1, tzinfo=UTC))
        self.assertIn(">=", str(one_sided))
        self.assertNotIn("<=", str(one_sided))


class TestWhereClausesAgainstDatabase(DatabaseTestCase):
    """Filters evaluated by SQLite: substring matches ignore case, enum fields match exactly."""

    def setUp(self) -> None:
        super().setUp()
        self.make_user("alice@mail.dev", name="Alice Walker")
        self.make_user("bob@mail.dev", name="Bob Alison", role=Role.STORE_OWNER)
        self.make_user("carol@corp.dev", name="Carol King", role=Role.SYSTEM_ADMIN)

    def _names(self, clause) -> list[str]:
        return sorted(u.name for u in self.db.query(User).filter(clause).all())

    def test_absent_filters_match_everything(self) -> None:
        clause = where_from_filters(User, {"name": None, "email": ""}, text_fields=("name", "email"))
        self.assertEqual(len(self._names(clause)), 3)

    def test_text_filter_is_case_insensitive_substring(self) -> None:
        clause = where_from_filters(User, {"name": "ALI"}, text_fields=("name", "email"))
        self.assertEqual(self._names(clause), ["Alice Walker", "Bob Alison"])

    def test_filters_are_conjunctive(self) -> None:
        clause = where_from_filters(
            User,
            {"name": "ali", "role": Role.STORE_OWNER.value},
            text_fields=("name",),
            exact_fields=("role",),
        )
        self.assertEqual(self._names(clause), ["Bob Alison"])

    def test_search_clause_is_disjunctive(self) -> None:
        clause = search_clause(User, "corp", ("name", "email"))
        self.assertEqual(self._names(clause), ["Carol King"])


if __name__ == "__main__":
    unittest.main()
