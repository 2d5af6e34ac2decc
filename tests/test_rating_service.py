"""Tests for store_ratings.services.ratings: one rating per user per store, updates, lookups."""

import unittest

from store_ratings.core.errors import AuthorizationError, ConflictError, NotFoundError
from store_ratings.core.permissions import Role
from store_ratings.models import Rating
from store_ratings.schemas.ratings import RatingCreate, ReceivedRatingFilter
from store_ratings.services import ratings
from tests.support import DatabaseTestCase


class TestRatings(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.make_user("owner@mail.dev", role=Role.STORE_OWNER)
        self.store = self.make_store(self.owner)
        self.user = self.make_user("user@mail.dev", name="Una User")
        self.other = self.make_user("other@mail.dev")

    def test_submit_then_resubmit_conflicts(self) -> None:
        rating = ratings.submit_rating(self.db, self.user.id, RatingCreate(rating=4, store_id=self.store.id))
        self.assertEqual(rating.rating, 4)
        with self.assertRaises(ConflictError) as ctx:
            ratings.submit_rating(self.db, self.user.id, RatingCreate(rating=1, store_id=self.store.id))
        self.assertEqual(ctx.exception.message, ratings.ALREADY_RATED)
        db = self.reload()
        self.assertEqual(db.query(Rating).count(), 1)
        self.assertEqual(db.query(Rating).one().rating, 4)

    def test_submit_unknown_store(self) -> None:
        with self.assertRaises(NotFoundError):
            ratings.submit_rating(self.db, self.user.id, RatingCreate(rating=3, store_id="missing"))

    def test_update_own_rating(self) -> None:
        rating = self.make_rating(self.user, self.store, 4)
        updated = ratings.update_rating(self.db, self.user.id, rating.id, 2)
        self.assertEqual(updated.rating, 2)
        self.assertEqual(ratings.list_owner_store_ratings(self.db, self.owner.id).average_rating, 2.0)

    def test_update_someone_elses_rating(self) -> None:
        rating = self.make_rating(self.user, self.store, 4)
        with self.assertRaises(AuthorizationError):
            ratings.update_rating(self.db, self.other.id, rating.id, 1)
        self.assertEqual(self.reload().get(Rating, rating.id).rating, 4)

    def test_update_missing_rating(self) -> None:
        with self.assertRaises(NotFoundError):
            ratings.update_rating(self.db, self.user.id, "missing", 3)

    def test_lookups(self) -> None:
        self.assertIsNone(ratings.get_user_store_rating(self.db, self.user.id, self.store.id))
        self.make_rating(self.user, self.store, 5)
        self.make_rating(self.other, self.store, 4)
        mine = ratings.list_user_ratings(self.db, self.user.id)
        self.assertEqual([(r.rating, r.store.name) for r in mine], [(5, "Corner Shop")])
        self.assertEqual(ratings.get_user_store_rating(self.db, self.user.id, self.store.id).rating, 5)
        received = ratings.list_owner_store_ratings(self.db, self.owner.id)
        self.assertEqual((received.average_rating, received.total_ratings), (4.5, 2))
        self.assertIn("Una User", {r.user.name for r in received.ratings})

    def test_owner_listing_filters_by_stars(self) -> None:
        self.make_rating(self.user, self.store, 5)
        self.make_rating(self.other, self.store, 2)
        received = ratings.list_owner_store_ratings(
            self.db, self.owner.id, ReceivedRatingFilter(min_rating=4)
        )
        self.assertEqual([r.rating for r in received.ratings], [5])
        self.assertEqual((received.average_rating, received.total_ratings), (3.5, 2))
        received = ratings.list_owner_store_ratings(
            self.db, self.owner.id, ReceivedRatingFilter(min_rating=2, max_rating=3)
        )
        self.assertEqual([r.rating for r in received.ratings], [2])


if __name__ == "__main__":
    unittest.main()
