import unittest
from datetime import date, datetime, timezone

from fastapi.testclient import TestClient

from temerio.app import create_app
from temerio.auth import AuthenticatedUser, InMemoryAuthProvider
from temerio.billing import ActiveSubscription, InMemoryBillingClient
from temerio.config import get_settings
from temerio.db import InMemoryDbClient, MomentRecord
from temerio.dependencies import get_auth_provider, get_billing_client, get_db_client
from temerio.pairing import PAIRING_ALPHABET

ALICE = {"Authorization": "Bearer alice-token"}
BOB = {"Authorization": "Bearer bob-token"}


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.auth = InMemoryAuthProvider()
        self.billing = InMemoryBillingClient()
        self.auth.register(
            "alice-token",
            AuthenticatedUser(id="alice", email="alice@example.com"),
        )
        self.auth.register(
            "bob-token",
            AuthenticatedUser(id="bob", email="bob@example.com", display_name="Bob"),
        )

        app = create_app()
        app.dependency_overrides[get_db_client] = lambda: self.db
        app.dependency_overrides[get_auth_provider] = lambda: self.auth
        app.dependency_overrides[get_billing_client] = lambda: self.billing
        self.client = TestClient(app)

    def _merged_pair(self, user_id="alice"):
        primary = self.db.create_person(user_id, "Ann")
        merged = self.db.create_person(user_id, "Annie")
        self.db.create_moment(
            MomentRecord(
                user_id=user_id,
                person_id=merged.id,
                date_start=date(2024, 5, 1),
                headline_en="Graduation",
            )
        )
        response = self.client.post(
            "/api/sync-merge-local-people",
            json={"primary_person_id": primary.id, "merged_person_id": merged.id},
            headers=ALICE,
        )
        self.assertEqual(response.status_code, 200)
        return primary, merged, response.json()["merge_log_id"]

    def test_healthz_needs_no_auth(self):
        response = self.client.get("/api/healthz")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_missing_or_unknown_bearer_is_unauthorized(self):
        for headers in ({}, {"Authorization": "Basic abc"}, {"Authorization": "Bearer nope"}):
            response = self.client.post("/api/create-pairing-code", headers=headers)
            self.assertEqual(response.status_code, 401)
            self.assertEqual(response.json(), {"error": "Unauthorized"})
        self.assertEqual(self.db.pairing_codes, {})

    def test_merge_moves_moments_and_logs(self):
        primary, merged, log_id = self._merged_pair()

        self.assertEqual(self.db.get_person(merged.id).merged_into_person_id, primary.id)
        self.assertIsNotNone(self.db.get_person(merged.id).deleted_at)
        moments = self.db.list_moments("alice")
        self.assertEqual([m.person_id for m in moments], [primary.id])
        self.assertEqual(self.db.get_merge_log(log_id).merge_payload["moments_moved"], 1)

    def test_merge_validation_and_ownership(self):
        person = self.db.create_person("alice", "Ann")
        other = self.db.create_person("bob", "Bo")

        response = self.client.post(
            "/api/sync-merge-local-people",
            json={"primary_person_id": person.id},
            headers=ALICE,
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/api/sync-merge-local-people",
            json={"primary_person_id": person.id, "merged_person_id": person.id},
            headers=ALICE,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Cannot merge a person with themselves")

        response = self.client.post(
            "/api/sync-merge-local-people",
            json={"primary_person_id": person.id, "merged_person_id": other.id},
            headers=ALICE,
        )
        self.assertEqual(response.status_code, 404)
        self.assertIsNone(self.db.get_person(other.id).merged_into_person_id)

    def test_undo_merge_succeeds_once(self):
        primary, merged, log_id = self._merged_pair()

        first = self.client.post(
            "/api/sync-undo-merge", json={"merge_log_id": log_id}, headers=ALICE
        )
        self.assertEqual(first.status_code, 200)
        body = first.json()
        self.assertTrue(body["success"])
        self.assertIn("best-effort", body["message"])
        self.assertIn("manually reassign", body["message"])

        restored = self.db.get_person(merged.id)
        self.assertIsNone(restored.merged_into_person_id)
        self.assertIsNone(restored.deleted_at)
        # Moments stay with the primary person.
        self.assertEqual(self.db.list_moments("alice")[0].person_id, primary.id)

        second = self.client.post(
            "/api/sync-undo-merge", json={"merge_log_id": log_id}, headers=ALICE
        )
        self.assertEqual(second.status_code, 404)
        self.assertEqual(second.json()["error"], "Merge log not found or already undone")

    def test_undo_merge_without_bearer_touches_nothing(self):
        _, merged, log_id = self._merged_pair()

        response = self.client.post("/api/sync-undo-merge", json={"merge_log_id": log_id})
        self.assertEqual(response.status_code, 401)
        self.assertIsNone(self.db.get_merge_log(log_id).undone_at)
        self.assertIsNotNone(self.db.get_person(merged.id).merged_into_person_id)

    def test_undo_merge_requires_log_id(self):
        response = self.client.post("/api/sync-undo-merge", json={}, headers=ALICE)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "merge_log_id is required")

    def test_malformed_body_is_a_400_error(self):
        _, merged, log_id = self._merged_pair()

        for path in ("/api/sync-undo-merge", "/api/sync-merge-local-people"):
            response = self.client.post(path, headers=ALICE)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(list(response.json()), ["error"])

        response = self.client.post(
            "/api/sync-undo-merge", json={"merge_log_id": 5}, headers=ALICE
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("merge_log_id", response.json()["error"])
        self.assertIsNone(self.db.get_merge_log(log_id).undone_at)
        self.assertIsNotNone(self.db.get_person(merged.id).merged_into_person_id)

    def test_error_body_is_documented(self):
        schema = self.client.get("/openapi.json").json()
        responses = schema["paths"]["/api/sync-undo-merge"]["post"]["responses"]
        for status in ("400", "401", "404"):
            ref = responses[status]["content"]["application/json"]["schema"]["$ref"]
            self.assertTrue(ref.endswith("/ErrorResponse"))

    def test_invalid_query_is_a_400_error(self):
        response = self.client.get("/api/activity-events?limit=0", headers=ALICE)
        self.assertEqual(response.status_code, 400)
        self.assertIn("limit", response.json()["error"])

    def test_undo_merge_of_another_users_log_is_not_found(self):
        _, merged, log_id = self._merged_pair()

        response = self.client.post(
            "/api/sync-undo-merge", json={"merge_log_id": log_id}, headers=BOB
        )
        self.assertEqual(response.status_code, 404)
        self.assertIsNotNone(self.db.get_person(merged.id).merged_into_person_id)

    def test_create_pairing_code(self):
        response = self.client.post("/api/create-pairing-code", headers=ALICE)
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(len(payload["code"]), 6)
        self.assertTrue(all(ch in PAIRING_ALPHABET for ch in payload["code"]))
        self.assertIn("expires_at", payload)

        (stored,) = self.db.pairing_codes.values()
        self.assertEqual(stored.user_id, "alice")
        self.assertEqual(stored.code, payload["code"])

    def test_first_run_seed_is_idempotent(self):
        first = self.client.post("/api/first-run-seed", headers=BOB)
        self.assertEqual(first.status_code, 200)
        self.assertTrue(first.json()["created_person"])
        self.assertTrue(first.json()["created_moment"])

        second = self.client.post("/api/first-run-seed", headers=BOB)
        self.assertEqual(second.status_code, 200)
        self.assertFalse(second.json()["created_person"])
        self.assertFalse(second.json()["created_moment"])

        self.assertEqual(self.db.count_people("bob"), 1)
        self.assertEqual(self.db.count_moments("bob"), 1)
        person = self.db.find_person_by_label("bob", "Self")
        self.assertEqual(person.name, "Bob")

    def test_activity_events_roundtrip(self):
        response = self.client.post(
            "/api/activity-events",
            json={
                "events": [
                    {"action": "created", "item_type": "moment", "item_id": "m1"},
                    {"action": "viewed", "item_type": "timeline"},
                ]
            },
            headers=ALICE,
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), {"inserted": 2})
        self.assertTrue(all(e.actor_id == "alice" for e in self.db.activity_events))

        feed = self.client.get("/api/activity-events", headers=ALICE)
        self.assertEqual(feed.status_code, 200)
        self.assertEqual(len(feed.json()["events"]), 2)

        other_feed = self.client.get("/api/activity-events", headers=BOB)
        self.assertEqual(other_feed.json()["events"], [])

    def test_check_subscription_bypass_role_skips_billing(self):
        self.db.set_user_role("alice", "premium_gift")

        response = self.client.post("/api/check-subscription", headers=ALICE)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "subscribed": True,
                "product_id": None,
                "subscription_end": None,
                "role": "premium_gift",
            },
        )
        self.assertEqual(self.billing.calls, 0)

    def test_check_subscription_with_active_subscription(self):
        self.db.set_user_role("alice", "free")
        self.billing.add_customer(
            "alice@example.com",
            ActiveSubscription(
                product_id="prod_TtyOJLXaidU0LM",
                current_period_end=datetime(2030, 1, 1, tzinfo=timezone.utc),
            ),
        )

        response = self.client.post("/api/check-subscription", headers=ALICE)
        payload = response.json()
        self.assertTrue(payload["subscribed"])
        self.assertEqual(payload["product_id"], "prod_TtyOJLXaidU0LM")
        self.assertTrue(payload["subscription_end"].startswith("2030-01-01"))
        self.assertEqual(self.db.get_user_role("alice"), "premium")

    def test_check_subscription_without_customer_resets_to_free(self):
        self.db.set_user_role("alice", "premium")

        response = self.client.post("/api/check-subscription", headers=ALICE)

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["subscribed"])
        self.assertEqual(self.db.get_user_role("alice"), "free")

    def test_check_subscription_without_role_records_free(self):
        response = self.client.post("/api/check-subscription", headers=ALICE)
        self.assertFalse(response.json()["subscribed"])
        self.assertEqual(self.db.get_user_role("alice"), "free")

    def test_check_subscription_lapsed_premium_drops_to_free(self):
        self.db.set_user_role("alice", "premium")
        self.billing.add_customer("alice@example.com")

        response = self.client.post("/api/check-subscription", headers=ALICE)

        self.assertFalse(response.json()["subscribed"])
        self.assertEqual(self.db.get_user_role("alice"), "free")

    def test_check_subscription_never_touches_gifted_role(self):
        self.db.set_user_role("alice", "premium_gift")
        self.billing.add_customer("alice@example.com")

        response = self.client.post("/api/check-subscription", headers=ALICE)

        self.assertTrue(response.json()["subscribed"])
        self.assertEqual(self.db.get_user_role("alice"), "premium_gift")
        self.assertEqual(self.billing.calls, 0)

    def test_create_checkout(self):
        price_id = get_settings().stripe_price_yearly
        response = self.client.post(
            "/api/create-checkout", json={"priceId": price_id}, headers=ALICE
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["url"].startswith(self.billing.base_url))
        self.assertEqual(self.billing.sessions[0]["price_id"], price_id)
        self.assertEqual(self.billing.sessions[0]["email"], "alice@example.com")

    def test_create_checkout_rejects_unknown_price(self):
        response = self.client.post(
            "/api/create-checkout", json={"priceId": "price_nope"}, headers=ALICE
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.billing.sessions, [])


if __name__ == "__main__":
    unittest.main()
