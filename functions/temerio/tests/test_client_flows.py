import unittest
from unittest.mock import MagicMock

import requests

from temerio.client.api import ApiResponse, InvokeResult
from temerio.client.checkout import start_checkout
from temerio.client.config import ClientConfig, UserSession
from temerio.client.notify import RecordingNotifier
from temerio.client.seeding import run_first_run_seed


class CheckoutTests(unittest.TestCase):
    def setUp(self):
        self.api = MagicMock()
        self.api.config = ClientConfig()
        self.notifier = RecordingNotifier()
        self.opened = []

    def _start(self, cycle):
        return start_checkout(
            self.api, cycle, notifier=self.notifier, opener=self.opened.append
        )

    def test_opens_checkout_url(self):
        self.api.call.return_value = ApiResponse(data={"url": "https://pay.test/cs_1"})

        url = self._start("monthly")

        self.assertEqual(url, "https://pay.test/cs_1")
        self.assertEqual(self.opened, ["https://pay.test/cs_1"])
        self.api.call.assert_called_once_with(
            "create-checkout",
            {"priceId": "price_1SwARkAiLddHHjhksog7rD13"},
            notify=False,
        )
        self.assertEqual(self.notifier.notifications, [])

    def test_missing_url_notifies_once(self):
        self.api.call.return_value = ApiResponse(data={})

        self.assertIsNone(self._start("yearly"))

        self.assertEqual(self.opened, [])
        self.assertEqual(len(self.notifier.notifications), 1)
        note = self.notifier.notifications[0]
        self.assertEqual(note.message, "Checkout failed")
        self.assertEqual(note.description, "No checkout URL returned")

    def test_non_object_payload_notifies_once(self):
        self.api.call.return_value = ApiResponse(data=["https://pay.test/cs_1"])

        self.assertIsNone(self._start("monthly"))

        self.assertEqual(self.opened, [])
        self.assertEqual(len(self.notifier.notifications), 1)
        self.assertEqual(
            self.notifier.notifications[0].description, "No checkout URL returned"
        )

    def test_remote_failure_notifies_once(self):
        self.api.call.return_value = ApiResponse(error="Service is under maintenance.")
        self.assertIsNone(self._start("monthly"))
        self.assertEqual(len(self.notifier.notifications), 1)
        self.assertEqual(
            self.notifier.notifications[0].description, "Service is under maintenance."
        )

    def test_unknown_cycle_never_calls_server(self):
        self.assertIsNone(self._start("weekly"))
        self.api.call.assert_not_called()
        self.assertEqual(len(self.notifier.notifications), 1)


class FirstRunSeedClientTests(unittest.TestCase):
    def setUp(self):
        self.api = MagicMock()
        self.api.invoke.return_value = InvokeResult(
            data={"created_person": True, "created_moment": True}, status=200
        )
        self.session = UserSession(user_id="u1", access_token="tok")

    def test_runs_once_per_session(self):
        first = run_first_run_seed(self.api, self.session)
        second = run_first_run_seed(self.api, self.session)

        self.assertTrue(first["created_person"])
        self.assertIsNone(second)
        self.assertTrue(self.session.seeded)
        self.api.invoke.assert_called_once_with("first-run-seed")

    def test_new_session_runs_again(self):
        run_first_run_seed(self.api, self.session)
        run_first_run_seed(self.api, UserSession(user_id="u1", access_token="tok2"))
        self.assertEqual(self.api.invoke.call_count, 2)

    def test_no_session_does_nothing(self):
        self.assertIsNone(run_first_run_seed(self.api, None))
        self.api.invoke.assert_not_called()

    def test_failures_are_swallowed(self):
        self.api.invoke.side_effect = requests.ConnectionError("offline")
        with self.assertLogs("temerio.client.seeding", level="WARNING"):
            self.assertIsNone(run_first_run_seed(self.api, self.session))

        session = UserSession(user_id="u1", access_token="tok")
        self.api.invoke.side_effect = None
        self.api.invoke.return_value = InvokeResult(error="Server error", status=500)
        with self.assertLogs("temerio.client.seeding", level="WARNING"):
            self.assertIsNone(run_first_run_seed(self.api, session))


if __name__ == "__main__":
    unittest.main()
