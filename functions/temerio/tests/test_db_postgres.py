import unittest
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError

from temerio.db import ActivityEventRecord, MomentRecord, PostgresDbClient


class PostgresDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres client logic.
    """

    def setUp(self):
        self.db = PostgresDbClient("sqlite+pysqlite:///:memory:")

    def test_create_and_count_people(self):
        self.assertEqual(self.db.count_people("u1"), 0)
        person = self.db.create_person("u1", "Jane", relationship_label="Self")
        self.assertEqual(self.db.count_people("u1"), 1)
        self.assertEqual(self.db.count_people("u2"), 0)

        fetched = self.db.find_person_by_label("u1", "Self")
        self.assertEqual(fetched.id, person.id)
        self.assertIsNone(self.db.find_person_by_label("u2", "Self"))

    def test_get_people_is_scoped_to_user(self):
        mine = self.db.create_person("u1", "Ann")
        theirs = self.db.create_person("u2", "Bo")
        people = self.db.get_people("u1", [mine.id, theirs.id])
        self.assertEqual([p.id for p in people], [mine.id])

    def test_mark_merged_and_restore(self):
        primary = self.db.create_person("u1", "Ann")
        merged = self.db.create_person("u1", "Annie")

        self.db.mark_person_merged(merged.id, primary.id)
        absorbed = self.db.get_person(merged.id)
        self.assertEqual(absorbed.merged_into_person_id, primary.id)
        self.assertIsNotNone(absorbed.deleted_at)

        self.db.restore_person(merged.id)
        restored = self.db.get_person(merged.id)
        self.assertIsNone(restored.merged_into_person_id)
        self.assertIsNone(restored.deleted_at)

    def test_moments_and_participants(self):
        a = self.db.create_person("u1", "Ann")
        b = self.db.create_person("u1", "Bea")
        moment = self.db.create_moment(
            MomentRecord(
                user_id="u1",
                person_id=b.id,
                date_start=date(2021, 3, 4),
                headline_en="Moved house",
                confidence_date=7,
                verified=True,
            )
        )
        self.assertEqual(self.db.count_moments("u1"), 1)
        self.assertTrue(self.db.list_moments("u1")[0].verified)

        moved = self.db.repoint_moments("u1", b.id, a.id)
        self.assertEqual(moved, [moment.id])
        self.assertEqual(self.db.list_moments("u1")[0].person_id, a.id)

        self.db.add_participant(moment.id, b.id)
        self.db.add_participant(moment.id, b.id)
        self.assertEqual(self.db.list_participant_moment_ids(b.id), [moment.id])

        self.db.move_participant(moment.id, b.id, a.id)
        self.assertEqual(self.db.list_participant_moment_ids(b.id), [])
        self.assertEqual(self.db.list_participant_moment_ids(a.id), [moment.id])

        self.db.delete_participant(moment.id, a.id)
        self.assertEqual(self.db.list_participant_moment_ids(a.id), [])

    def test_merge_log_open_until_undone(self):
        log = self.db.create_merge_log("u1", "p1", "p2", {"merged_name": "Annie"})
        self.assertEqual(self.db.get_open_merge_log(log.id, "u1").merge_payload, {"merged_name": "Annie"})
        self.assertIsNone(self.db.get_open_merge_log(log.id, "u2"))

        self.assertTrue(self.db.mark_merge_log_undone(log.id))
        self.assertFalse(self.db.mark_merge_log_undone(log.id))
        self.assertIsNone(self.db.get_open_merge_log(log.id, "u1"))
        self.assertIsNotNone(self.db.get_merge_log(log.id).undone_at)

    def test_pairing_code_is_unique(self):
        expires = datetime.now(timezone.utc) + timedelta(minutes=10)
        record = self.db.create_pairing_code("u1", "ABC234", expires)
        self.assertEqual(record.code, "ABC234")
        with self.assertRaises(IntegrityError):
            self.db.create_pairing_code("u2", "ABC234", expires)

    def test_user_roles(self):
        self.assertIsNone(self.db.get_user_role("u1"))
        self.db.set_user_role("u1", "free")
        self.db.set_user_role("u1", "premium")
        self.assertEqual(self.db.get_user_role("u1"), "premium")

    def test_activity_events(self):
        inserted = self.db.insert_activity_events(
            [
                ActivityEventRecord(
                    actor_id="u1", action="created", item_type="moment", item_id="m1",
                    metadata={"source": "upload"},
                ),
                ActivityEventRecord(actor_id="u2", action="viewed", item_type="timeline"),
            ]
        )
        self.assertEqual(inserted, 2)
        events = self.db.list_activity_events("u1")
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].metadata, {"source": "upload"})
        self.assertEqual(events[0].item_id, "m1")


if __name__ == "__main__":
    unittest.main()
