"""
Database abstraction for Postgres and an in-memory test implementation.

Both clients expose the same small set of single-purpose reads and writes.
Multi-step workflows (merge, undo-merge, first-run seeding) are composed from
these calls by the service modules, so each write commits on its own.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Dict, Iterable, Optional, Protocol

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    String,
    create_engine,
    func,
    select,
    update,
)
from sqlalchemy.orm import Session, declarative_base, sessionmaker


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class DbClient(Protocol):
    """Interface for database access."""

    # people
    def count_people(self, user_id: str) -> int:
        ...

    def find_person_by_label(
        self, user_id: str, relationship_label: str
    ) -> Optional["PersonRecord"]:
        ...

    def create_person(
        self, user_id: str, name: str, relationship_label: Optional[str] = None
    ) -> "PersonRecord":
        ...

    def get_person(self, person_id: str) -> Optional["PersonRecord"]:
        ...

    def get_people(
        self, user_id: str, person_ids: Iterable[str]
    ) -> list["PersonRecord"]:
        ...

    def mark_person_merged(self, person_id: str, primary_person_id: str) -> None:
        ...

    def restore_person(self, person_id: str) -> None:
        ...

    # moments
    def count_moments(self, user_id: str) -> int:
        ...

    def create_moment(self, moment: "MomentRecord") -> "MomentRecord":
        ...

    def list_moments(self, user_id: str) -> list["MomentRecord"]:
        ...

    def repoint_moments(
        self, user_id: str, from_person_id: str, to_person_id: str
    ) -> list[str]:
        ...

    # moment participants
    def add_participant(self, moment_id: str, person_id: str) -> None:
        ...

    def list_participant_moment_ids(self, person_id: str) -> list[str]:
        ...

    def move_participant(
        self, moment_id: str, from_person_id: str, to_person_id: str
    ) -> None:
        ...

    def delete_participant(self, moment_id: str, person_id: str) -> None:
        ...

    # merge log
    def create_merge_log(
        self,
        user_id: str,
        primary_id: str,
        merged_id: str,
        merge_payload: dict,
        entity_type: str = "person",
    ) -> "MergeLogRecord":
        ...

    def get_merge_log(self, log_id: str) -> Optional["MergeLogRecord"]:
        ...

    def get_open_merge_log(
        self, log_id: str, user_id: str
    ) -> Optional["MergeLogRecord"]:
        ...

    def mark_merge_log_undone(self, log_id: str) -> bool:
        """Set ``undone_at`` if still open. Returns False if already undone."""
        ...

    # pairing codes
    def create_pairing_code(
        self, user_id: str, code: str, expires_at: datetime
    ) -> "PairingCodeRecord":
        ...

    # roles
    def get_user_role(self, user_id: str) -> Optional[str]:
        ...

    def set_user_role(self, user_id: str, role: str) -> None:
        ...

    # activity
    def insert_activity_events(self, events: list["ActivityEventRecord"]) -> int:
        ...

    def list_activity_events(
        self, actor_id: str, limit: int = 50
    ) -> list["ActivityEventRecord"]:
        ...


@dataclass
class PersonRecord:
    id: str
    user_id: str
    name: str
    relationship_label: Optional[str] = None
    person_uid: str = field(default_factory=new_id)
    deleted_at: Optional[datetime] = None
    merged_into_person_id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "relationship_label": self.relationship_label,
            "person_uid": self.person_uid,
            "deleted_at": self.deleted_at,
            "merged_into_person_id": self.merged_into_person_id,
        }


@dataclass
class MomentRecord:
    user_id: str
    date_start: date
    headline_en: str
    id: str = field(default_factory=new_id)
    person_id: Optional[str] = None
    description_en: Optional[str] = None
    status: str = "past_fact"
    confidence_date: int = 0
    confidence_truth: int = 0
    importance: int = 0
    source: str = "manual"
    verified: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass
class MergeLogRecord:
    id: str
    user_id: str
    primary_id: str
    merged_id: str
    merge_payload: dict
    entity_type: str = "person"
    created_at: datetime = field(default_factory=utcnow)
    undone_at: Optional[datetime] = None


@dataclass
class PairingCodeRecord:
    id: str
    user_id: str
    code: str
    expires_at: datetime
    consumed_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class ActivityEventRecord:
    actor_id: str
    action: str
    item_type: str
    item_id: Optional[str] = None
    metadata: dict = field(default_factory=dict)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "actor_id": self.actor_id,
            "action": self.action,
            "item_type": self.item_type,
            "item_id": self.item_id,
            "metadata": self.metadata,
            "created_at": self.created_at,
        }


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.people: Dict[str, PersonRecord] = {}
        self.moments: Dict[str, MomentRecord] = {}
        self.participants: list[tuple[str, str]] = []
        self.merge_logs: Dict[str, MergeLogRecord] = {}
        self.pairing_codes: Dict[str, PairingCodeRecord] = {}
        self.roles: Dict[str, str] = {}
        self.activity_events: list[ActivityEventRecord] = []

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.people.clear()
        self.moments.clear()
        self.participants.clear()
        self.merge_logs.clear()
        self.pairing_codes.clear()
        self.roles.clear()
        self.activity_events.clear()

    def count_people(self, user_id: str) -> int:
        return sum(1 for p in self.people.values() if p.user_id == user_id)

    def find_person_by_label(
        self, user_id: str, relationship_label: str
    ) -> Optional[PersonRecord]:
        for person in self.people.values():
            if (
                person.user_id == user_id
                and person.relationship_label == relationship_label
            ):
                return person
        return None

    def create_person(
        self, user_id: str, name: str, relationship_label: Optional[str] = None
    ) -> PersonRecord:
        record = PersonRecord(
            id=new_id(),
            user_id=user_id,
            name=name,
            relationship_label=relationship_label,
        )
        self.people[record.id] = record
        return record

    def get_person(self, person_id: str) -> Optional[PersonRecord]:
        return self.people.get(person_id)

    def get_people(
        self, user_id: str, person_ids: Iterable[str]
    ) -> list[PersonRecord]:
        wanted = set(person_ids)
        return [
            p for p in self.people.values() if p.id in wanted and p.user_id == user_id
        ]

    def mark_person_merged(self, person_id: str, primary_person_id: str) -> None:
        person = self.people.get(person_id)
        if not person:
            return
        now = utcnow()
        person.merged_into_person_id = primary_person_id
        person.deleted_at = now
        person.updated_at = now

    def restore_person(self, person_id: str) -> None:
        person = self.people.get(person_id)
        if not person:
            return
        person.merged_into_person_id = None
        person.deleted_at = None
        person.updated_at = utcnow()

    def count_moments(self, user_id: str) -> int:
        return sum(1 for m in self.moments.values() if m.user_id == user_id)

    def create_moment(self, moment: MomentRecord) -> MomentRecord:
        stored = replace(moment)
        self.moments[stored.id] = stored
        return stored

    def list_moments(self, user_id: str) -> list[MomentRecord]:
        return [m for m in self.moments.values() if m.user_id == user_id]

    def repoint_moments(
        self, user_id: str, from_person_id: str, to_person_id: str
    ) -> list[str]:
        moved: list[str] = []
        now = utcnow()
        for moment in self.moments.values():
            if moment.user_id == user_id and moment.person_id == from_person_id:
                moment.person_id = to_person_id
                moment.updated_at = now
                moved.append(moment.id)
        return moved

    def add_participant(self, moment_id: str, person_id: str) -> None:
        if (moment_id, person_id) not in self.participants:
            self.participants.append((moment_id, person_id))

    def list_participant_moment_ids(self, person_id: str) -> list[str]:
        return [m for m, p in self.participants if p == person_id]

    def move_participant(
        self, moment_id: str, from_person_id: str, to_person_id: str
    ) -> None:
        self.participants = [
            (m, to_person_id) if (m, p) == (moment_id, from_person_id) else (m, p)
            for m, p in self.participants
        ]

    def delete_participant(self, moment_id: str, person_id: str) -> None:
        self.participants = [
            pair for pair in self.participants if pair != (moment_id, person_id)
        ]

    def create_merge_log(
        self,
        user_id: str,
        primary_id: str,
        merged_id: str,
        merge_payload: dict,
        entity_type: str = "person",
    ) -> MergeLogRecord:
        record = MergeLogRecord(
            id=new_id(),
            user_id=user_id,
            primary_id=primary_id,
            merged_id=merged_id,
            merge_payload=dict(merge_payload),
            entity_type=entity_type,
        )
        self.merge_logs[record.id] = record
        return record

    def get_merge_log(self, log_id: str) -> Optional[MergeLogRecord]:
        return self.merge_logs.get(log_id)

    def get_open_merge_log(
        self, log_id: str, user_id: str
    ) -> Optional[MergeLogRecord]:
        log = self.merge_logs.get(log_id)
        if log and log.user_id == user_id and log.undone_at is None:
            return log
        return None

    def mark_merge_log_undone(self, log_id: str) -> bool:
        log = self.merge_logs.get(log_id)
        if not log or log.undone_at is not None:
            return False
        log.undone_at = utcnow()
        return True

    def create_pairing_code(
        self, user_id: str, code: str, expires_at: datetime
    ) -> PairingCodeRecord:
        if any(existing.code == code for existing in self.pairing_codes.values()):
            raise ValueError(f"Pairing code {code} already exists")
        record = PairingCodeRecord(
            id=new_id(), user_id=user_id, code=code, expires_at=expires_at
        )
        self.pairing_codes[record.id] = record
        return record

    def get_user_role(self, user_id: str) -> Optional[str]:
        return self.roles.get(user_id)

    def set_user_role(self, user_id: str, role: str) -> None:
        self.roles[user_id] = role

    def insert_activity_events(self, events: list[ActivityEventRecord]) -> int:
        self.activity_events.extend(events)
        return len(events)

    def list_activity_events(
        self, actor_id: str, limit: int = 50
    ) -> list[ActivityEventRecord]:
        mine = [e for e in self.activity_events if e.actor_id == actor_id]
        mine.sort(key=lambda e: e.created_at, reverse=True)
        return mine[:limit]


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_person(row: "PersonRow") -> PersonRecord:
        return PersonRecord(
            id=row.id,
            user_id=row.user_id,
            name=row.name,
            relationship_label=row.relationship_label,
            person_uid=row.person_uid,
            deleted_at=row.deleted_at,
            merged_into_person_id=row.merged_into_person_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _to_moment(row: "MomentRow") -> MomentRecord:
        return MomentRecord(
            id=row.id,
            user_id=row.user_id,
            person_id=row.person_id,
            date_start=row.date_start,
            headline_en=row.headline_en,
            description_en=row.description_en,
            status=row.status,
            confidence_date=row.confidence_date,
            confidence_truth=row.confidence_truth,
            importance=row.importance,
            source=row.source,
            verified=row.verified,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _to_merge_log(row: "MergeLogRow") -> MergeLogRecord:
        return MergeLogRecord(
            id=row.id,
            user_id=row.user_id,
            primary_id=row.primary_id,
            merged_id=row.merged_id,
            merge_payload=row.merge_payload or {},
            entity_type=row.entity_type,
            created_at=row.created_at,
            undone_at=row.undone_at,
        )

    @staticmethod
    def _to_activity(row: "ActivityEventRow") -> ActivityEventRecord:
        return ActivityEventRecord(
            id=row.id,
            actor_id=row.actor_id,
            action=row.action,
            item_type=row.item_type,
            item_id=row.item_id,
            metadata=row.event_metadata or {},
            created_at=row.created_at,
        )

    def count_people(self, user_id: str) -> int:
        with self.Session() as session:
            stmt = select(func.count(PersonRow.id)).where(PersonRow.user_id == user_id)
            return session.execute(stmt).scalar_one()

    def find_person_by_label(
        self, user_id: str, relationship_label: str
    ) -> Optional[PersonRecord]:
        with self.Session() as session:
            stmt = (
                select(PersonRow)
                .where(
                    PersonRow.user_id == user_id,
                    PersonRow.relationship_label == relationship_label,
                )
                .order_by(PersonRow.created_at.asc())
                .limit(1)
            )
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_person(row) if row else None

    def create_person(
        self, user_id: str, name: str, relationship_label: Optional[str] = None
    ) -> PersonRecord:
        now = utcnow()
        with self.Session() as session:
            row = PersonRow(
                id=new_id(),
                user_id=user_id,
                name=name,
                relationship_label=relationship_label,
                person_uid=new_id(),
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            return self._to_person(row)

    def get_person(self, person_id: str) -> Optional[PersonRecord]:
        with self.Session() as session:
            row = session.get(PersonRow, person_id)
            return self._to_person(row) if row else None

    def get_people(
        self, user_id: str, person_ids: Iterable[str]
    ) -> list[PersonRecord]:
        ids = list(person_ids)
        with self.Session() as session:
            stmt = select(PersonRow).where(
                PersonRow.user_id == user_id, PersonRow.id.in_(ids)
            )
            return [self._to_person(row) for row in session.execute(stmt).scalars()]

    def mark_person_merged(self, person_id: str, primary_person_id: str) -> None:
        with self.Session() as session:
            row = session.get(PersonRow, person_id)
            if not row:
                return
            now = utcnow()
            row.merged_into_person_id = primary_person_id
            row.deleted_at = now
            row.updated_at = now
            session.commit()

    def restore_person(self, person_id: str) -> None:
        with self.Session() as session:
            row = session.get(PersonRow, person_id)
            if not row:
                return
            row.merged_into_person_id = None
            row.deleted_at = None
            row.updated_at = utcnow()
            session.commit()

    def count_moments(self, user_id: str) -> int:
        with self.Session() as session:
            stmt = select(func.count(MomentRow.id)).where(MomentRow.user_id == user_id)
            return session.execute(stmt).scalar_one()

    def create_moment(self, moment: MomentRecord) -> MomentRecord:
        with self.Session() as session:
            row = MomentRow(
                id=moment.id,
                user_id=moment.user_id,
                person_id=moment.person_id,
                date_start=moment.date_start,
                headline_en=moment.headline_en,
                description_en=moment.description_en,
                status=moment.status,
                confidence_date=moment.confidence_date,
                confidence_truth=moment.confidence_truth,
                importance=moment.importance,
                source=moment.source,
                verified=moment.verified,
                created_at=moment.created_at,
                updated_at=moment.updated_at,
            )
            session.add(row)
            session.commit()
            return self._to_moment(row)

    def list_moments(self, user_id: str) -> list[MomentRecord]:
        with self.Session() as session:
            stmt = (
                select(MomentRow)
                .where(MomentRow.user_id == user_id)
                .order_by(MomentRow.date_start.asc())
            )
            return [self._to_moment(row) for row in session.execute(stmt).scalars()]

    def repoint_moments(
        self, user_id: str, from_person_id: str, to_person_id: str
    ) -> list[str]:
        with self.Session() as session:
            rows = (
                session.execute(
                    select(MomentRow).where(
                        MomentRow.user_id == user_id,
                        MomentRow.person_id == from_person_id,
                    )
                )
                .scalars()
                .all()
            )
            now = utcnow()
            for row in rows:
                row.person_id = to_person_id
                row.updated_at = now
            session.commit()
            return [row.id for row in rows]

    def add_participant(self, moment_id: str, person_id: str) -> None:
        with self.Session() as session:
            if session.get(MomentParticipantRow, (moment_id, person_id)):
                return
            session.add(MomentParticipantRow(moment_id=moment_id, person_id=person_id))
            session.commit()

    def list_participant_moment_ids(self, person_id: str) -> list[str]:
        with self.Session() as session:
            stmt = select(MomentParticipantRow.moment_id).where(
                MomentParticipantRow.person_id == person_id
            )
            return list(session.execute(stmt).scalars())

    def move_participant(
        self, moment_id: str, from_person_id: str, to_person_id: str
    ) -> None:
        with self.Session() as session:
            session.query(MomentParticipantRow).filter(
                MomentParticipantRow.moment_id == moment_id,
                MomentParticipantRow.person_id == from_person_id,
            ).update(
                {MomentParticipantRow.person_id: to_person_id},
                synchronize_session=False,
            )
            session.commit()

    def delete_participant(self, moment_id: str, person_id: str) -> None:
        with self.Session() as session:
            session.query(MomentParticipantRow).filter(
                MomentParticipantRow.moment_id == moment_id,
                MomentParticipantRow.person_id == person_id,
            ).delete(synchronize_session=False)
            session.commit()

    def create_merge_log(
        self,
        user_id: str,
        primary_id: str,
        merged_id: str,
        merge_payload: dict,
        entity_type: str = "person",
    ) -> MergeLogRecord:
        with self.Session() as session:
            row = MergeLogRow(
                id=new_id(),
                user_id=user_id,
                entity_type=entity_type,
                primary_id=primary_id,
                merged_id=merged_id,
                merge_payload=merge_payload,
                created_at=utcnow(),
                undone_at=None,
            )
            session.add(row)
            session.commit()
            return self._to_merge_log(row)

    def get_merge_log(self, log_id: str) -> Optional[MergeLogRecord]:
        with self.Session() as session:
            row = session.get(MergeLogRow, log_id)
            return self._to_merge_log(row) if row else None

    def get_open_merge_log(
        self, log_id: str, user_id: str
    ) -> Optional[MergeLogRecord]:
        with self.Session() as session:
            stmt = select(MergeLogRow).where(
                MergeLogRow.id == log_id,
                MergeLogRow.user_id == user_id,
                MergeLogRow.undone_at.is_(None),
            )
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_merge_log(row) if row else None

    def mark_merge_log_undone(self, log_id: str) -> bool:
        with self.Session() as session:
            result = session.execute(
                update(MergeLogRow)
                .where(MergeLogRow.id == log_id, MergeLogRow.undone_at.is_(None))
                .values(undone_at=utcnow())
            )
            session.commit()
            return result.rowcount == 1

    def create_pairing_code(
        self, user_id: str, code: str, expires_at: datetime
    ) -> PairingCodeRecord:
        record = PairingCodeRecord(
            id=new_id(), user_id=user_id, code=code, expires_at=expires_at
        )
        with self.Session() as session:
            session.add(
                PairingCodeRow(
                    id=record.id,
                    user_id=user_id,
                    code=code,
                    expires_at=expires_at,
                    consumed_at=None,
                    created_at=record.created_at,
                )
            )
            session.commit()
        return record

    def get_user_role(self, user_id: str) -> Optional[str]:
        with self.Session() as session:
            stmt = select(UserRoleRow.role).where(UserRoleRow.user_id == user_id).limit(1)
            return session.execute(stmt).scalar_one_or_none()

    def set_user_role(self, user_id: str, role: str) -> None:
        with self.Session() as session:
            row = session.execute(
                select(UserRoleRow).where(UserRoleRow.user_id == user_id)
            ).scalar_one_or_none()
            if row:
                row.role = role
            else:
                session.add(
                    UserRoleRow(
                        id=new_id(), user_id=user_id, role=role, created_at=utcnow()
                    )
                )
            session.commit()

    def insert_activity_events(self, events: list[ActivityEventRecord]) -> int:
        with self.Session() as session:
            session.add_all(
                ActivityEventRow(
                    id=event.id,
                    actor_id=event.actor_id,
                    action=event.action,
                    item_type=event.item_type,
                    item_id=event.item_id,
                    event_metadata=event.metadata,
                    created_at=event.created_at,
                )
                for event in events
            )
            session.commit()
        return len(events)

    def list_activity_events(
        self, actor_id: str, limit: int = 50
    ) -> list[ActivityEventRecord]:
        with self.Session() as session:
            stmt = (
                select(ActivityEventRow)
                .where(ActivityEventRow.actor_id == actor_id)
                .order_by(ActivityEventRow.created_at.desc())
                .limit(limit)
            )
            return [self._to_activity(row) for row in session.execute(stmt).scalars()]


Base = declarative_base()


class PersonRow(Base):
    __tablename__ = "people"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    relationship_label = Column(String, nullable=True)
    person_uid = Column(String, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    merged_into_person_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class MomentRow(Base):
    __tablename__ = "moments"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    person_id = Column(String, nullable=True, index=True)
    date_start = Column(Date, nullable=False)
    headline_en = Column(String, nullable=False)
    description_en = Column(String, nullable=True)
    status = Column(String, nullable=False, default="past_fact")
    confidence_date = Column(Integer, nullable=False, default=0)
    confidence_truth = Column(Integer, nullable=False, default=0)
    importance = Column(Integer, nullable=False, default=0)
    source = Column(String, nullable=False, default="manual")
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class MomentParticipantRow(Base):
    __tablename__ = "moment_participants"

    moment_id = Column(String, primary_key=True)
    person_id = Column(String, primary_key=True, index=True)


class MergeLogRow(Base):
    __tablename__ = "sync_merge_log"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    entity_type = Column(String, nullable=False, default="person")
    primary_id = Column(String, nullable=False)
    merged_id = Column(String, nullable=False)
    merge_payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    undone_at = Column(DateTime(timezone=True), nullable=True)


class PairingCodeRow(Base):
    __tablename__ = "sync_pairing_codes"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    code = Column(String(6), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    consumed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class UserRoleRow(Base):
    __tablename__ = "user_roles"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, unique=True)
    role = Column(String, nullable=False, default="free")
    created_at = Column(DateTime(timezone=True), nullable=False)


class ActivityEventRow(Base):
    __tablename__ = "activity_events"

    id = Column(String, primary_key=True)
    actor_id = Column(String, nullable=False, index=True)
    action = Column(String, nullable=False)
    item_type = Column(String, nullable=False)
    item_id = Column(String, nullable=True)
    event_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
