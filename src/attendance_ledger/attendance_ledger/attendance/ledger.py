from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterator, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import as_utc, now_utc
from ..common.validators import optional_datetime, require_status, require_storable_time, require_user_id
from ..core.constants import DEFAULT_FUTURE_SKEW_TOLERANCE_SECONDS, DEFAULT_OUT_OF_ORDER_TOLERANCE_SECONDS
from ..core.enums import CurrentStatus, PresenceStatus
from ..core.exceptions import FutureTimestamp, InvalidTransition, StaleEvent, StorageUnavailable, ValidationError
from .locks import UserLockRegistry
from .model import AttendanceEvent
from .repository import EventRepository

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerConfig:
    out_of_order_tolerance: timedelta = timedelta(seconds=DEFAULT_OUT_OF_ORDER_TOLERANCE_SECONDS)
    future_skew_tolerance: timedelta = timedelta(seconds=DEFAULT_FUTURE_SKEW_TOLERANCE_SECONDS)

    def __post_init__(self):
        if self.out_of_order_tolerance < timedelta(0):
            raise ValueError("out_of_order_tolerance must not be negative")
        if self.future_skew_tolerance < timedelta(0):
            raise ValueError("future_skew_tolerance must not be negative")

    @classmethod
    def from_settings(cls, settings: Mapping[str, object]) -> "LedgerConfig":
        return cls(
            out_of_order_tolerance=timedelta(
                seconds=float(settings.get("OUT_OF_ORDER_TOLERANCE_SECONDS", DEFAULT_OUT_OF_ORDER_TOLERANCE_SECONDS))
            ),
            future_skew_tolerance=timedelta(
                seconds=float(settings.get("FUTURE_SKEW_TOLERANCE_SECONDS", DEFAULT_FUTURE_SKEW_TOLERANCE_SECONDS))
            ),
        )


class EventHistory:
    """Lazy view over a user's events in ``[from_time, to_time]``.

    Nothing is read until iteration starts and every new iteration reads the
    store again, so the same object can be iterated any number of times.
    """

    def __init__(
        self,
        events: EventRepository,
        user_id: str,
        from_time: Optional[datetime],
        to_time: Optional[datetime],
    ):
        self._events = events
        self.user_id = user_id
        self.from_time = from_time
        self.to_time = to_time

    def _load(self) -> Sequence[AttendanceEvent]:
        if self.from_time is not None and self.to_time is not None and self.from_time > self.to_time:
            return ()
        return self._events.load_range(self.user_id, self.from_time, self.to_time)

    def __iter__(self) -> Iterator[AttendanceEvent]:
        return iter(self._load())

    def __len__(self) -> int:
        return len(self._load())

    def __getitem__(self, index):
        return self._load()[index]

    def __repr__(self) -> str:
        return f"EventHistory(user_id={self.user_id!r}, from_time={self.from_time!r}, to_time={self.to_time!r})"


class AttendanceLedger:
    """Owns the IN/OUT event timeline of every user.

    Accepted events of one user, ordered by ``(timestamp, sequence)``, always
    alternate IN, OUT, IN, ... starting with IN. The check and the append for a
    user run under that user's lock; different users never share a lock.
    """

    def __init__(
        self,
        events: EventRepository,
        *,
        config: LedgerConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        locks: UserLockRegistry | None = None,
    ):
        self._events = events
        self._config = config or LedgerConfig()
        self._clock = clock or now_utc
        self._locks = locks or UserLockRegistry()

    @property
    def config(self) -> LedgerConfig:
        return self._config

    def record_event(
        self,
        user_id: str,
        status: Union[PresenceStatus, str],
        timestamp: Optional[datetime] = None,
    ) -> AttendanceEvent:
        user_id = require_user_id(user_id)
        status = require_status(status)
        timestamp = optional_datetime(timestamp, "timestamp")
        if timestamp is not None:
            require_storable_time(timestamp)

        now = as_utc(self._clock())
        if timestamp is None:
            timestamp = now
        elif timestamp > now + self._config.future_skew_tolerance:
            self._reject(
                FutureTimestamp(f"timestamp {timestamp.isoformat()} is ahead of ledger time {now.isoformat()}"),
                user_id,
                status,
                timestamp,
            )

        event = AttendanceEvent(user_id=user_id, timestamp=timestamp, status=status)

        with self._locks.hold(user_id):
            try:
                self._validate_position(event)
            except ValidationError as e:
                self._reject(e, user_id, status, timestamp)

            try:
                stored = self._events.append(event)
            except StorageUnavailable:
                _LOGGER.error("Storage unavailable while appending %s for user %s", status.value, user_id)
                raise

        _LOGGER.info(
            "Recorded %s for user %s at %s (event_id=%s)",
            stored.status.value,
            stored.user_id,
            stored.timestamp.isoformat(),
            stored.event_id,
        )
        return stored

    def current_status(self, user_id: str) -> CurrentStatus:
        user_id = require_user_id(user_id)
        latest = self._events.load_latest(user_id)
        if latest is None:
            return CurrentStatus.NONE
        return CurrentStatus(latest.status.value)

    def history(
        self,
        user_id: str,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> EventHistory:
        user_id = require_user_id(user_id)
        return EventHistory(
            self._events,
            user_id,
            optional_datetime(from_time, "from_time"),
            optional_datetime(to_time, "to_time"),
        )

    def _validate_position(self, event: AttendanceEvent) -> None:
        """Check the event against its logical neighbours in the user's timeline.

        Alternation against both neighbours is checked before the out-of-order
        tolerance, so in a timeline that already alternates any insert strictly
        inside it fails with InvalidTransition. StaleEvent is raised for events
        that fit between non-alternating neighbours, e.g. history imported
        before alternation was enforced.

        Must be called while holding the user's lock.
        """
        latest = self._events.load_latest(event.user_id)
        if latest is None:
            if event.status is not PresenceStatus.IN:
                raise InvalidTransition("first event of a user must be IN")
            return

        if event.timestamp >= latest.timestamp:
            # Tail append: a new event sorts after every stored one with the same timestamp.
            if event.status is latest.status:
                raise InvalidTransition(f"user is already {latest.status.value}")
            return

        predecessor = self._events.load_latest(event.user_id, until=event.timestamp)
        successor = next(
            (e for e in self._events.load_range(event.user_id, event.timestamp, None) if e.timestamp > event.timestamp),
            None,
        )

        if predecessor is None:
            if event.status is not PresenceStatus.IN:
                raise InvalidTransition("first event of a user must be IN")
        elif predecessor.status is event.status:
            raise InvalidTransition(
                f"previous event at {predecessor.timestamp.isoformat()} is already {predecessor.status.value}"
            )
        if successor is not None and successor.status is event.status:
            raise InvalidTransition(
                f"next event at {successor.timestamp.isoformat()} is also {successor.status.value}"
            )

        if latest.timestamp - event.timestamp > self._config.out_of_order_tolerance:
            raise StaleEvent(
                f"timestamp {event.timestamp.isoformat()} is behind the latest event "
                f"{latest.timestamp.isoformat()} by more than {self._config.out_of_order_tolerance}"
            )

    @staticmethod
    def _reject(error: ValidationError, user_id: str, status: PresenceStatus, timestamp: datetime):
        _LOGGER.warning(
            "Rejected %s for user %s at %s: %s (%s)",
            status.value,
            user_id,
            timestamp.isoformat(),
            error.code,
            error,
        )
        raise error
