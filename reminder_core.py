# reminder_core.py
import os
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional, Tuple

import tomli
import tomli_w
from croniter import croniter, CroniterError, CroniterBadDateError

logger = logging.getLogger("reminder_core")


# -----------------------------
# ERRORS
# -----------------------------
class ReminderError(Exception):
    """Base class for every failure the CLI reports to the user."""


class ConfigError(ReminderError):
    pass


class ScheduleParseError(ReminderError):
    pass


class ReminderIndexError(ReminderError):
    pass


class NotificationDeliveryError(ReminderError):
    pass


class RecurrenceExhausted(ReminderError):
    pass


# -----------------------------
# SCHEDULE
# -----------------------------
class CronSchedule:
    """A cron expression together with the original text it was parsed from.

    Five fields (minute, hour, day of month, month, day of week) or six, with
    seconds as the trailing field. Names such as ``MON`` or ``JAN`` are allowed.
    """

    def __init__(self, expression: str):
        self.expression = expression

    @classmethod
    def parse(cls, expression: str) -> "CronSchedule":
        text = (expression or "").strip()
        if not text:
            raise ScheduleParseError("Empty cron expression")
        try:
            croniter(text)
        except (CroniterError, ValueError, KeyError) as e:
            raise ScheduleParseError(f"Invalid cron expression {expression!r}: {e}") from e
        return cls(text)

    def occurrences_after(self, reference: datetime) -> Iterator[datetime]:
        """Yield matching instants strictly after ``reference``, ascending, forever."""
        itr = croniter(self.expression, reference)
        while True:
            try:
                yield itr.get_next(datetime)
            except CroniterBadDateError as e:
                raise RecurrenceExhausted(
                    f"No further occurrences for {self.expression!r} after {reference}"
                ) from e

    def __str__(self):
        return self.expression

    def __repr__(self):
        return f"CronSchedule({self.expression!r})"

    def __eq__(self, other):
        if not isinstance(other, CronSchedule):
            return NotImplemented
        return self.expression == other.expression

    def __hash__(self):
        return hash(self.expression)


# -----------------------------
# REMINDER
# -----------------------------
@dataclass
class Reminder:
    summary: str
    description: str
    schedule: CronSchedule
    # second upcoming occurrence as of the last check; never persisted
    upcoming: Optional[datetime] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data) -> "Reminder":
        if not isinstance(data, dict):
            raise ConfigError(f"Reminder entry must be a table, got {type(data).__name__}")
        values = {}
        for key in ("summary", "description", "schedule"):
            value = data.get(key)
            if not isinstance(value, str):
                raise ConfigError(f"Reminder entry is missing string field '{key}'")
            values[key] = value
        return cls(values["summary"], values["description"], CronSchedule.parse(values["schedule"]))

    def to_dict(self, index=None):
        data = {}
        if index is not None:
            data["id"] = index
        data["summary"] = self.summary
        data["description"] = self.description
        data["schedule"] = str(self.schedule)
        return data


def format_reminder(reminder, index=None):
    """Render a single reminder as a TOML block for display."""
    return tomli_w.dumps(reminder.to_dict(index))


# -----------------------------
# STORE
# -----------------------------
class ReminderStore:
    def __init__(self, reminders=None):
        self.reminders = list(reminders or [])

    def __len__(self):
        return len(self.reminders)

    def __iter__(self):
        return iter(self.reminders)

    def add(self, reminder):
        self.reminders.append(reminder)

    def list(self) -> Iterator[Tuple[int, Reminder]]:
        for index, reminder in enumerate(self.reminders):
            yield index, reminder

    def remove(self, index) -> Reminder:
        if not 0 <= index < len(self.reminders):
            raise ReminderIndexError(
                f"No reminder with id {index} (valid ids: 0..{len(self.reminders) - 1})"
                if self.reminders else f"No reminder with id {index} (no reminders configured)"
            )
        return self.reminders.pop(index)

    def to_toml(self, with_ids=False):
        """Render the collection as a ``[[reminders]]`` array of tables."""
        if not self.reminders:
            return "reminders = []\n"
        return "\n".join(
            "[[reminders]]\n" + format_reminder(r, i if with_ids else None)
            for i, r in self.list()
        )

    @classmethod
    def load(cls, path) -> "ReminderStore":
        """Load the reminder collection, or an empty one if the file does not exist yet."""
        if not os.path.exists(path):
            logger.info("Config file %s not found, starting with no reminders", path)
            return cls()
        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"Malformed config file {path}: {e}") from e

        entries = data.get("reminders", [])
        if not isinstance(entries, list):
            raise ConfigError(f"'reminders' in {path} must be an array of tables")
        store = cls(Reminder.from_dict(entry) for entry in entries)
        logger.debug("Loaded %d reminders from %s", len(store), path)
        return store

    def save(self, path):
        directory = os.path.dirname(path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(self.to_toml())
        except OSError as e:
            raise ConfigError(f"Cannot write config file {path}: {e}") from e
        logger.debug("Stored %d reminders to %s", len(self), path)


# -----------------------------
# TRANSITION DETECTION
# -----------------------------
def check_transition(reminder, now) -> bool:
    """Refresh ``reminder.upcoming`` for ``now``; return True if a notification is due.

    The cached value is the occurrence after the next one. It only changes when
    the next occurrence has passed, so a change means one occurrence boundary
    was crossed since the previous check. The first check only primes the cache.
    """
    occurrences = reminder.schedule.occurrences_after(now)
    next(occurrences, None)
    candidate = next(occurrences, None)
    if candidate is None:
        raise RecurrenceExhausted(f"Schedule {reminder.schedule} yields fewer than two occurrences")

    if reminder.upcoming is None:
        reminder.upcoming = candidate
        return False
    if candidate != reminder.upcoming:
        reminder.upcoming = candidate
        return True
    return False
