import os
import tempfile
from datetime import datetime

import pytest

# keep log output of the CLI out of the user's config directory
os.environ.setdefault("CRONMINDER_LOG_FILE", os.path.join(tempfile.mkdtemp(prefix="cronminder-"), "test.log"))

from reminder_core import CronSchedule, Reminder, ReminderStore  # noqa: E402


def make_reminder(schedule="0 9 * * MON", summary="Stand-up", description="Weekly team sync"):
    return Reminder(summary, description, CronSchedule.parse(schedule))


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "reminders.toml")


@pytest.fixture
def populated_config(config_path):
    store = ReminderStore([
        make_reminder("0 9 * * MON", "Stand-up", "Weekly team sync"),
        make_reminder("30 17 * * FRI", "Timesheet", "Fill in hours"),
        make_reminder("0 8 1 * *", "Rent", "Pay the rent"),
    ])
    store.save(config_path)
    return config_path


@pytest.fixture
def friday_noon():
    return datetime(2023, 12, 29, 12, 0)
