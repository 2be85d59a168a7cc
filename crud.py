# crud.py
import logging
from reminder_core import CronSchedule, Reminder, ReminderStore, format_reminder

logger = logging.getLogger("crud")


def add_reminder(config_path, summary, description, schedule):
    """Parse, persist and print a new reminder."""
    reminder = Reminder(summary, description, CronSchedule.parse(schedule))
    store = ReminderStore.load(config_path)
    print("Adding reminder:")
    print(format_reminder(reminder))
    store.add(reminder)
    store.save(config_path)
    logger.info("Added reminder '%s' (%s)", summary, reminder.schedule)
    return reminder


def list_reminders(config_path):
    store = ReminderStore.load(config_path)
    print(store.to_toml(with_ids=True))
    return store


def remove_reminder(config_path, index):
    store = ReminderStore.load(config_path)
    reminder = store.remove(index)
    print("Removing reminder:")
    print(format_reminder(reminder))
    store.save(config_path)
    logger.info("Removed reminder %d '%s'", index, reminder.summary)
    return reminder
