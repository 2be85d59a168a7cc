# notifier.py
import os
import time
import logging
from datetime import datetime
from plyer import notification
from tzlocal import get_localzone
from config import APP_NAME, ICON_PATH, get_notification_timeout, get_poll_interval
from reminder_core import check_transition, NotificationDeliveryError, RecurrenceExhausted

logger = logging.getLogger("notifier")


def send_native_notification(title, message, timeout=None):
    if timeout is None:
        timeout = get_notification_timeout()
    try:
        notification.notify(
            title=title,
            message=message,
            app_name=APP_NAME,
            app_icon=ICON_PATH if os.path.exists(ICON_PATH) else None,
            timeout=timeout
        )
    except Exception as e:
        raise NotificationDeliveryError(f"Notification failed: {e}") from e


def local_now():
    # must carry the zone's DST rules, not a fixed offset
    return datetime.now(get_localzone())


class ReminderWatcher:
    """Polls a reminder store and notifies once per occurrence boundary."""

    def __init__(self, store, notify=send_native_notification, interval=None,
                 clock=local_now, sleep=time.sleep):
        self.store = store
        self.notify = notify
        self.interval = get_poll_interval() if interval is None else interval
        self.clock = clock
        self.sleep = sleep
        # ids of reminders whose schedule stopped producing occurrences
        self.faulted = set()

    def tick(self, now=None):
        """Check every reminder once, in store order. Returns the reminders that fired."""
        if now is None:
            now = self.clock()
        fired = []
        for index, reminder in self.store.list():
            if id(reminder) in self.faulted:
                continue
            try:
                due = check_transition(reminder, now)
            except RecurrenceExhausted:
                logger.exception("Disabling reminder %d (%s)", index, reminder.summary)
                self.faulted.add(id(reminder))
                continue
            if not due:
                continue

            logger.info("New notification: %s - %s", reminder.summary, reminder.description)
            fired.append(reminder)
            try:
                self.notify(reminder.summary, reminder.description)
            except NotificationDeliveryError:
                logger.exception("Could not deliver notification for reminder %d", index)
        return fired

    def run(self):
        """Tick forever. Interrupts propagate to the caller."""
        logger.info("Watching %d reminders (poll interval %ss)", len(self.store), self.interval)
        while True:
            self.tick()
            if self.interval > 0:
                self.sleep(self.interval)
