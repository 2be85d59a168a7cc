# main.py
import sys
import signal
import logging
import argparse
from functools import partial
from config import APP_NAME, VERSION, DEFAULT_CONFIG_PATH, get_notification_timeout, get_poll_interval, setup_logging
from crud import add_reminder, list_reminders, remove_reminder
from notifier import ReminderWatcher, send_native_notification
from reminder_core import ReminderError, ConfigError, ReminderStore

logger = logging.getLogger("main")


def build_parser():
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Cron-scheduled desktop reminders. Without a subcommand, watch and notify."
    )
    parser.add_argument("-c", "--config", metavar="FILE", default=DEFAULT_CONFIG_PATH,
                        help="Path to config file (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    sub = parser.add_subparsers(dest="command")
    add = sub.add_parser("add", help="Add reminder")
    add.add_argument("summary", help="Reminder summary line")
    add.add_argument("description", help="Reminder description")
    add.add_argument("schedule", help="Reminder cron schedule expression, e.g. '0 9 * * MON'")

    sub.add_parser("list", help="List reminders")

    remove = sub.add_parser("remove", help="Remove reminder")
    remove.add_argument("id", type=int, help="ID of reminder to remove, retrievable through `list` subcommand")
    return parser


def _terminate(signum, frame):
    raise KeyboardInterrupt


def watch(config_path):
    interval = get_poll_interval()
    timeout = get_notification_timeout()
    store = ReminderStore.load(config_path)
    if not len(store):
        logger.warning("No reminders configured in %s", config_path)
    notify = partial(send_native_notification, timeout=timeout)
    ReminderWatcher(store, notify=notify, interval=interval).run()


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(APP_NAME, logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "add":
            add_reminder(args.config, args.summary, args.description, args.schedule)
        elif args.command == "list":
            list_reminders(args.config)
        elif args.command == "remove":
            remove_reminder(args.config, args.id)
        else:
            signal.signal(signal.SIGTERM, _terminate)
            watch(args.config)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting.")
        return 0
    except ConfigError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2
    except ReminderError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
