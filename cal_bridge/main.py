#!/usr/bin/env python3
"""
cal-bridge - seed and tear down Apple Calendar and Reminders state for UI tests.
"""

import argparse
import logging
import sys

from cal_bridge.core.config import BACKENDS, get_default_config_path, load_config
from cal_bridge.core.exceptions import CalendarBridgeError
from cal_bridge.core.models import ItemCategory
from cal_bridge.utils.macos import set_process_name
from cal_bridge.commands import (
    AuthorizeCommand,
    ClearCommand,
    SeedCommand,
    StatusCommand
)


def _category(value: str) -> ItemCategory:
    try:
        return ItemCategory.parse(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"unknown category '{value}' (use events or reminders)")


def main(argv=None, provider=None):
    """Main entry point for cal-bridge."""
    set_process_name("cal-bridge")

    parser = argparse.ArgumentParser(
        description="Seed and tear down calendar data around automated UI tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cal-bridge status                              # Show authorization status
  cal-bridge authorize --category events         # Request access ahead of a run
  cal-bridge seed --category events --file e.json
  cal-bridge clear                               # Remove events and reminders in the window
        """
    )

    parser.add_argument(
        '--config',
        help=f'Path to configuration file (default: {get_default_config_path()})',
        default=None
    )
    parser.add_argument(
        '--backend',
        choices=BACKENDS,
        help='Store backend (overrides config)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    status_parser = subparsers.add_parser('status', help='Show authorization status')
    status_parser.add_argument('--category', type=_category, help='events or reminders')

    authorize_parser = subparsers.add_parser('authorize', help='Request access')
    authorize_parser.add_argument('--category', type=_category, help='events or reminders (default: both)')

    seed_parser = subparsers.add_parser('seed', help='Insert items from a JSON file')
    seed_parser.add_argument('--category', type=_category, required=True, help='events or reminders')
    seed_parser.add_argument('--file', required=True, help='JSON file with the items to add')
    seed_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be added without touching the store'
    )

    clear_parser = subparsers.add_parser('clear', help='Remove items in the configured window')
    clear_parser.add_argument('--category', type=_category, help='events or reminders (default: both)')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
        if args.backend:
            config.backend = args.backend

        if args.verbose:
            print(f"Using config: {args.config or get_default_config_path()}")

        if args.command == 'status':
            success = StatusCommand(config, args.verbose, provider).run(args.category)
        elif args.command == 'authorize':
            success = AuthorizeCommand(config, args.verbose, provider).run(args.category)
        elif args.command == 'seed':
            success = SeedCommand(config, args.verbose, provider).run(
                args.category, args.file, dry_run=args.dry_run
            )
        elif args.command == 'clear':
            success = ClearCommand(config, args.verbose, provider).run(args.category)
        else:
            print(f"Unknown command '{args.command}'.")
            return 1

        return 0 if success else 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 130
    except CalendarBridgeError as e:
        print(f"Error: {e}")
        if not args.verbose:
            print("Re-run with --verbose for more detail.")
        return 1


if __name__ == '__main__':
    sys.exit(main())
