#!/usr/bin/env python3
"""CLI entry point for HelpScout Redirect Sync"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from redirect_sync.config import load_config, validate_config
from redirect_sync.core import RedirectSynchronizer
from redirect_sync.docs_client import DocsClient
from redirect_sync.logger import setup_logger
from redirect_sync.metadata_store import MetadataStoreError
from redirect_sync.models import is_error, result_to_dict


def print_result(record_id, result):
    """Print a sync result in human-readable format"""
    if is_error(result):
        print(f"\n❌ Record: {record_id}")
        print(f"   Error: {result['error']}")
        return

    print(f"\n✅ Record: {record_id}")
    print(f"   Status code: {result.status_code}")
    location = result.headers.get('Location')
    if location:
        print(f"   Location: {location}")


def build_parser():
    parser = argparse.ArgumentParser(
        description='HelpScout Redirect Sync - Redirect HelpScout Docs articles to their source records',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s sync 42             Create or update the redirect for record 42
  %(prog)s --json sync 42      Same, output JSON
  %(prog)s show 42             Show the stored HelpScout data of record 42
  %(prog)s test                Test the Docs API connection
"""
    )

    parser.add_argument(
        '--env-file',
        help='Path to .env file (default: .env in current directory)'
    )

    parser.add_argument(
        '--config-file',
        help='Path to settings.yaml config file'
    )

    parser.add_argument(
        '--store',
        help='Path to the JSON metadata store (overrides METADATA_STORE_FILE)'
    )

    parser.add_argument(
        '--json', '-j',
        action='store_true',
        help='Output results as JSON'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    sync_parser = subparsers.add_parser('sync', help='Create or update the redirect for a record')
    sync_parser.add_argument('record_id', metavar='RECORD_ID')

    show_parser = subparsers.add_parser('show', help="Show a record's stored HelpScout data")
    show_parser.add_argument('record_id', metavar='RECORD_ID')

    subparsers.add_parser('test', help='Test the Docs API connection')

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(env_file=args.env_file, settings_file=args.config_file)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        sys.exit(1)

    if args.store:
        config.store_file = args.store

    errors = validate_config(config)
    if errors:
        print("Configuration errors:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        sys.exit(1)

    log_level = 'DEBUG' if args.verbose else config.log_level
    setup_logger(level=log_level, log_dir=config.data_dir)

    if args.command == 'test':
        client = DocsClient(config.api_url, config.api_key)
        ok = client.test_connection()
        if args.json:
            print(json.dumps({'helpscout': ok}, indent=2))
        else:
            emoji = '✅' if ok else '❌'
            print(f"  {emoji} HELPSCOUT: {'Connected' if ok else 'Failed'}")
        sys.exit(0 if ok else 1)

    synchronizer = RedirectSynchronizer.from_config(config)

    try:
        if args.command == 'show':
            data = synchronizer.store.get(args.record_id)
            print(json.dumps(data, indent=2, ensure_ascii=False))
            sys.exit(0)

        result = synchronizer.create(args.record_id)
    except MetadataStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    else:
        print_result(args.record_id, result)

    sys.exit(1 if is_error(result) else 0)


if __name__ == '__main__':
    main()
