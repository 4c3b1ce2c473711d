"""Entry point for the Latin Quest console client."""

import argparse
import sys

import requests

from core.config import DIFFICULTY, MODES
from cli.api_client import QuestAPIClient
from cli.console import ConsoleUI


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Latin Quest - timed Latin grammar drills')
    parser.add_argument(
        '--server',
        default='http://localhost:8000',
        help='Server URL (default: http://localhost:8000)'
    )
    parser.add_argument(
        '--user',
        default='default',
        help='Player ID (default: default)'
    )
    parser.add_argument(
        '--mode',
        choices=MODES,
        help='Skip the menu and start playing this mode'
    )
    parser.add_argument(
        '--difficulty',
        choices=list(DIFFICULTY),
        help='Save this difficulty before playing'
    )
    return parser


def main():
    args = build_parser().parse_args()

    client = QuestAPIClient(base_url=args.server, user_id=args.user)
    ui = ConsoleUI(client)

    try:
        if args.difficulty:
            client.update_settings(difficulty=args.difficulty)
        ui.run(mode=args.mode)
    except requests.ConnectionError:
        print(f'Error: Cannot connect to server at {args.server}')
        sys.exit(1)
    except KeyboardInterrupt:
        print('\nVale!')
        sys.exit(0)


if __name__ == '__main__':
    main()
