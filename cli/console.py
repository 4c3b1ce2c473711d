"""Console UI for Latin Quest."""

import string

import requests

from core.config import DIFFICULTY, MODE_NAMES, MODES
from cli.api_client import QuestAPIClient


class ConsoleUI:
    """Console user interface for Latin Quest."""

    def __init__(self, client: QuestAPIClient):
        self.client = client

    def print_speech(self, data: dict):
        """Show the words the server asked us to pronounce."""
        for text in data.get('speak') or []:
            print(f'  (say: {text})')

    def print_feedback(self, data: dict):
        feedback = data.get('feedback')
        if not feedback or feedback['kind'] in ('ignored', 'selected'):
            return
        print('-' * 40)
        print(feedback['title'])
        print(feedback['description'])
        print('-' * 40)

    def print_header(self, rnd: dict):
        print('\n' + '=' * 50)
        print(f'{MODE_NAMES[rnd["mode"]]} | {rnd["difficulty"]} | '
              f'Time {rnd["seconds_left"]}/{rnd["total_seconds"]}s | '
              f'XP {rnd["score"]} | Combo x{rnd["combo"]}')
        print('=' * 50)

    def print_match_board(self, rnd: dict):
        items = {x['id']: x for x in rnd['items']}
        done = set(rnd['done_ids'])
        print('Latin:')
        for i, item_id in enumerate(rnd['latin_order'], 1):
            mark = '✓' if item_id in done else ('>' if item_id == rnd['selected_latin'] else ' ')
            item = items[item_id]
            print(f'  {mark} {i}. {item["latin"]} [{item["tag"]}]')
        print('Meaning:')
        for letter, item_id in zip(string.ascii_lowercase, rnd['meaning_order']):
            mark = '✓' if item_id in done else ' '
            print(f'  {mark} {letter}. {items[item_id]["meaning"]}')
        print(f'Pairs left: {rnd["pairs_left"]}')

    def print_sighting_board(self, rnd: dict):
        print(f'Build: {rnd["english"]}')
        placed = ' '.join(rnd['answer']) or '...'
        print(f'Your sentence ({len(rnd["answer"])}/{rnd["slots"]}): {placed}')
        for i, tile in enumerate(rnd['tiles'], 1):
            print(f'  {i}. {tile["text"]}')

    def print_round_end(self, data: dict):
        rnd = data['round']
        print(f'\n*** {rnd["end_reason"]} ***')
        if rnd.get('solution'):
            print(f'Answer: {" ".join(rnd["solution"])}')
        summary = data.get('summary')
        if summary:
            print(f'{summary["mode"]}: {summary["score"]} XP, best combo x{summary["maxCombo"]}')
        unlock = data.get('new_unlock')
        if unlock:
            print(f'\nNew bird card: {unlock["common"]} ({unlock["sci"]}) - {unlock["badge"]}')
            print(f'  {unlock["fun"]}')

    def print_status(self, progress: dict):
        """Print lifetime progress."""
        print('\n' + '=' * 50)
        print(f'{progress["player"]["name"]} ({progress["player"]["difficulty"]})')
        print('=' * 50)
        best = progress['best']
        print(f'Total XP: {best["totalXP"]} | High score: {best["highScore"]} | '
              f'Best streak: {best["bestStreak"]}')
        nxt = progress['progress_to_next']
        print(f'Next card: {nxt["current"]}/{nxt["threshold"]} XP')
        if progress['next_reward']:
            print(f'  Up next: {progress["next_reward"]["common"]}')
        print(f'Cards unlocked: {len(progress["collection"]["unlocked"])}')
        print('=' * 50 + '\n')

    def print_field_guide(self, guide: dict):
        print(f'\nField Guide: {len(guide["unlocked"])}/{guide["total"]} unlocked')
        for card in guide['unlocked']:
            print(f'  {card["common"]} ({card["sci"]}) - {card["fun"]}')
        if guide['locked']:
            print(f'  Next unlock: {guide["locked"][0]["common"]}')

    def print_events(self, data: dict):
        if not data.get('available'):
            print('Round log needs PostgreSQL storage on the server.')
            return
        for event in data['events']:
            details = ', '.join(f'{k}={v}' for k, v in (event.get('data') or {}).items())
            print(f'  {event["timestamp"][:19]}  {event["event"]:<12} {details}')

    def handle_match_input(self, rnd: dict, user_input: str) -> dict | None:
        """Input like "2c": Latin word 2 with meaning c."""
        number = ''.join(ch for ch in user_input if ch.isdigit())
        letter = ''.join(ch for ch in user_input if ch in string.ascii_lowercase)
        data = None
        if number:
            index = int(number) - 1
            if 0 <= index < len(rnd['latin_order']):
                data = self.client.choose_latin(rnd['latin_order'][index])
                self.print_speech(data)
        if len(letter) == 1:
            index = string.ascii_lowercase.index(letter)
            if index < len(rnd['meaning_order']):
                data = self.client.choose_meaning(rnd['meaning_order'][index])
        return data

    def handle_sighting_input(self, rnd: dict, user_input: str) -> dict | None:
        """Input like "3" or "3 1 5": tiles in order."""
        data = None
        for token in user_input.split():
            if not token.isdigit():
                continue
            index = int(token) - 1
            if 0 <= index < len(rnd['tiles']):
                data = self.client.place_tile(rnd['tiles'][index]['id'])
                self.print_speech(data)
                self.print_feedback(data)
                if data['round']['phase'] != 'active':
                    break
        return data

    def choose_mode(self) -> str | None:
        print('Modes: ' + ', '.join(f'{m} ({MODE_NAMES[m]})' for m in MODES))
        print(f'Difficulties: {", ".join(DIFFICULTY)} (type "difficulty <name>" to change)')
        while True:
            user_input = input('mode> ').strip().lower()
            if user_input == 'exit':
                return None
            if user_input in MODES:
                return user_input
            if user_input.startswith('difficulty '):
                try:
                    self.client.update_settings(difficulty=user_input.split(None, 1)[1])
                    print('Difficulty saved.')
                except requests.HTTPError as e:
                    print(f'Error: {e}')
            elif user_input == 'status':
                self.print_status(self.client.get_progress())
            elif user_input == 'guide':
                self.print_field_guide(self.client.get_field_guide())
            elif user_input == 'log':
                self.print_events(self.client.get_events())

    def play(self, mode: str) -> bool:
        """Play rounds until the player leaves. Returns False on exit."""
        data = self.client.start_round(mode)
        while True:
            rnd = data['round']
            if rnd['phase'] == 'ended':
                self.print_round_end(data)
                user_input = input('[n]ext, [m]enu or exit: ').strip().lower()
                if user_input == 'exit':
                    return False
                if user_input in ('m', 'menu'):
                    return True
                data = self.client.advance_round()
                continue

            self.print_header(rnd)
            if rnd['mode'] == 'match':
                self.print_match_board(rnd)
            else:
                self.print_sighting_board(rnd)

            user_input = input('==> ').strip().lower()
            if user_input == 'exit':
                return False
            elif user_input == 'menu':
                return True
            elif user_input == 'hint':
                print(f"Hint: {self.client.get_hint()['hint'] or 'choose a Latin word first'}")
                data = self.client.get_round()
                continue
            elif user_input == 'restart':
                data = self.client.restart_round()
                continue

            if rnd['mode'] == 'match':
                result = self.handle_match_input(rnd, user_input)
                if result:
                    self.print_feedback(result)
            else:
                result = self.handle_sighting_input(rnd, user_input)
            data = result or self.client.get_round()

    def run(self, mode: str | None = None):
        """Run the main application loop, optionally jumping straight into a mode."""
        # Check server connection
        try:
            health = self.client.health_check()
            print(f"Connected to Latin Quest server ({health['service']})")
        except requests.RequestException:
            print(f"Error: Cannot connect to server at {self.client.base_url}")
            print("Make sure the server is running: python run_server.py")
            return

        self.print_status(self.client.get_progress())
        print('Commands: "hint", "restart", "menu", "status", "guide", "log", "exit"\n')

        while True:
            mode = mode or self.choose_mode()
            if mode is None or not self.play(mode):
                print('Vale!')
                return
            mode = None
