"""Tests for the latin-quest console client."""

import unittest
from unittest.mock import MagicMock, patch

from cli.__main__ import build_parser
from cli.console import ConsoleUI


MATCH_ROUND = {
    'latin_order': ['puella-nom', 'amo', 'bonus'],
    'meaning_order': ['bonus', 'puella-nom', 'amo'],
}


class TestMatchInput(unittest.TestCase):
    """Tests for parsing "2c"-style match answers."""

    def setUp(self):
        self.client = MagicMock()
        self.client.choose_latin.return_value = {'speak': ['amat']}
        self.client.choose_meaning.return_value = {'feedback': None}
        self.ui = ConsoleUI(self.client)

    def test_number_and_letter(self):
        self.ui.handle_match_input(MATCH_ROUND, '2c')
        self.client.choose_latin.assert_called_once_with('amo')
        self.client.choose_meaning.assert_called_once_with('amo')

    def test_non_ascii_letter_is_skipped(self):
        data = self.ui.handle_match_input(MATCH_ROUND, '2é')
        self.client.choose_latin.assert_called_once_with('amo')
        self.client.choose_meaning.assert_not_called()
        self.assertEqual(data, {'speak': ['amat']})

    def test_letter_out_of_range(self):
        self.assertIsNone(self.ui.handle_match_input(MATCH_ROUND, 'z'))
        self.client.choose_meaning.assert_not_called()


class TestEntryPoint(unittest.TestCase):
    """Tests for command line options."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        self.assertIsNone(args.mode)
        self.assertIsNone(args.difficulty)
        self.assertEqual(args.user, 'default')

    def test_mode_and_difficulty(self):
        args = build_parser().parse_args(['--mode', 'sighting', '--difficulty', 'hard'])
        self.assertEqual(args.mode, 'sighting')
        self.assertEqual(args.difficulty, 'hard')

    def test_unknown_mode_rejected(self):
        with patch('sys.stderr'), self.assertRaises(SystemExit):
            build_parser().parse_args(['--mode', 'quiz'])

    def test_run_with_mode_skips_menu(self):
        client = MagicMock()
        client.health_check.return_value = {'service': 'latin-quest'}
        ui = ConsoleUI(client)
        ui.print_status = MagicMock()
        ui.choose_mode = MagicMock()
        ui.play = MagicMock(return_value=False)
        with patch('builtins.print'):
            ui.run(mode='match')
        ui.play.assert_called_once_with('match')
        ui.choose_mode.assert_not_called()


if __name__ == '__main__':
    unittest.main()
