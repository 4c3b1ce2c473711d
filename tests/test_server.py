"""Tests for the latin-quest server: storage, real-time clock and REST API."""

import asyncio
import json
import os
import shutil
import tempfile
import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch

import psycopg2
from fastapi.testclient import TestClient

import server.app as app_module
from core.interfaces import ManualClock
from core.config import DIFFICULTY
from server.clock import LoopClock, QueueSpeaker
from server.file_storage import FileStorage
from server.postgres_storage import PostgresStorage


class TestFileStorage(unittest.TestCase):
    """Tests for JSON file persistence."""

    def setUp(self):
        self.state_dir = tempfile.mkdtemp()
        self.storage = FileStorage(self.state_dir)

    def tearDown(self):
        shutil.rmtree(self.state_dir, ignore_errors=True)

    def test_save_and_load(self):
        state = {'version': 2, 'best': {'totalXP': 120}}
        self.storage.save_state(state, 'livia')
        self.assertEqual(self.storage.load_state('livia'), state)
        self.assertFalse(os.path.exists(os.path.join(self.state_dir, 'quest_state_livia.json.tmp')))

    def test_missing_user(self):
        self.assertIsNone(self.storage.load_state('nobody'))

    def test_corrupt_file_loads_as_none(self):
        with open(os.path.join(self.state_dir, 'quest_state.json'), 'w') as f:
            f.write('{not json')
        self.assertIsNone(self.storage.load_state())

    def test_list_and_delete_users(self):
        self.storage.save_state({}, 'default')
        self.storage.save_state({}, 'marcus')
        self.assertEqual(self.storage.list_users(), ['default', 'marcus'])
        self.assertTrue(self.storage.delete_user('marcus'))
        self.assertFalse(self.storage.delete_user('marcus'))
        self.assertEqual(self.storage.list_users(), ['default'])


class TestPostgresStorage(unittest.TestCase):
    """Tests for the PostgreSQL backend against a mocked connection."""

    def setUp(self):
        patcher = patch('server.postgres_storage.psycopg2.connect')
        self.connect = patcher.start()
        self.addCleanup(patcher.stop)
        self.conn = MagicMock()
        self.conn.closed = False
        self.cursor = self.conn.cursor.return_value.__enter__.return_value
        self.connect.return_value = self.conn
        self.storage = PostgresStorage('postgresql://test/latin_quest')

    def test_save_serializes_progress(self):
        self.storage.save_state({'best': {'totalXP': 10}}, 'livia')
        sql, params = self.cursor.execute.call_args[0]
        self.assertIn('INSERT INTO player_progress', sql)
        self.assertEqual(params, ('livia', json.dumps({'best': {'totalXP': 10}})))
        self.conn.commit.assert_called()

    def test_load_returns_progress_column(self):
        self.cursor.fetchone.return_value = {'progress': {'version': 2}}
        self.assertEqual(self.storage.load_state('livia'), {'version': 2})

    def test_load_error_returns_none(self):
        self.connect.return_value.cursor.side_effect = psycopg2.OperationalError('down')
        storage = PostgresStorage('postgresql://test/latin_quest')
        storage._initialized = True
        self.assertIsNone(storage.load_state('livia'))

    def test_log_event(self):
        self.storage.log_event('unlock', 'livia', reward='robin')
        sql, params = self.cursor.execute.call_args[0]
        self.assertIn('INSERT INTO events', sql)
        self.assertEqual(params, ('unlock', 'livia', json.dumps({'reward': 'robin'})))

    def test_recent_events(self):
        self.cursor.fetchall.return_value = [{'timestamp': 't', 'event': 'unlock', 'data': {'reward': 'robin'}}]
        events = self.storage.get_recent_events('livia', limit=5)
        sql, params = self.cursor.execute.call_args[0]
        self.assertIn('FROM events', sql)
        self.assertEqual(params, ('livia', 5))
        self.assertEqual(events[0]['event'], 'unlock')

    def test_close(self):
        self.storage.load_state('livia')
        self.storage.close()
        self.conn.close.assert_called_once()


class TestLoopClock(unittest.IsolatedAsyncioTestCase):
    """Tests for the event-loop clock."""

    async def test_ticks_until_stopped(self):
        ticks = []
        clock = LoopClock(interval=0.01)
        clock.start(lambda: ticks.append(1))
        self.assertTrue(clock.running)
        await asyncio.sleep(0.1)
        clock.stop()
        count = len(ticks)
        self.assertGreaterEqual(count, 1)
        await asyncio.sleep(0.05)
        self.assertEqual(len(ticks), count)
        self.assertFalse(clock.running)

    async def test_callback_can_stop_clock(self):
        ticks = []
        clock = LoopClock(interval=0.01)

        def tick():
            ticks.append(1)
            clock.stop()

        clock.start(tick)
        await asyncio.sleep(0.1)
        self.assertEqual(len(ticks), 1)


class TestQueueSpeaker(unittest.TestCase):

    def test_drain_empties_queue(self):
        speaker = QueueSpeaker()
        speaker.speak('puella')
        speaker.speak('portat')
        self.assertEqual(speaker.drain(), ['puella', 'portat'])
        self.assertEqual(speaker.drain(), [])


class TestAPI(unittest.TestCase):
    """Tests for the REST endpoints, driven with a manual clock."""

    def setUp(self):
        self.state_dir = tempfile.mkdtemp()
        app_module.storage = FileStorage(self.state_dir)
        app_module.clock_factory = ManualClock
        app_module.sessions.clear()
        app_module.speakers.clear()
        self.client = TestClient(app_module.create_app())

    def tearDown(self):
        app_module.clock_factory = LoopClock
        app_module.sessions.clear()
        app_module.speakers.clear()
        shutil.rmtree(self.state_dir, ignore_errors=True)

    def start(self, mode, **extra):
        response = self.client.post('/api/round/start', json={'mode': mode, 'user_id': 'livia', **extra})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_non_finite_saved_totals_load(self):
        with open(os.path.join(self.state_dir, 'quest_state_livia.json'), 'w') as f:
            f.write('{"version": 2, "best": {"totalXP": Infinity, "highScore": NaN, "bestStreak": 4}}')
        response = self.client.get('/api/progress', params={'user_id': 'livia'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['best'], {'highScore': 0, 'bestStreak': 4, 'totalXP': 0})

    def test_events_without_event_log(self):
        data = self.client.get('/api/events', params={'user_id': 'livia'}).json()
        self.assertEqual(data, {'events': [], 'available': False})

    def test_events_from_event_log(self):
        app_module.storage = MagicMock()
        app_module.storage.get_recent_events.return_value = [
            {'timestamp': datetime(2026, 3, 1, 9, 30), 'event': 'unlock', 'data': {'reward': 'robin'}}
        ]
        data = self.client.get('/api/events', params={'user_id': 'livia', 'limit': 3}).json()
        app_module.storage.get_recent_events.assert_called_once_with('livia', 3)
        self.assertTrue(data['available'])
        self.assertEqual(data['events'][0]['timestamp'], '2026-03-01T09:30:00')

    def test_root(self):
        self.assertEqual(self.client.get('/').json()['status'], 'ok')

    def test_progress_defaults(self):
        data = self.client.get('/api/progress', params={'user_id': 'livia'}).json()
        self.assertEqual(data['best']['totalXP'], 0)
        self.assertEqual(data['next_reward']['id'], 'robin')

    def test_round_required(self):
        self.assertEqual(self.client.get('/api/round', params={'user_id': 'livia'}).status_code, 404)

    def test_bad_mode_and_difficulty(self):
        self.assertEqual(self.client.post('/api/round/start', json={'mode': 'quiz'}).status_code, 400)
        response = self.client.post('/api/round/start', json={'mode': 'match', 'difficulty': 'nightmare'})
        self.assertEqual(response.status_code, 400)

    def test_sighting_round_over_http(self):
        data = self.start('sighting', difficulty='normal')
        self.assertEqual(data['round']['slots'], 3)
        self.assertNotIn('correct', data['round']['tiles'][0])

        state = app_module.sessions['livia'].engine.state
        for text in state.challenge.latin:
            tile = next(t for t in state.tiles if t.correct and t.text == text)
            data = self.client.post('/api/round/select', json={'tile_id': tile.id, 'user_id': 'livia'}).json()
            self.assertEqual(data['speak'], [text])

        self.assertEqual(data['feedback']['kind'], 'good')
        self.assertEqual(data['round']['phase'], 'ended')
        self.assertEqual(data['summary']['mode'], 'Sighting Log')
        self.assertEqual(data['round']['solution'], list(state.challenge.latin))

        saved = app_module.storage.load_state('livia')
        self.assertEqual(saved['best']['totalXP'], data['summary']['score'])

    def test_match_round_over_http(self):
        data = self.start('match')
        item_id = data['round']['latin_order'][0]
        data = self.client.post('/api/round/latin', json={'item_id': item_id, 'user_id': 'livia'}).json()
        self.assertEqual(data['round']['selected_latin'], item_id)
        data = self.client.post('/api/round/select', json={'meaning_id': item_id, 'user_id': 'livia'}).json()
        self.assertEqual(data['feedback']['kind'], 'good')
        self.assertEqual(data['round']['done_ids'], [item_id])

    def test_select_requires_payload(self):
        self.start('match')
        self.assertEqual(self.client.post('/api/round/select', json={'user_id': 'livia'}).status_code, 400)

    def test_timeout_then_advance(self):
        self.start('match', difficulty='easy')
        app_module.sessions['livia'].engine.clock.advance(DIFFICULTY['easy']['time'])
        data = self.client.get('/api/round', params={'user_id': 'livia'}).json()
        self.assertEqual(data['round']['end_reason'], 'Time!')
        data = self.client.post('/api/round/advance', json={'user_id': 'livia'}).json()
        self.assertEqual(data['round']['phase'], 'active')
        self.assertEqual(data['round']['generation'], 2)

    def test_settings(self):
        data = self.client.post('/api/settings', json={
            'user_id': 'livia', 'name': 'Livia', 'difficulty': 'hard', 'sound': False
        }).json()
        self.assertEqual(data['player'], {'name': 'Livia', 'difficulty': 'hard'})
        self.assertEqual(data['settings'], {'sound': False})
        response = self.client.post('/api/settings', json={'user_id': 'livia', 'difficulty': 'nightmare'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get('/api/users').json()['users'], ['livia'])

    def test_field_guide_and_lexicon(self):
        guide = self.client.get('/api/field-guide').json()
        self.assertEqual(guide['unlocked'], [])
        self.assertEqual(guide['threshold'], 250)
        lexicon = self.client.get('/api/lexicon').json()
        puella = next(n for n in lexicon['nouns'] if n['id'] == 'puella')
        self.assertEqual(puella['acc_sg'], 'puellam')


if __name__ == '__main__':
    unittest.main()
