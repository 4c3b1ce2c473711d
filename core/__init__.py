from .lexicon import (
    Noun, Verb, Adjective, Lexicon, LexiconError, DEFAULT_LEXICON,
    resolve_noun_form, resolve_adjective_form, resolve_verb_form, check_lexicon
)
from .generator import ChallengeGenerator, Challenge, Tile, MatchPoolItem, MatchRound
from .validator import Feedback, check_match, check_sentence, pop_last
from .rounds import RoundEngine, RoundState, RoundSummary, xp_for
from .models import PersistedProgress
from .progression import apply_round, next_unlock
from .rewards import Reward, REWARD_CATALOG
from .interfaces import Storage, Speaker, NullSpeaker, Clock, ManualClock
from .session import GameSession

__all__ = [
    'Noun', 'Verb', 'Adjective', 'Lexicon', 'LexiconError', 'DEFAULT_LEXICON',
    'resolve_noun_form', 'resolve_adjective_form', 'resolve_verb_form', 'check_lexicon',
    'ChallengeGenerator', 'Challenge', 'Tile', 'MatchPoolItem', 'MatchRound',
    'Feedback', 'check_match', 'check_sentence', 'pop_last',
    'RoundEngine', 'RoundState', 'RoundSummary', 'xp_for',
    'PersistedProgress', 'apply_round', 'next_unlock',
    'Reward', 'REWARD_CATALOG',
    'Storage', 'Speaker', 'NullSpeaker', 'Clock', 'ManualClock',
    'GameSession'
]
