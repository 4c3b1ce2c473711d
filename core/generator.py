"""Challenge generation for both game modes.

Match mode draws role-tagged vocabulary pairs from a pool built once per
generator. Sighting Log mode builds a sentence (subject, verb, object and on
the hard tier an agreeing adjective) plus case-confusion decoy tiles.
All randomness comes from the injected ``random.Random``.
"""

import logging
import random
from dataclasses import dataclass
from typing import Literal

from .config import MAX_TILES, difficulty_conf
from .lexicon import (
    DEFAULT_LEXICON, Adjective, Lexicon, LexiconError, Noun, Verb,
    resolve_adjective_form, resolve_noun_form, resolve_verb_form
)

logger = logging.getLogger(__name__)

LOG_LINES = [
    "Sighting logged!",
    "Field note added!",
    "Checklist updated!",
    "Rare behavior observed!"
]

TIP_BASIC = "Subject = NOM. Object = ACC. Verb ending shows who does it (3rd sg)."
TIP_AGREEMENT = "Adjectives match the noun: gender + case. NOM = subject, ACC = object."

HINT_NOM = "Subject usually = nominative (who/what does it?)"
HINT_ACC = "Direct object often = accusative (who/what is affected?)"
HINT_ADJ = "Adjectives match noun gender/case (later drills)."


@dataclass(frozen=True, slots=True)
class MatchPoolItem:
    id: str
    latin: str
    meaning: str
    tag: Literal['NOM', 'ACC', 'V', 'ADJ']
    kind: Literal['noun', 'verb', 'adj']
    hint: str

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'latin': self.latin,
            'meaning': self.meaning,
            'tag': self.tag,
            'kind': self.kind,
            'hint': self.hint
        }


@dataclass(frozen=True, slots=True)
class MatchRound:
    """One match round: the drawn items and the two column orders."""
    items: tuple
    latin_order: tuple
    meaning_order: tuple

    def item(self, item_id: str) -> MatchPoolItem | None:
        return next((x for x in self.items if x.id == item_id), None)


@dataclass(frozen=True, slots=True)
class Challenge:
    subject: Noun
    object: Noun
    verb: Verb
    adjective: Adjective | None
    adj_target: Literal['subject', 'object'] | None
    latin: tuple
    english: str
    grammar_tip: str
    log_line: str

    @property
    def length(self) -> int:
        return len(self.latin)


@dataclass(frozen=True, slots=True)
class Tile:
    id: str
    text: str
    correct: bool

    def to_dict(self) -> dict:
        return {'id': self.id, 'text': self.text, 'correct': self.correct}


def build_match_pool(lexicon: Lexicon) -> list[MatchPoolItem]:
    """Flatten the lexicon into role-tagged pairs, dropping empty forms."""
    pool = []
    for n in lexicon.nouns:
        pool.append(MatchPoolItem(f"{n.id}-nom", resolve_noun_form(n, 'nom_sg'),
                                  f"{n.meaning} (subject)", 'NOM', 'noun', HINT_NOM))
        pool.append(MatchPoolItem(f"{n.id}-acc", resolve_noun_form(n, 'acc_sg'),
                                  f"{n.meaning} (object)", 'ACC', 'noun', HINT_ACC))
    for v in lexicon.verbs:
        pool.append(MatchPoolItem(v.id, resolve_verb_form(v), f"he/she/it {v.meaning_3s}",
                                  'V', 'verb', v.pattern))
    for a in lexicon.adjectives:
        pool.append(MatchPoolItem(a.id, a.lemma, a.meaning, 'ADJ', 'adj', HINT_ADJ))
    return [item for item in pool if item.latin]


class ChallengeGenerator:
    """Generates match rounds, sentence challenges and their tiles."""

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON, rng: random.Random = None):
        if len({n.id for n in lexicon.nouns}) < 2:
            raise LexiconError("Lexicon needs at least two distinct nouns")
        if not lexicon.verbs:
            raise LexiconError("Lexicon needs at least one verb")
        self.lexicon = lexicon
        self.rng = rng or random.Random()
        self.match_pool = build_match_pool(lexicon)
        logger.debug(f"Match pool built: {len(self.match_pool)} items")

    def sample_match(self, k: int) -> MatchRound:
        """Draw k distinct pool items; both columns are shuffled independently."""
        k = max(0, min(k, len(self.match_pool)))
        items = self.rng.sample(self.match_pool, k)
        latin_order = [x.id for x in items]
        meaning_order = [x.id for x in items]
        self.rng.shuffle(latin_order)
        self.rng.shuffle(meaning_order)
        return MatchRound(tuple(items), tuple(latin_order), tuple(meaning_order))

    def make_challenge(self, difficulty: str) -> Challenge:
        """Build a sentence challenge; the hard tier adds adjective agreement."""
        nouns = list(self.lexicon.nouns)
        subject = self.rng.choice(nouns)
        obj = self.rng.choice([n for n in nouns if n.id != subject.id])
        verb = self.rng.choice(list(self.lexicon.verbs))

        use_adj = difficulty_conf(difficulty)['sentence_len'] >= 4 and bool(self.lexicon.adjectives)
        adj = self.rng.choice(list(self.lexicon.adjectives)) if use_adj else None
        target = (self.rng.choice(['subject', 'object'])) if use_adj else None

        subj_word = resolve_noun_form(subject, 'nom_sg')
        obj_word = resolve_noun_form(obj, 'acc_sg')
        verb_word = resolve_verb_form(verb)

        if adj is None:
            latin = (subj_word, verb_word, obj_word)
            english = f"The {subject.meaning} {verb.meaning_3s} the {obj.meaning}."
        elif target == 'subject':
            adj_word = resolve_adjective_form(adj, 'nom_sg', subject.gender)
            latin = (adj_word, subj_word, verb_word, obj_word)
            english = f"The {adj.meaning} {subject.meaning} {verb.meaning_3s} the {obj.meaning}."
        else:
            adj_word = resolve_adjective_form(adj, 'acc_sg', obj.gender)
            latin = (subj_word, verb_word, adj_word, obj_word)
            english = f"The {subject.meaning} {verb.meaning_3s} the {adj.meaning} {obj.meaning}."

        return Challenge(
            subject=subject,
            object=obj,
            verb=verb,
            adjective=adj,
            adj_target=target,
            latin=latin,
            english=english,
            grammar_tip=TIP_AGREEMENT if adj else TIP_BASIC,
            log_line=self.rng.choice(LOG_LINES)
        )

    def make_tiles(self, challenge: Challenge) -> list[Tile]:
        """Correct tiles plus one decoy per slot, shuffled and capped at MAX_TILES."""
        correct = [Tile(f"c-{i}-{text}", text, True) for i, text in enumerate(challenge.latin)]
        taken = set(challenge.latin)
        decoys = []

        def add(tile_id: str, candidates) -> None:
            for text in candidates:
                if text and text not in taken:
                    taken.add(text)
                    decoys.append(Tile(tile_id, text, False))
                    return

        others = [n for n in self.lexicon.nouns
                  if n.id not in (challenge.subject.id, challenge.object.id)]
        self.rng.shuffle(others)

        # Subject in the object case, then another noun in that case
        add('d-subj', [resolve_noun_form(challenge.subject, 'acc_sg')]
            + [resolve_noun_form(n, 'acc_sg') for n in others])
        add('d-obj', [resolve_noun_form(challenge.object, 'nom_sg')]
            + [resolve_noun_form(n, 'nom_sg') for n in others])

        other_verbs = [v for v in self.lexicon.verbs if v.id != challenge.verb.id]
        self.rng.shuffle(other_verbs)
        add('d-verb', [resolve_verb_form(v) for v in other_verbs])

        if challenge.adjective is not None:
            adj = challenge.adjective
            target = challenge.subject if challenge.adj_target == 'subject' else challenge.object
            right_case = 'nom_sg' if challenge.adj_target == 'subject' else 'acc_sg'
            wrong_case = 'acc_sg' if right_case == 'nom_sg' else 'nom_sg'
            candidates = [resolve_adjective_form(adj, wrong_case, target.gender)]
            # Syncretic cells: fall back to a gender mismatch in the right case
            candidates += [resolve_adjective_form(adj, right_case, g)
                           for g in ('m', 'f', 'n') if g != target.gender]
            add('d-adj', candidates)

        tiles = correct + decoys[:max(0, MAX_TILES - len(correct))]
        self.rng.shuffle(tiles)
        return tiles
