"""Static Latin lexicon and form resolution.

Nouns carry nominative/accusative singular, verbs their present first and
third person singular, adjectives a case -> gender agreement table. Entries
are immutable and built once at import.
"""

from dataclasses import dataclass, field
from typing import Literal

Case = Literal['nom_sg', 'acc_sg']
Gender = Literal['m', 'f', 'n']

CASES = ('nom_sg', 'acc_sg')
GENDERS = ('m', 'f', 'n')


class LexiconError(ValueError):
    """The lexicon cannot supply what the generator needs."""


@dataclass(frozen=True, slots=True)
class Noun:
    id: str
    lemma: str
    declension: int
    gender: Gender
    meaning: str
    forms: dict
    note: str | None = None


@dataclass(frozen=True, slots=True)
class Verb:
    id: str
    pres_1s: str
    pres_3s: str
    meaning: str      # "I love"
    meaning_3s: str   # "loves"
    pattern: str


@dataclass(frozen=True, slots=True)
class Adjective:
    id: str
    lemma: str
    meaning: str
    forms: dict
    note: str | None = None


@dataclass(frozen=True, slots=True)
class Lexicon:
    """The three word tables a generator draws from."""
    nouns: tuple = field(default_factory=tuple)
    verbs: tuple = field(default_factory=tuple)
    adjectives: tuple = field(default_factory=tuple)

    def noun(self, noun_id: str) -> Noun | None:
        return next((n for n in self.nouns if n.id == noun_id), None)

    def verb(self, verb_id: str) -> Verb | None:
        return next((v for v in self.verbs if v.id == verb_id), None)

    def adjective(self, adj_id: str) -> Adjective | None:
        return next((a for a in self.adjectives if a.id == adj_id), None)


def _noun(id, decl, gender, meaning, nom, acc, note=None) -> Noun:
    return Noun(id, nom, decl, gender, meaning, {'nom_sg': nom, 'acc_sg': acc}, note)


NOUNS = (
    # 1st declension (mostly feminine)
    _noun('puella', 1, 'f', 'girl', 'puella', 'puellam'),
    _noun('femina', 1, 'f', 'woman', 'femina', 'feminam'),
    _noun('nauta', 1, 'm', 'sailor', 'nauta', 'nautam'),
    _noun('aqua', 1, 'f', 'water', 'aqua', 'aquam'),
    _noun('insula', 1, 'f', 'island', 'insula', 'insulam'),
    _noun('silva', 1, 'f', 'forest', 'silva', 'silvam'),
    _noun('via', 1, 'f', 'road', 'via', 'viam'),
    _noun('porta', 1, 'f', 'gate', 'porta', 'portam'),
    # 2nd declension masculine
    _noun('amicus', 2, 'm', 'friend', 'amicus', 'amicum'),
    _noun('servus', 2, 'm', 'worker', 'servus', 'servum'),
    _noun('lupus', 2, 'm', 'wolf', 'lupus', 'lupum'),
    _noun('filius', 2, 'm', 'son', 'filius', 'filium'),
    _noun('ager', 2, 'm', 'field', 'ager', 'agrum'),
    _noun('dominus', 2, 'm', 'master', 'dominus', 'dominum'),
    # 2nd declension neuter: nominative and accusative coincide
    _noun('verbum', 2, 'n', 'word', 'verbum', 'verbum'),
    _noun('bellum', 2, 'n', 'war', 'bellum', 'bellum'),
    _noun('donum', 2, 'n', 'gift', 'donum', 'donum'),
    _noun('oppidum', 2, 'n', 'town', 'oppidum', 'oppidum'),
    # High-frequency 3rd declension
    _noun('avis', 3, 'f', 'bird', 'avis', 'avem', note='3rd decl intro'),
    _noun('rex', 3, 'm', 'king', 'rex', 'regem', note='3rd decl intro'),
)

VERBS = (
    # Emotion / judgment
    Verb('amo', 'amō', 'amat', 'I love', 'loves', '1st conj (-āre): -at'),
    Verb('timeo', 'timeō', 'timet', 'I fear', 'fears', '2nd conj (-ēre): -et'),
    Verb('laudo', 'laudō', 'laudat', 'I praise', 'praises', '1st conj (-āre): -at'),
    Verb('culpo', 'culpō', 'culpat', 'I blame', 'blames', '1st conj (-āre): -at'),
    # Motion
    Verb('ambulo', 'ambulō', 'ambulat', 'I walk', 'walks', '1st conj (-āre): -at'),
    Verb('curro', 'currō', 'currit', 'I run', 'runs', '3rd conj (-ere): -it'),
    Verb('venio', 'veniō', 'venit', 'I come', 'comes', '4th conj (-īre): -it'),
    Verb('discedo', 'discedō', 'discedit', 'I depart', 'departs', '3rd conj (-ere): -it'),
    Verb('redeo', 'redeō', 'redit', 'I return', 'returns', 'irregular (-īre): -it'),
    # Physical actions / transfer
    Verb('porto', 'portō', 'portat', 'I carry', 'carries', '1st conj (-āre): -at'),
    Verb('teneo', 'teneō', 'tenet', 'I hold', 'holds', '2nd conj (-ēre): -et'),
    Verb('capio', 'capiō', 'capit', 'I take', 'takes', '3rd-io conj: -it'),
    Verb('do', 'dō', 'dat', 'I give', 'gives', '1st conj (-āre): -at'),
    Verb('servo', 'servō', 'servat', 'I save / keep', 'saves', '1st conj (-āre): -at'),
    Verb('paro', 'parō', 'parat', 'I prepare', 'prepares', '1st conj (-āre): -at'),
    # Observation / communication
    Verb('video', 'videō', 'videt', 'I see', 'sees', '2nd conj (-ēre): -et'),
    Verb('audio', 'audiō', 'audit', 'I hear', 'hears', '4th conj (-īre): -it'),
    Verb('voco', 'vocō', 'vocat', 'I call', 'calls', '1st conj (-āre): -at'),
    Verb('specto', 'spectō', 'spectat', 'I watch', 'watches', '1st conj (-āre): -at'),
    Verb('narro', 'narrō', 'narrat', 'I tell', 'tells', '1st conj (-āre): -at'),
    # Location / state
    Verb('habito', 'habitō', 'habitat', 'I live (inhabit)', 'inhabits', '1st conj (-āre): -at'),
    Verb('defendo', 'defendō', 'defendit', 'I defend', 'defends', '3rd conj (-ere): -it'),
)

ADJECTIVES = (
    Adjective('bonus', 'bonus', 'good', {
        'nom_sg': {'m': 'bonus', 'f': 'bona', 'n': 'bonum'},
        'acc_sg': {'m': 'bonum', 'f': 'bonam', 'n': 'bonum'},
    }),
    Adjective('magnus', 'magnus', 'big / great', {
        'nom_sg': {'m': 'magnus', 'f': 'magna', 'n': 'magnum'},
        'acc_sg': {'m': 'magnum', 'f': 'magnam', 'n': 'magnum'},
    }),
    Adjective('parvus', 'parvus', 'small', {
        'nom_sg': {'m': 'parvus', 'f': 'parva', 'n': 'parvum'},
        'acc_sg': {'m': 'parvum', 'f': 'parvam', 'n': 'parvum'},
    }),
    Adjective('celer', 'celer', 'fast', {
        'nom_sg': {'m': 'celer', 'f': 'celeris', 'n': 'celere'},
        'acc_sg': {'m': 'celerem', 'f': 'celerem', 'n': 'celere'},
    }, note='3rd decl adjective, used lightly as a challenge word.'),
)

DEFAULT_LEXICON = Lexicon(NOUNS, VERBS, ADJECTIVES)


def _check_case(case: str) -> None:
    if case not in CASES:
        raise ValueError(f"Unknown case: {case!r}")


def resolve_noun_form(noun: Noun, case: Case) -> str:
    """Surface form of a noun in the given case ('' when not authored)."""
    _check_case(case)
    return noun.forms.get(case) or ''


def resolve_adjective_form(adj: Adjective, case: Case, gender: Gender) -> str:
    """Agreeing form of an adjective; falls back to the lemma for missing cells."""
    _check_case(case)
    return (adj.forms.get(case) or {}).get(gender) or adj.lemma


def resolve_verb_form(verb: Verb) -> str:
    """Present third person singular."""
    return verb.pres_3s


def check_lexicon(lexicon: Lexicon) -> list[str]:
    """Report content defects. Returns an empty list for a clean lexicon."""
    defects = []
    seen = set()
    for entry in (*lexicon.nouns, *lexicon.verbs, *lexicon.adjectives):
        if entry.id in seen:
            defects.append(f"duplicate id: {entry.id}")
        seen.add(entry.id)

    for noun in lexicon.nouns:
        if noun.gender not in GENDERS:
            defects.append(f"noun {noun.id}: unknown gender {noun.gender!r}")
        if noun.declension not in (1, 2, 3):
            defects.append(f"noun {noun.id}: unknown declension {noun.declension}")
        for case in CASES:
            if not noun.forms.get(case):
                defects.append(f"noun {noun.id}: missing {case}")

    for verb in lexicon.verbs:
        if not verb.pres_3s:
            defects.append(f"verb {verb.id}: missing 3rd person form")
        if not verb.meaning_3s:
            defects.append(f"verb {verb.id}: missing 3rd person gloss")

    for adj in lexicon.adjectives:
        for case in CASES:
            for gender in GENDERS:
                if not (adj.forms.get(case) or {}).get(gender):
                    defects.append(f"adjective {adj.id}: missing {case}/{gender}")

    if len(lexicon.nouns) < 2:
        defects.append("need at least two nouns")
    if not lexicon.verbs:
        defects.append("need at least one verb")
    return defects
