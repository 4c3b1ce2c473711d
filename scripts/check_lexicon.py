#!/usr/bin/env python3
"""Check the built-in lexicon for missing forms and other content defects."""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.generator import build_match_pool
from core.lexicon import CASES, DEFAULT_LEXICON, check_lexicon, resolve_noun_form


def main():
    lexicon = DEFAULT_LEXICON
    print(f"Nouns: {len(lexicon.nouns)}, verbs: {len(lexicon.verbs)}, "
          f"adjectives: {len(lexicon.adjectives)}")
    print(f"Match pool: {len(build_match_pool(lexicon))} items")

    # Neuter nouns are expected here; anything else is suspicious
    same = [n for n in lexicon.nouns
            if len({resolve_noun_form(n, c) for c in CASES}) == 1]
    for noun in same:
        flag = '' if noun.gender == 'n' else '  <-- check'
        print(f"  nom = acc: {noun.id} ({noun.gender}){flag}")

    defects = check_lexicon(lexicon)
    if defects:
        print(f"\n{len(defects)} defect(s):")
        for defect in defects:
            print(f"  - {defect}")
        return 1
    print("\nLexicon OK")
    return 0


if __name__ == '__main__':
    sys.exit(main())
