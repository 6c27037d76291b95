"""
Clés de position (fractional indexing) pour ordonner les lignes.

Les clés viennent de la lib fractional-indexing: partie entière dont le
premier caractère donne la longueur + partie fractionnaire en base 62 qui ne
finit jamais par '0'. Elles se comparent en ordre d'octets (str < str en
Python, COLLATE "C" sur Postgres).

key_between(a, b) renvoie toujours une clé strictement entre a et b sans
toucher aux autres clés, donc insérer/déplacer une ligne = 1 seule écriture.
Par-dessus on ajoute un suffixe aléatoire (jitter) pour que deux sessions qui
insèrent au même endroit n'obtiennent pas la même clé.
"""

import random
from typing import Optional

from fractional_indexing import BASE_62_DIGITS, FIError, generate_key_between, validate_order_key

from blockdb.core.config import settings

__all__ = ["BASE_62_DIGITS", "key_between", "jittered_key_between", "random_digits", "validate_order_key"]

_rng = random.SystemRandom()


def key_between(a: Optional[str], b: Optional[str]) -> str:
    """Clé déterministe strictement entre a et b. None = pas de borne de ce côté."""
    try:
        return generate_key_between(a, b)
    except FIError as e:
        # clé invalide ou bornes inversées: erreur de programmation
        raise ValueError(str(e)) from e


def random_digits(length: int) -> str:
    # le dernier chiffre n'est jamais '0' pour garder une clé valide
    if length < 1:
        return ""
    body = "".join(_rng.choice(BASE_62_DIGITS) for _ in range(length - 1))
    return body + _rng.choice(BASE_62_DIGITS[1:])


def jittered_key_between(a: Optional[str], b: Optional[str], jitter: Optional[int] = None) -> str:
    """Comme key_between mais avec un suffixe aléatoire.

    Deux sessions qui insèrent au même endroit obtiennent des clés
    différentes (62^jitter possibilités) mais toujours entre a et b.
    """
    length = settings.POSITION_JITTER_DIGITS if jitter is None else jitter
    key = key_between(a, b)
    while True:
        candidate = key + random_digits(length)
        if b is None or candidate < b:
            return candidate
        # key est un préfixe de b: on resserre vers b et on recommence
        key = key_between(key, b)
