"""
Random names, text and image URLs for NFT metadata in tests and demos.
"""

from __future__ import annotations

import random
from typing import List, Optional

_NAMES = [
    "Ada", "Alan", "Alonzo", "Anita", "Barbara", "Bjarne", "Brian", "Butler", "Charles", "Claude",
    "Dennis", "Donald", "Dorothy", "Edsger", "Evelyn", "Frances", "Fran", "Grace", "Guido", "Hedy",
    "Ivan", "Jean", "John", "Joan", "Ken", "Katherine", "Kristen", "Larry", "Leslie", "Lynn",
    "Margaret", "Mary", "Niklaus", "Ole", "Peter", "Radia", "Robin", "Ruth", "Shafi", "Sophie",
    "Stephen", "Tim", "Tony", "Ursula", "Vint", "Whitfield", "Yukihiro", "Zhores",
]
_ADJECTIVES = [
    "amber", "bold", "brave", "bright", "calm", "clever", "daring", "eager", "fancy", "fierce",
    "gentle", "golden", "happy", "hidden", "icy", "jolly", "keen", "kind", "lively", "lucky",
    "mellow", "misty", "noble", "odd", "polite", "proud", "quiet", "rapid", "rustic", "silent",
    "sleepy", "swift", "tidy", "tender", "urban", "vivid", "witty", "wild", "young", "zesty",
]
_COLORS = ["azure", "crimson", "coral", "gold", "indigo", "ivory", "jade", "olive", "plum", "teal"]
_ANIMALS = ["badger", "crane", "dolphin", "falcon", "gecko", "heron", "lynx", "otter", "panda", "wolf"]
_COUNTRIES = ["Chile", "Estonia", "Ghana", "Iceland", "Japan", "Kenya", "Nepal", "Peru", "Portugal", "Vietnam"]
_LANGUAGES = ["Basque", "Catalan", "Finnish", "Hausa", "Icelandic", "Malay", "Quechua", "Swahili", "Tamil", "Welsh"]

_DICTIONARIES = [_ADJECTIVES, _NAMES, _COLORS, _ANIMALS, _COUNTRIES, _LANGUAGES]

MAX_NAME_LENGTH = 30


def random_name(rng: Optional[random.Random] = None) -> str:
    """Capitalized adjective and first name, e.g. "Swift Grace"."""
    r = rng or random
    name = f"{r.choice(_ADJECTIVES).capitalize()} {r.choice(_NAMES)}"
    return name[:MAX_NAME_LENGTH]


def _phrase(r) -> str:
    dictionaries: List[List[str]] = list(_DICTIONARIES)
    r.shuffle(dictionaries)
    return " ".join(r.choice(words) for words in dictionaries)


def random_text(rng: Optional[random.Random] = None) -> str:
    """1 to 20 six-word phrases, each capitalized, joined with '. '."""
    r = rng or random
    count = r.randint(1, 20)
    words = [_phrase(r) for _ in range(count)]
    return ". ".join(w[:1].upper() + w[1:] for w in words)


def random_image(rng: Optional[random.Random] = None) -> str:
    r = rng or random
    return f"https://picsum.photos/seed/{r.randrange(10_000_000)}/540/670"


def random_banner(rng: Optional[random.Random] = None) -> str:
    r = rng or random
    return f"https://picsum.photos/seed/{r.randrange(10_000_000)}/1920/300"


__all__ = ["random_name", "random_text", "random_image", "random_banner", "MAX_NAME_LENGTH"]
