# Path: core/enrichment/enricher.py
# Purpose: Attach presentation metadata to ranked gallery entries.
# Layer: core/enrichment.
# Details: The random enricher is a placeholder for a real pet-profile lookup keyed by identifier.

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from core.models.domain import GalleryEntry, MatchScores, PetProfile

BREEDS = (
    "English Bulldog", "Golden Retriever", "Labrador", "Beagle", "Poodle",
    "German Shepherd", "French Bulldog", "Boxer", "Dachshund", "Corgi",
    "Husky", "Border Collie", "Australian Shepherd", "Shiba Inu", "Pug",
)

LOCATIONS = (
    "West Hollywood, CA", "Santa Monica, CA", "Los Angeles, CA",
    "San Francisco, CA", "San Diego, CA", "Portland, OR", "Seattle, WA",
    "Denver, CO", "Austin, TX", "New York, NY", "Chicago, IL", "Miami, FL",
)

DESCRIPTIONS = (
    "{name} is a lovable companion with a heart as big as their personality! They love belly rubs and long walks.",
    "Meet {name}, a playful pup who brings joy to everyone they meet. Great with kids and other pets!",
    "{name} is looking for their forever home. They're gentle, loyal, and ready to be your best friend.",
    "This adorable {name} has a wonderful temperament and loves cuddles. Perfect for any loving family!",
    "{name} is a bundle of energy and affection. They'll keep you active and make every day brighter.",
)

SEXES = ("Male", "Female")

AGE_RANGE: Tuple[int, int] = (1, 10)
# Inclusive bounds shared by appearance, expression, and character.
SCORE_RANGE: Tuple[int, int] = (70, 99)


def format_age(age: int) -> str:
    return "1 Year" if age == 1 else f"{age} Years"


class MatchEnricher(ABC):
    """Interface returning presentation metadata for a gallery entry."""

    @abstractmethod
    def enrich(self, entry: GalleryEntry) -> PetProfile:
        """Return the profile shown next to ``entry`` in match results."""


class RandomProfileEnricher(MatchEnricher):
    """Draw every profile field uniformly from fixed option sets."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def enrich(self, entry: GalleryEntry) -> PetProfile:
        rng = self._rng
        age = rng.randint(*AGE_RANGE)
        return PetProfile(
            breed=rng.choice(BREEDS),
            age=age,
            age_text=format_age(age),
            sex=rng.choice(SEXES),
            location=rng.choice(LOCATIONS),
            description=rng.choice(DESCRIPTIONS).format(name=entry.display_name),
            match_scores=MatchScores(
                appearance=rng.randint(*SCORE_RANGE),
                expression=rng.randint(*SCORE_RANGE),
                character=rng.randint(*SCORE_RANGE),
            ),
        )
