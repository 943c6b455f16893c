# quiz_manager.py

import logging
import re
from typing import Iterable, Optional

import requests

from catalog import Champion
from quizmind.pipeline import ERROR_MARKER, ModelProvider

logger = logging.getLogger(__name__)

FALLBACK_HINT = (
    "The AI gods are silent right now. "
    "Try again later or skip this champion."
)

HINT_LANGUAGE = "English"
HINT_MAX_WORDS = 25

_NON_ALNUM = re.compile(r"[^a-z0-9]")


class QuizManager:
    provider: ModelProvider = None  # Will be set when the bot starts

    @classmethod
    def initialize(cls, model_provider: ModelProvider):
        """Assign the ModelProvider used by the hint oracle."""
        cls.provider = model_provider
        logger.debug("✅ QuizManager initialized with provider %r", model_provider)

    @staticmethod
    def normalize(raw: str) -> str:
        """
        Canonical comparison key: lower-case, then drop everything outside [a-z0-9].
        "Kai'Sa" -> "kaisa", "Dr. Mundo" -> "drmundo". Accented letters are dropped, not folded.
        """
        return _NON_ALNUM.sub("", raw.lower())

    @classmethod
    def match(cls, key: str, catalog: Iterable[Champion]) -> Optional[Champion]:
        """
        Return the first champion whose normalized id or name equals `key`.
        An empty key never matches.
        """
        if not key:
            return None
        for champ in catalog:
            if cls.normalize(champ.id) == key or cls.normalize(champ.name) == key:
                return champ
        return None

    @staticmethod
    def build_hint_prompt(champion: Champion) -> str:
        return (
            "You are a League of Legends expert.\n"
            f"Give me a hard, enigmatic hint about the champion \"{champion.name}\" ({champion.title}).\n\n"
            "Rules:\n"
            f"1. Answer in {HINT_LANGUAGE}.\n"
            "2. Do NOT mention the champion's name in the hint.\n"
            "3. Do NOT mention the champion's exact title.\n"
            "4. Focus on their abilities, lore, or visual traits.\n"
            f"5. At most {HINT_MAX_WORDS} words.\n"
            "6. Be creative, but direct."
        )

    @staticmethod
    def leaks_answer(hint: str, champion: Champion) -> bool:
        """True when the hint spells out the champion's name, a word of it, or the exact title."""
        if re.search(rf"\b{re.escape(champion.name)}\b", hint, re.IGNORECASE):
            return True
        # Short name parts ("Dr", "IV") are too common to count on their own
        for word in re.findall(r"[A-Za-z0-9]+", champion.name):
            if len(word) >= 3 and re.search(rf"\b{word}\b", hint, re.IGNORECASE):
                return True
        return bool(champion.title) and champion.title.lower() in hint.lower()

    @classmethod
    def get_hint(cls, champion: Champion) -> str:
        """
        Ask the provider for a clue about `champion`.
        Never raises: every failure ends in FALLBACK_HINT.
        """
        logger.debug("▶️ Enter get_hint(champion=%r)", champion.id)
        if not cls.provider:
            logger.warning("⚠️ No hint provider configured, using fallback")
            return FALLBACK_HINT

        try:
            raw = cls.provider.request(cls.build_hint_prompt(champion))
        except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Error fetching hint: %s", e)
            return FALLBACK_HINT

        logger.debug("🔍 Raw from LLM:\n%s", raw)
        if not isinstance(raw, str) or not raw.strip():
            logger.debug("⚠️ Empty or malformed hint for %s: %r", champion.id, raw)
            return FALLBACK_HINT
        if raw.startswith(ERROR_MARKER):
            logger.error("Error fetching hint: %s", raw)
            return FALLBACK_HINT

        hint = raw.strip().strip('"').strip()
        if cls.leaks_answer(hint, champion):
            logger.debug("❓ Hint leaked the answer for %s, using fallback", champion.id)
            return FALLBACK_HINT

        logger.debug("✅ Hint ready for %s", champion.id)
        return hint
