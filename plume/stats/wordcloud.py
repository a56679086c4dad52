"""Word cloud generation from journal entries."""

import re
from collections import Counter

from pydantic import BaseModel, Field

from plume.models import Entry

DEFAULT_MAX_WORDS = 30
MIN_WORD_LENGTH = 3

# Articles, pronouns, auxiliaries and filler adjectives/adverbs
STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with", "i", "me", "my", "myself", "we", "our",
    "you", "your", "today", "yesterday", "really", "very", "just", "so",
    "also", "then", "than", "only", "even", "much", "more", "most",
    "some", "any", "many", "few", "good", "well", "better", "best",
})

_NON_ALNUM = re.compile(r"[\W_]+")


class WordCloudItem(BaseModel):
    """A word with its frequency and normalized weight."""

    text: str = Field(..., min_length=1)
    count: int = Field(..., ge=1)
    weight: float = Field(..., ge=0.0, le=1.0, description="Min-max normalized frequency")

    model_config = {"frozen": True}


def entry_texts(entry: Entry) -> list[str]:
    """Collect every piece of text in an entry."""
    texts = []
    if entry.journal:
        texts.append(entry.journal)
    if entry.memory:
        texts.append(entry.memory)
    texts.extend(entry.gratitudes)
    texts.extend(entry.accomplishments)
    return texts


def tokenize(text: str) -> list[str]:
    """Lowercase text and keep significant alphanumeric words."""
    return [
        word
        for word in _NON_ALNUM.split(text.lower())
        if len(word) >= MIN_WORD_LENGTH and word not in STOP_WORDS
    ]


def word_frequencies(entries: list[Entry]) -> Counter:
    """Count significant words across all entries."""
    counts: Counter = Counter()
    for entry in entries:
        for text in entry_texts(entry):
            counts.update(tokenize(text))
    return counts


def generate_word_cloud(
    entries: list[Entry], max_words: int = DEFAULT_MAX_WORDS
) -> list[WordCloudItem]:
    """Rank the most frequent words and weight them for display.

    Words are ordered by descending count, ties alphabetically. Weights
    are min-max normalized over the selected words, all 1.0 when every
    count is equal.

    Args:
        entries: Entries to draw text from.
        max_words: Maximum number of words to return.

    Returns:
        List of word cloud items, empty when no words survive filtering.
    """
    if max_words <= 0:
        return []

    counts = word_frequencies(entries)
    top = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:max_words]
    if not top:
        return []

    max_count = top[0][1]
    min_count = top[-1][1]
    spread = max_count - min_count

    return [
        WordCloudItem(
            text=word,
            count=count,
            weight=(count - min_count) / spread if spread else 1.0,
        )
        for word, count in top
    ]
