"""Motivational quotes shown on the today screen."""

import random
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

EPOCH = date(1970, 1, 1)


class Quote(BaseModel):
    """A quote and its author."""

    text: str = Field(..., min_length=1)
    author: str = Field(default="Unknown")

    model_config = {"frozen": True}


QUOTES = [
    Quote(text="The journey of a thousand miles begins with one step.", author="Lao Tzu"),
    Quote(text="What you do today can improve all your tomorrows.", author="Ralph Marston"),
    Quote(text="The only way to do great work is to love what you do.", author="Steve Jobs"),
    Quote(text="Believe you can and you're halfway there.", author="Theodore Roosevelt"),
    Quote(
        text="The best time to plant a tree was 20 years ago. The second best time is now.",
        author="Chinese Proverb",
    ),
    Quote(text="Great things never come from comfort zones."),
    Quote(text="Success doesn't just find you. You have to go out and get it."),
    Quote(text="Dream bigger. Do bigger."),
    Quote(text="Don't stop when you're tired. Stop when you're done."),
    Quote(text="Wake up with determination. Go to bed with satisfaction."),
    Quote(
        text="Do something today that your future self will thank you for.",
        author="Sean Patrick Flanery",
    ),
    Quote(text="Little things make big days."),
    Quote(text="It's going to be hard, but hard does not mean impossible."),
    Quote(text="Don't wait for opportunity. Create it."),
    Quote(text="The key to success is to focus on goals, not obstacles."),
    Quote(text="Be grateful for what you have while working for what you want."),
    Quote(text="The secret of getting ahead is getting started.", author="Mark Twain"),
    Quote(
        text="Everything you've ever wanted is on the other side of fear.",
        author="George Addair",
    ),
    Quote(text="The only impossible journey is the one you never begin.", author="Tony Robbins"),
    Quote(text="In the middle of every difficulty lies opportunity.", author="Albert Einstein"),
    Quote(text="What we think, we become.", author="Buddha"),
]


class QuoteService:
    """Picks quotes from a fixed list."""

    def __init__(self, quotes: Optional[list[Quote]] = None):
        self._quotes = list(quotes or QUOTES)

    def daily_quote(self, today: Optional[date] = None) -> Quote:
        """Return the quote for a day; the same day always gets the same quote."""
        today = today or date.today()
        index = (today - EPOCH).days % len(self._quotes)
        return self._quotes[index]

    def random_quote(self) -> Quote:
        return random.choice(self._quotes)
