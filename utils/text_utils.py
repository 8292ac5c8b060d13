"""
Text Utilities

Token estimation, sentence-aligned chunking, title generation and model
output post-processing. Everything in this module is pure and synchronous.
"""

import math
import re
from datetime import date
from typing import List, Optional

# Default token budget for a single model call
DEFAULT_MAX_TOKENS = 15000

# Approximate characters per model token
CHARS_PER_TOKEN = 4

TITLE_MAX_LENGTH = 60
TITLE_MIN_LENGTH = 10

_SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+')
_TITLE_BOUNDARY = re.compile(r'[.!?]')

# Applied in order by clean_generated_content
_OUTPUT_CLEANUP_RULES = [
    # Example markers
    (re.compile(r'\*\*example\*\*', re.IGNORECASE), ''),
    (re.compile(r'\[example\]', re.IGNORECASE), ''),
    (re.compile(r'\(example\)', re.IGNORECASE), ''),
    # Generic placeholders
    (re.compile(r'\[(?:insert|add|include|your|company|brand).*?\]', re.IGNORECASE), ''),
    # Asterisk runs
    (re.compile(r'\*\*\*+'), '**'),
    (re.compile(r'\*\*\s*\*\*'), ''),
    # Boilerplate sentences
    (re.compile(r'This is just an example.*?\.', re.IGNORECASE), ''),
    (re.compile(r'Note: This is.*?\.', re.IGNORECASE), ''),
    (re.compile(r'Disclaimer:.*?\.', re.IGNORECASE), ''),
    # Collapse runs of blank lines
    (re.compile(r'\n\s*\n\s*\n'), '\n\n'),
]


def estimate_tokens(text: str) -> int:
    """
    Estimate the model token count of a text from its character length.

    This is the usual ~4 characters per token heuristic, not a real
    tokenizer.

    Args:
        text: Any string, including empty

    Returns:
        ceil(len(text) / 4); 0 for the empty string
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def split_sentences(text: str) -> List[str]:
    """
    Split text into sentences.

    A sentence ends at '.', '!' or '?' followed by whitespace. The
    terminator stays attached to its sentence and the whitespace is dropped.

    Args:
        text: Natural-language prose

    Returns:
        Sentences in original order; empty list for blank text
    """
    stripped = text.strip()
    if not stripped:
        return []
    return _SENTENCE_BOUNDARY.split(stripped)


def chunk_text(text: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> List[str]:
    """
    Split text into ordered chunks of whole sentences under a token budget.

    Sentences are accumulated greedily and joined with a single space. A
    sentence that would push the current chunk over the budget starts a new
    chunk. A sentence that alone exceeds the budget is emitted whole in its
    own chunk; it is never split.

    The budget is checked against the estimate of the joined candidate chunk,
    not the sum of per-sentence estimates. Summing rounds each sentence up
    separately and ignores the joining space, so it can both reject chunks
    that fit and accept chunks whose real estimate is over the budget.

    Args:
        text: Text to split (may be empty)
        max_tokens: Positive token budget per chunk

    Returns:
        Chunks in original order, each non-empty
    """
    chunks: List[str] = []
    current = ""

    for sentence in split_sentences(text):
        candidate = f"{current} {sentence}" if current else sentence

        if current and estimate_tokens(candidate) > max_tokens:
            chunks.append(current.strip())
            current = sentence
        else:
            current = candidate

    if current.strip():
        chunks.append(current.strip())

    return chunks


def truncate(text: str, length: int) -> str:
    """Cut text to at most `length` characters at a word boundary, adding '...'."""
    if len(text) <= length:
        return text

    truncated = text[:length]
    last_space = truncated.rfind(' ')

    if last_space == -1:
        return truncated + '...'
    return truncated[:last_space] + '...'


def generate_title(text: str, language: str = "en", today: Optional[date] = None) -> str:
    """
    Derive a history title from a transcription.

    Uses the first sentence truncated to 60 characters. Titles shorter than
    10 characters are replaced with a dated label ("Memo 10/19/2026" in
    English, "Notat 19.10.2026" in Norwegian).

    Args:
        text: Transcription text
        language: 'en' or 'no'
        today: Date for the fallback label (defaults to today)

    Returns:
        Title string
    """
    first_sentence = _TITLE_BOUNDARY.split(text, maxsplit=1)[0].strip()
    title = truncate(first_sentence, TITLE_MAX_LENGTH)

    if len(title) < TITLE_MIN_LENGTH:
        today = today or date.today()
        if language == "no":
            return f"Notat {today.day}.{today.month}.{today.year}"
        return f"Memo {today.month}/{today.day}/{today.year}"

    return title


def clean_generated_content(content: str) -> str:
    """
    Remove template residue from model output.

    Strips "example" markers, bracketed placeholders such as
    "[insert company name]", stray asterisk runs and boilerplate
    disclaimers, then collapses repeated blank lines.
    """
    for pattern, replacement in _OUTPUT_CLEANUP_RULES:
        content = pattern.sub(replacement, content)
    return content.strip()
