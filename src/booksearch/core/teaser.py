"""
Result teasers: the most relevant run of words from a section body.

Every word of the (HTML-escaped) body gets a weight:
    - 40 when its stem starts with the stem of a search term
    - 8 when it starts a sentence
    - 2 otherwise
A fixed-size window slides over the words and the window with the highest
total weight becomes the teaser. If several windows share the maximum, the
last one wins. Matched words are wrapped in <em>.
"""

import html
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from booksearch.core.index import stem_word

SEARCHTERM_WEIGHT = 40
SENTENCE_START_WEIGHT = 8
NORMAL_WEIGHT = 2

EMPHASIS_START = "<em>"
EMPHASIS_END = "</em>"

SENTENCE_SEPARATOR = ". "
WORD_SEPARATOR = " "


@dataclass
class WeightedWord:
    text: str
    weight: int
    offset: int  # position in the escaped body


def weigh_words(
    body: str,
    stemmed_terms: Sequence[str],
    stemmer: Callable[[str], str] = stem_word,
) -> Tuple[List[WeightedWord], bool]:
    """Split an escaped body into weighted words.

    Returns:
        (words, whether any word matched a search term)
    """
    words: List[WeightedWord] = []
    found = False
    offset = 0

    for sentence in body.split(SENTENCE_SEPARATOR):
        weight = SENTENCE_START_WEIGHT
        for word in sentence.split(WORD_SEPARATOR):
            if word:
                stem = stemmer(word)
                if any(stem.startswith(term) for term in stemmed_terms):
                    weight = SEARCHTERM_WEIGHT
                    found = True
                words.append(WeightedWord(word, weight, offset))
                weight = NORMAL_WEIGHT
            # the word plus the ' ' after it (or the '.' ending the sentence)
            offset += len(word) + 1
        # the second character of the '. ' boundary
        offset += 1

    return words, found


def window_weights(words: Sequence[WeightedWord], size: int) -> List[int]:
    """Total weight of every window of `size` consecutive words."""
    current = sum(word.weight for word in words[:size])
    sums = [current]
    for i in range(len(words) - size):
        current -= words[i].weight
        current += words[i + size].weight
        sums.append(current)
    return sums


def best_window(sums: Sequence[int]) -> int:
    """Index of the heaviest window; the last one among equals."""
    best_sum = 0
    best_index = 0
    for i in range(len(sums) - 1, -1, -1):
        if sums[i] > best_sum:
            best_sum = sums[i]
            best_index = i
    return best_index


def make_teaser(
    body: str,
    terms: Sequence[str],
    word_count: int,
    stemmer: Callable[[str], str] = stem_word,
) -> str:
    """
    Build an HTML-safe teaser for a result body.

    Args:
        body: Raw (unescaped) section text
        terms: Search terms as typed, in input order
        word_count: Maximum number of words in the teaser
        stemmer: Word -> stem function; must match the one used for terms

    Returns:
        Escaped excerpt with matched words wrapped in <em>...</em>
    """
    escaped = html.escape(body)
    stemmed_terms = [stem for stem in (stemmer(term) for term in terms if term) if stem]

    words, found = weigh_words(escaped, stemmed_terms, stemmer)
    if not words:
        return escaped

    size = min(len(words), word_count)
    start = best_window(window_weights(words, size)) if found else 0

    parts: List[str] = []
    position = words[start].offset
    for word in words[start:start + size]:
        if position < word.offset:
            # separator text between the previous word and this one
            parts.append(escaped[position:word.offset])
        end = word.offset + len(word.text)
        if word.weight == SEARCHTERM_WEIGHT:
            parts.append(EMPHASIS_START + escaped[word.offset:end] + EMPHASIS_END)
        else:
            parts.append(escaped[word.offset:end])
        position = end

    return "".join(parts)


__all__ = ["WeightedWord", "make_teaser", "weigh_words", "window_weights", "best_window"]
