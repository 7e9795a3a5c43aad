"""Tests for teaser generation."""

from booksearch.core.teaser import (
    NORMAL_WEIGHT,
    SEARCHTERM_WEIGHT,
    SENTENCE_START_WEIGHT,
    WeightedWord,
    best_window,
    make_teaser,
    weigh_words,
    window_weights,
)

BODY = "The quick brown fox. The dog sleeps."


def test_teaser_centers_on_matching_word():
    teaser = make_teaser(BODY, ["dog"], 4)

    assert teaser == "fox. The <em>dog</em> sleeps."
    assert teaser.count("<em>") == 1


def test_teaser_without_terms_uses_first_window():
    assert make_teaser(BODY, [], 4) == "The quick brown fox"


def test_teaser_without_match_uses_first_window():
    assert make_teaser("Alpha beta. Gamma delta. Epsilon zeta.", ["omega"], 2) == "Alpha beta"


def test_teaser_tie_prefers_later_window():
    body = "dog one two three dog four five six"

    assert make_teaser(body, ["dog"], 4) == "<em>dog</em> four five six"


def test_teaser_matches_stemmed_forms():
    teaser = make_teaser("Nothing here. Borrowing rules apply.", ["borrowed"], 3)

    assert "<em>Borrowing</em>" in teaser


def test_teaser_escapes_html_before_slicing():
    teaser = make_teaser('a < b & "c"', ["b"], 10)

    assert teaser == "a &lt; <em>b</em> &amp; &quot;c&quot;"


def test_teaser_keeps_original_spacing():
    assert make_teaser("one  two three", [], 3) == "one  two three"


def test_teaser_of_empty_body():
    assert make_teaser("", ["x"], 5) == ""
    assert make_teaser("   ", ["x"], 5) == "   "


def test_teaser_shorter_body_than_word_count():
    assert make_teaser("Just two", ["two"], 30) == "Just <em>two</em>"


def test_teaser_ignores_empty_terms():
    # An empty term would otherwise match every word
    assert make_teaser("alpha beta gamma", ["", "beta"], 3) == "alpha <em>beta</em> gamma"


def test_weigh_words_offsets_follow_sentence_boundaries():
    words, found = weigh_words(BODY, ["dog"])

    assert found is True
    assert [(w.text, w.weight, w.offset) for w in words] == [
        ("The", SENTENCE_START_WEIGHT, 0),
        ("quick", NORMAL_WEIGHT, 4),
        ("brown", NORMAL_WEIGHT, 10),
        ("fox", NORMAL_WEIGHT, 16),
        ("The", SENTENCE_START_WEIGHT, 21),
        ("dog", SEARCHTERM_WEIGHT, 25),
        ("sleeps.", NORMAL_WEIGHT, 29),
    ]
    for word in words:
        assert BODY[word.offset:word.offset + len(word.text)] == word.text


def test_match_beats_sentence_start_weight():
    words, _ = weigh_words("Dogs bark. Cats meow.", ["dog"])

    assert words[0].weight == SEARCHTERM_WEIGHT
    assert words[2].weight == SENTENCE_START_WEIGHT


def test_window_weights_running_sum():
    words = [WeightedWord("w", weight, 0) for weight in (2, 8, 40, 2)]

    assert window_weights(words, 2) == [10, 48, 42]
    assert window_weights(words, 4) == [52]


def test_best_window_takes_last_of_equal_maxima():
    assert best_window([5, 9, 9, 1]) == 2
    assert best_window([9, 1, 1]) == 0
