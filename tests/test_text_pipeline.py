# tests/test_text_pipeline.py

from quote_finder.application.normalizer import looks_like_markup, normalize_text
from quote_finder.application.segmenter import MIN_QUOTE_LEN, split_sentences


# ── Normalizer ────────────────────────────────────────────────────────────────

def test_plain_text_whitespace_is_collapsed():
    assert normalize_text("  Hello \n\n  world\t again  ") == "Hello world again"


def test_markup_reduced_to_body_text_without_scripts_or_styles():
    html = (
        "<html><head><style>p { color: red; }</style><title>Ignored title</title></head>"
        "<body><p>Hello   world.</p><script>var x = 1;</script><p>Second</p></body></html>"
    )
    assert normalize_text(html) == "Hello world. Second"


def test_markup_without_body_uses_whole_fragment():
    assert normalize_text("<p>Just a <b>fragment</b> here</p>") == "Just a fragment here"


def test_angle_brackets_in_plain_text_survive():
    result = normalize_text("5 < 6 and 7 > 3")
    assert "5" in result and "6 and 7" in result


def test_looks_like_markup_requires_both_brackets():
    assert looks_like_markup("<p>x</p>") is True
    assert looks_like_markup("a < b") is False
    assert looks_like_markup("a > b") is False


def test_empty_input_normalizes_to_empty_string():
    assert normalize_text("") == ""
    assert normalize_text(None) == ""


# ── Sentence segmenter ────────────────────────────────────────────────────────

def test_split_keeps_punctuation_and_drops_short_units():
    text = (
        "First sentence is long enough here. Short. "
        "Another sentence that is long enough! Is this a question that is long?"
    )
    sentences = split_sentences(text)

    assert [s.text for s in sentences] == [
        "First sentence is long enough here.",
        "Another sentence that is long enough!",
        "Is this a question that is long?",
    ]


def test_indices_are_dense_after_filtering():
    text = "Tiny. This sentence is certainly long enough. Also tiny. And this one is long enough too."
    sentences = split_sentences(text)

    assert [s.index for s in sentences] == list(range(len(sentences)))
    assert len(sentences) == 2


def test_unit_of_exactly_min_length_is_kept():
    exact = "abcdefghijklmnopqrs."
    assert len(exact) == MIN_QUOTE_LEN
    assert [s.text for s in split_sentences(exact)] == [exact]


def test_no_split_without_whitespace_after_punctuation():
    sentences = split_sentences("Version 2.5 of the library shipped with many fixes today.")
    assert len(sentences) == 1
