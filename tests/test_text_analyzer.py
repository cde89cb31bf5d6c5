import pytest

from conftest import DETAILED_CONTENT
from tiptriage.text_analyzer import TextAnalyzer, analyze_text


def test_detailed_paragraph_beats_short_tip():
    detailed = analyze_text(DETAILED_CONTENT)
    short = analyze_text("saw her today")
    assert detailed.score > short.score
    assert detailed.detail_richness > short.detail_richness


def test_all_caps_lowers_coherence():
    sentence = "I saw the missing boy near the park entrance on Main street this morning."
    assert analyze_text(sentence.upper()).coherence < analyze_text(sentence).coherence


def test_repetition_lowers_coherence():
    repeated = analyze_text("help help help help help help help help.")
    varied = analyze_text("She crossed the bridge and entered the old motel.")
    assert repeated.coherence < varied.coherence


@pytest.mark.parametrize(
    "content",
    [
        "",
        "definitely certain sure positive confirmed absolutely clearly saw seen recognized",
        "maybe perhaps possibly might probably unsure guess think not sure could have",
        "!!!???",
    ],
)
def test_sentiment_stays_in_range(content):
    result = analyze_text(content)
    assert -1.0 <= result.sentiment <= 1.0
    assert 0.0 <= result.score <= 100.0


def test_not_sure_counts_as_hedge_only():
    analyzer = TextAnalyzer()
    assert analyzer.sentiment("I am not sure") < 0
    assert analyzer.sentiment("I am sure") > 0


def test_empty_content_is_vague():
    result = analyze_text("")
    assert result.detail_richness == TextAnalyzer.BASE_DETAIL
    assert "vague" in result.description


def test_short_all_caps_sentence_lowers_coherence():
    assert analyze_text("I SAW HER.").coherence < analyze_text("I saw her.").coherence
