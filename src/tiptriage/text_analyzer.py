from __future__ import annotations

import math
import re

from .models import TextAnalysis


class TextAnalyzer:
    """Lexical scoring of tip free text: detail richness, coherence and certainty."""

    DATE_PATTERN = re.compile(
        r"\b\d{1,2}[/-]\d{1,2}(?:[/-]\d{2,4})?\b"
        r"|\b(?:january|february|march|april|may|june|july|august|september|october|november|december)\b"
        r"|\b(?:yesterday|today|tonight|last night|monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
        re.IGNORECASE,
    )
    TIME_PATTERN = re.compile(
        r"\b\d{1,2}:\d{2}\b|\b\d{1,2}\s?(?:am|pm)\b"
        r"|\b(?:morning|afternoon|evening|night|noon|midnight|am|pm)\b",
        re.IGNORECASE,
    )
    PLACE_PATTERN = re.compile(
        r"\b(?:street|avenue|road|highway|boulevard|lane|drive|store|restaurant|park|school|hospital|mall"
        r"|station|parking|bus stop|corner|intersection|near|bridge|motel|hotel|gas station)\b",
        re.IGNORECASE,
    )
    APPEARANCE_PATTERN = re.compile(
        r"\b(?:wearing|hair|tall|short|shirt|pants|jeans|jacket|coat|hat|cap|hoodie|glasses|tattoo|scar"
        r"|beard|backpack|red|blue|green|black|white|yellow|brown|grey|gray|pink|purple|orange)\b",
        re.IGNORECASE,
    )
    HEDGING_PATTERN = re.compile(
        r"\b(?:not sure|maybe|might|possibly|perhaps|unsure|think|guess|probably|could have)\b",
        re.IGNORECASE,
    )
    CERTAINTY_PATTERN = re.compile(
        r"\b(?:definitely|certain|certainly|sure|positive|positively|confirmed|recognized|recognised"
        r"|absolutely|clearly|saw|seen)\b",
        re.IGNORECASE,
    )
    SENTENCE_END_PATTERN = re.compile(r"[.!?]+")

    BASE_DETAIL = 25.0
    LENGTH_CEILING = 40.0
    LENGTH_SCALE_WORDS = 40.0
    MARKER_BONUS = 7.5
    BASE_COHERENCE = 70.0
    CAPS_TOLERANCE = 0.15
    CAPS_MAX_PENALTY = 40.0
    SENTIMENT_STEP = 0.15

    def analyze(self, content: str) -> TextAnalysis:
        content = content or ""
        words = content.split()
        detail_richness = self.detail_richness(content, len(words))
        coherence = self.coherence(content, words)
        sentiment = self.sentiment(content)

        score = detail_richness * 0.5 + coherence * 0.3 + (sentiment + 1) * 50 * 0.2
        score = round(min(100.0, max(0.0, score)), 2)

        if score >= 70:
            description = "Detailed and coherent description provided"
        elif score >= 50:
            description = "Adequate description with some details"
        else:
            description = "Limited or vague description"

        return TextAnalysis(
            score=score,
            detail_richness=detail_richness,
            coherence=coherence,
            sentiment=sentiment,
            description=f"Text analysis: {description}",
        )

    def detail_richness(self, content: str, word_count: int) -> float:
        # saturating curve: every extra word is worth less than the one before
        length_component = self.LENGTH_CEILING * (1 - math.exp(-word_count / self.LENGTH_SCALE_WORDS))
        markers = sum(
            1
            for pattern in (
                self.DATE_PATTERN,
                self.TIME_PATTERN,
                self.PLACE_PATTERN,
                self.APPEARANCE_PATTERN,
            )
            if pattern.search(content)
        )
        richness = self.BASE_DETAIL + length_component + markers * self.MARKER_BONUS
        return round(min(100.0, max(0.0, richness)), 2)

    def coherence(self, content: str, words: list[str]) -> float:
        word_count = len(words)
        coherence = self.BASE_COHERENCE

        if word_count >= 3:
            sentence_count = len(self.SENTENCE_END_PATTERN.findall(content)) or 1
            avg_words = word_count / sentence_count
            if 5 <= avg_words <= 25:
                coherence += 10
            elif avg_words < 3 or avg_words > 50:
                coherence -= 10

        letters = [ch for ch in content if ch.isalpha()]
        if letters:
            caps_ratio = sum(1 for ch in letters if ch.isupper()) / len(letters)
            excess = max(0.0, caps_ratio - self.CAPS_TOLERANCE) / (1 - self.CAPS_TOLERANCE)
            coherence -= self.CAPS_MAX_PENALTY * excess

        if word_count >= 6:
            unique_ratio = len({word.lower() for word in words}) / word_count
            if unique_ratio < 0.5:
                coherence -= (0.5 - unique_ratio) * 80

        return round(min(100.0, max(0.0, coherence)), 2)

    def sentiment(self, content: str) -> float:
        hedges = len(self.HEDGING_PATTERN.findall(content))
        # "not sure" must not also count as "sure"
        remainder = self.HEDGING_PATTERN.sub(" ", content)
        certainties = len(self.CERTAINTY_PATTERN.findall(remainder))
        sentiment = (certainties - hedges) * self.SENTIMENT_STEP
        return round(min(1.0, max(-1.0, sentiment)), 3)


_default_analyzer = TextAnalyzer()


def analyze_text(content: str) -> TextAnalysis:
    return _default_analyzer.analyze(content)
