import pytest

from conftest import DETAILED_CONTENT
from tiptriage.duplicate_detector import DuplicateDetector, detect_duplicates
from tiptriage.models import ExistingTip


def test_identical_content_is_duplicate(make_tip):
    result = detect_duplicates(make_tip(), [ExistingTip(id="tip-0", content=DETAILED_CONTENT)])
    assert result.is_duplicate
    assert "tip-0" in result.duplicate_ids
    assert result.similarity_scores["tip-0"] == 1.0


def test_unrelated_content_is_not_duplicate(make_tip):
    existing = ExistingTip(id="tip-0", content="Car seen speeding on the highway towards Quebec City at dawn.")
    result = detect_duplicates(make_tip(), [existing])
    assert not result.is_duplicate
    assert result.duplicate_ids == []


def test_same_tip_id_is_ignored(make_tip, settings):
    result = DuplicateDetector(settings).detect(make_tip(), [ExistingTip(id="tip-1", content=DETAILED_CONTENT)])
    assert not result.is_duplicate
    assert result.similarity_scores == {}


def test_case_and_accents_are_ignored(make_tip, settings):
    tip = make_tip(content="Vue au café près de la gare")
    existing = ExistingTip(id="tip-0", content="VUE AU CAFE PRES DE LA GARE")
    assert DuplicateDetector(settings).detect(tip, [existing]).is_duplicate


@pytest.mark.parametrize("content", ["", "!!!", "\U0001F642\U0001F642\U0001F642 ???"])
def test_identical_tokenless_content_is_duplicate(make_tip, settings, content):
    result = DuplicateDetector(settings).detect(make_tip(content=content), [ExistingTip(id="tip-0", content=content)])
    assert result.is_duplicate
    assert result.duplicate_ids == ["tip-0"]


def test_different_tokenless_content_is_not_duplicate(make_tip, settings):
    result = DuplicateDetector(settings).detect(make_tip(content="!!!"), [ExistingTip(id="tip-0", content="???")])
    assert not result.is_duplicate
