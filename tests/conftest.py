import pytest

from wordart.core.model.content import (
    SentenceSegment,
    SentenceSlide,
    WordCardGridSlide,
    WordCardItem,
    WordExampleSegment,
    WordSlide,
)


class CyclingPicker:
    """Deterministic stand-in for random color choice: walks the pool in order."""

    def __init__(self):
        self.calls = 0

    def __call__(self, pool):
        c = pool[self.calls % len(pool)]
        self.calls += 1
        return c


@pytest.fixture
def picker():
    return CyclingPicker()


@pytest.fixture
def sentence_slide():
    return SentenceSlide(segments=(SentenceSegment("I", "我"), SentenceSegment("like", "喜欢")))


@pytest.fixture
def word_slide():
    return WordSlide(
        word="Apple",
        example1=(
            WordExampleSegment("I", "我"),
            WordExampleSegment("eat", "吃"),
            WordExampleSegment("an apple", "一个苹果"),
        ),
        example2=(
            WordExampleSegment("The apple", "这个苹果"),
            WordExampleSegment("is red", "是红色的"),
        ),
    )


def _cards(n):
    return [WordCardItem(f"Word{i}", f"/w{i}/", f"词{i}") for i in range(n)]


@pytest.fixture
def make_cards():
    return _cards


@pytest.fixture
def card_grid():
    return WordCardGridSlide(items=tuple(_cards(3)))
