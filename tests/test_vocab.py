import pytest

from sieve.data_utils import load_lexicon, load_opening_table
from sieve.errors import UnsupportedWordLength
from sieve.vocab import Lexicon, WordVocab


def test_word_vocab_basics():
    v = WordVocab(["crane", "trace"])
    assert len(v) == 2
    assert v.word_length == 5
    assert "crane" in v and "slate" not in v
    assert list(v) == ["crane", "trace"]


def test_word_vocab_is_read_only():
    v = WordVocab(["crane", "trace"])
    v.words().append("slate")
    assert v.words() == ["crane", "trace"]


@pytest.mark.parametrize(
    "words, error",
    [
        ([], ValueError),
        (["crane", "crane"], ValueError),
        (["crane", "tool"], ValueError),
        (["Crane"], ValueError),
        (["cr4ne"], ValueError),
        ("crane", TypeError),
        ([1, 2], TypeError),
    ],
)
def test_word_vocab_rejects_bad_input(words, error):
    with pytest.raises(error):
        WordVocab(words)


def test_lexicon_groups_by_length():
    lexicon = Lexicon.from_words(["Crane", "tool", "crane", "it's", "", "loot", "trace"])
    assert lexicon.available_lengths() == [4, 5]
    assert lexicon.vocab(5).words() == ["crane", "trace"]
    assert lexicon.vocab(4).words() == ["tool", "loot"]
    assert 5 in lexicon and 6 not in lexicon
    with pytest.raises(UnsupportedWordLength):
        lexicon.vocab(6)


def test_lexicon_can_keep_selected_lengths():
    lexicon = Lexicon.from_words(["crane", "tool"], lengths=[4])
    assert lexicon.available_lengths() == [4]


def test_load_lexicon_from_text(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("crane\nTrace\n\ntool\nnull\ncrane\n", encoding="utf-8")
    lexicon = load_lexicon(str(path))
    assert lexicon.vocab(5).words() == ["crane", "trace"]
    assert lexicon.vocab(4).words() == ["tool", "null"]


def test_load_lexicon_from_csv(tmp_path):
    path = tmp_path / "word_list.csv"
    path.write_text("word,day\ncrane,1\ntrace,\nslate,3\n", encoding="utf-8")
    assert load_lexicon(str(path)).vocab(5).words() == ["crane", "trace", "slate"]
    with pytest.raises(KeyError):
        load_lexicon(str(path), column="answer")


def test_load_opening_table(tmp_path):
    path = tmp_path / "openers.csv"
    path.write_text("guess,entropy,exp_remaining,worst_case,partitions\n"
                    "crane,5.1,60.0,200,140\nslate,5.8,50.0,180,150\n", encoding="utf-8")
    table = load_opening_table(str(path))
    assert list(table) == ["slate", "crane"]
    assert table["slate"] == pytest.approx(5.8)
