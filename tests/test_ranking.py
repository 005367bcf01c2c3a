import math

import pytest

from sieve import ranking
from sieve.ranking import (
    GuessRanker,
    ScoredSuggestion,
    Strategy,
    partition_score,
    partition_stats,
)

POOL = ["crate", "craze", "crave"]


def test_single_candidate_has_zero_entropy():
    assert partition_score("crane", ["crate"]) == 0.0
    assert partition_score("zzzzz", ["crate"]) == 0.0


def test_fully_discriminating_guess_scores_log2_n():
    candidates = ["abcde", "fghij", "klmno", "pqrst"]
    # one yellow in a different slot for each candidate
    assert partition_score("afkpz", candidates) == pytest.approx(math.log2(4))


def test_partition_stats():
    stats = partition_stats("afkpz", ["abcde", "fghij", "klmno", "pqrst"])
    assert stats.partitions == 4
    assert stats.worst_case == 1
    assert stats.exp_remaining == pytest.approx(1.0)

    stats = partition_stats("abcde", ["abcde", "fghij", "klmno", "pqrst"])
    assert stats.partitions == 2
    assert stats.worst_case == 3
    assert stats.exp_remaining == pytest.approx((1 + 9) / 4)


def test_solution_scoring_weights_fresh_letters_and_coverage():
    ranker = GuessRanker()
    rows = ranker.score_solution_guesses(["abc", "abd", "xyz"], {"a"})
    # xyz: 3 fresh * 10 + 3 ; abc/abd: 2 fresh * 10 + (2 + 2 + 1)
    assert rows == [
        ScoredSuggestion("xyz", 33.0, Strategy.SOLUTION),
        ScoredSuggestion("abc", 25.0, Strategy.SOLUTION),
        ScoredSuggestion("abd", 25.0, Strategy.SOLUTION),
    ]


def test_empty_candidates_give_empty_suggestions():
    ranker = GuessRanker()
    assert ranker.score_solution_guesses([], {"a"}) == []
    assert ranker.score_information_guesses(["crane"], {"a"}, []) == []


def test_information_guesses_need_an_unused_letter():
    ranker = GuessRanker()
    rows = ranker.score_information_guesses(["crane", "nacre", "tzvly"], set("crane"), POOL)
    assert [r.word for r in rows] == ["tzvly"]
    assert rows[0].strategy is Strategy.INFORMATION
    # t, z and v each light up a different candidate; no positional overlap
    assert rows[0].score == pytest.approx(15 * math.log2(3))


def test_known_letters_and_greens_are_penalised():
    ranker = GuessRanker()
    used = set("crane")
    locks = {0: "c", 1: "r", 2: "a", 4: "e"}
    known = {"c", "r", "a", "e"}
    fresh, reuse = (
        ranker.score_information_guesses([w], used, POOL, locks=locks, known_letters=known)[0]
        for w in ("tzvly", "tzvle")
    )
    # 'e' is known (x0.3) and repeats the green in the last slot (x0.1)
    assert reuse.score == pytest.approx(fresh.score * 0.3 * 0.1)


def test_positional_bonus_counts_unused_letters_only():
    ranker = GuessRanker(partition_weight=0.0)
    rows = ranker.score_information_guesses(["ctzzz"], {"c"}, POOL)
    # 't' at slot 1 never occurs there; 'c' is used; z appears in one candidate at slot 3
    assert rows[0].score == pytest.approx(0.5 * (1 / 3))


def test_information_guesses_are_sorted_stably():
    ranker = GuessRanker()
    rows = ranker.score_information_guesses(["qqqqq", "jjjjj", "tzvly"], set("crane"), POOL)
    assert [r.word for r in rows] == ["tzvly", "qqqqq", "jjjjj"]
    assert rows[1].score == rows[2].score == 0.0


DICTIONARY = ["ghost", "crate", "tzvly", "mound", "craze", "crave", "vetch"]


def test_exhaustive_pool_is_the_whole_dictionary():
    ranker = GuessRanker(search="exhaustive", prune_above=0)
    assert ranker.guess_pool(DICTIONARY, POOL, {"n"}) == DICTIONARY


def test_pruned_pool_keeps_candidates_and_common_letter_words():
    ranker = GuessRanker(search="pruned", prune_above=0)
    pool = ranker.guess_pool(DICTIONARY, POOL, {"n"})
    assert pool == ["crate", "tzvly", "craze", "crave", "vetch"]


def test_pruning_only_kicks_in_for_large_pools():
    ranker = GuessRanker(search="pruned")
    assert ranker.guess_pool(DICTIONARY, POOL, {"n"}) == DICTIONARY


def test_pruned_pool_keeps_candidates_missing_from_dictionary():
    ranker = GuessRanker(search="pruned", prune_above=0)
    pool = ranker.guess_pool(["ghost"], POOL, set())
    assert pool == POOL


def test_opening_guesses_maximise_entropy_over_dictionary():
    words = ["abcde", "fghij", "klmno", "pqrst", "afkpz"]
    rows = GuessRanker().opening_guesses(words)
    assert rows[0].word == "afkpz"
    assert rows[0].score == pytest.approx(15 * math.log2(5))
    assert [r.word for r in rows[1:]] == ["abcde", "fghij", "klmno", "pqrst"]


def test_opening_guesses_are_computed_once_per_dictionary(monkeypatch):
    calls = []
    real = ranking.partition_score

    def counting(guess, candidates):
        calls.append(guess)
        return real(guess, candidates)

    monkeypatch.setattr(ranking, "partition_score", counting)
    words = ["abcde", "fghij", "klmno"]
    ranker = GuessRanker()
    first = ranker.opening_guesses(words)
    assert ranker.opening_guesses(words) == first
    assert len(calls) == 3

    ranker.opening_guesses(["abcde", "fghij"])
    assert len(calls) == 5


def test_pruned_opening_scores_common_letter_words_only():
    words = ["abcde", "abxyz", "afghi", "jklmn"]
    settings = dict(prune_above=0, common_threshold=0.5, min_common_unused=2)
    pruned = GuessRanker(search="pruned", **settings).opening_guesses(words)
    full = GuessRanker(search="exhaustive", **settings).opening_guesses(words)
    assert sorted(r.word for r in pruned) == ["abcde", "abxyz"]
    assert sorted(r.word for r in full) == sorted(words)


def test_opening_table_replaces_the_entropy_pass():
    table = {"zzzzz": 9.0, "klmno": 2.0, "abcde": 1.5}
    rows = GuessRanker(opening_table=table).opening_guesses(["abcde", "fghij", "klmno"])
    assert [r.word for r in rows] == ["klmno", "abcde"]
    assert rows[0].score == pytest.approx(30.0)


def test_opening_table_without_matches_falls_back():
    rows = GuessRanker(opening_table={"xyzzy": 5.0}).opening_guesses(["abcd", "efgh"])
    assert [r.word for r in rows] == ["abcd", "efgh"]


@pytest.mark.parametrize(
    "kwargs",
    [{"search": "greedy"}, {"prune_above": -1}, {"common_threshold": 1.5}, {"known_penalty": 2}],
)
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        GuessRanker(**kwargs)
