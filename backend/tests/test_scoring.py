from fantanome.services.games.scoring import OrderMatch, normalize, score_guess


def test_normalize_trims_and_lowercases():
    assert normalize('  Alice ') == 'alice'
    assert normalize('ÉMILE') == 'émile'


def test_exact_matches():
    result = score_guess(['Alice', 'Bob'], ['Alice', 'Bob'])
    assert result.exact_matches == 2
    assert result.order_matches == []
    assert result.score == 20


def test_order_matches():
    result = score_guess(['Alice', 'Bob'], ['Bob', 'Alice'])
    assert result.exact_matches == 0
    assert result.order_matches == [
        OrderMatch(name='Bob', guessed_position=1, actual_position=2),
        OrderMatch(name='Alice', guessed_position=2, actual_position=1),
    ]
    assert result.score == 10


def test_no_match_scores_nothing():
    result = score_guess(['Alice'], ['Zoe'])
    assert result.exact_matches == 0
    assert result.order_matches == []
    assert result.score == 0


def test_empty_inputs():
    assert score_guess([], []).score == 0
    assert score_guess(['Alice'], []).score == 0
    assert score_guess([], ['Alice']).order_matches == []


def test_case_and_whitespace_do_not_matter():
    assert score_guess(['Alice'], ['ALICE ']) == score_guess(['alice'], ['Alice'])
    assert score_guess(['Alice'], ['ALICE ']).exact_matches == 1


def test_repeated_guess_is_credited_each_time():
    result = score_guess(['Alice', 'Bob'], ['Alice', 'alice'])
    assert result.exact_matches == 1
    assert len(result.order_matches) == 1
    assert result.order_matches[0].actual_position == 1
    assert result.score == 15


def test_guess_longer_than_preferences():
    result = score_guess(['Alice'], ['Bob', 'Carl', 'Alice'])
    assert result.exact_matches == 0
    assert result.order_matches[0].to_dict() == {
        'name': 'Alice', 'guessedPosition': 3, 'actualPosition': 1,
    }
    assert result.score == 5


def test_scoring_is_deterministic():
    prefs, guess = ['Alice', 'Bob', 'Carl'], ['Carl', 'Bob', 'Dora']
    first = score_guess(prefs, guess)
    assert all(score_guess(prefs, guess) == first for _ in range(5))
