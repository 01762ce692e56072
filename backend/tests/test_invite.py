import pytest

from fantanome.services.games.errors import TransientGenerationFailure
from fantanome.services.games.invite import (
    INVITE_ALPHABET, INVITE_LENGTH, generate_candidate, generate_invite_code, normalize_invite_code,
)


def test_candidate_uses_unambiguous_alphabet():
    for _ in range(50):
        code = generate_candidate()
        assert len(code) == 6
        assert set(code) <= set(INVITE_ALPHABET)
    assert not set('01IO') & set(INVITE_ALPHABET)


def test_retries_until_free_code():
    candidates = iter(['AAAAAA', 'BBBBBB', 'CCCCCC'])
    taken = {'AAAAAA', 'BBBBBB'}
    code = generate_invite_code(lambda c: c in taken, candidate=lambda n: next(candidates))
    assert code == 'CCCCCC'


def test_gives_up_after_max_attempts():
    calls = []

    def always_taken(code):
        calls.append(code)
        return True

    with pytest.raises(TransientGenerationFailure) as exc:
        generate_invite_code(always_taken, max_attempts=12)
    assert len(calls) == 12
    assert exc.value.status_code == 503


def test_normalize_invite_code():
    assert normalize_invite_code('  abc234 ') == 'ABC234'
    assert normalize_invite_code(None) == ''


def test_invite_code_column_fits_generated_codes():
    from fantanome.models import Game
    assert Game.__table__.c.invite_code.type.length == INVITE_LENGTH == len(generate_candidate())
