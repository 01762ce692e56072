import secrets
from typing import Callable, Optional

from .errors import TransientGenerationFailure

# No 0/O or 1/I so codes survive being read aloud or copied by hand
INVITE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
INVITE_LENGTH = 6
MAX_ATTEMPTS = 12


def generate_candidate(length: int = INVITE_LENGTH, alphabet: str = INVITE_ALPHABET) -> str:
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def normalize_invite_code(code) -> str:
    return (code or '').strip().upper()


def generate_invite_code(
    is_taken: Callable[[str], bool],
    length: int = INVITE_LENGTH,
    max_attempts: int = MAX_ATTEMPTS,
    candidate: Optional[Callable[[int], str]] = None,
) -> str:
    """Return a fresh code for which ``is_taken`` is false.

    Gives up after ``max_attempts`` collisions with
    ``TransientGenerationFailure``; callers may retry the whole request.
    """
    candidate = candidate or generate_candidate
    for _ in range(max_attempts):
        code = candidate(length)
        if not is_taken(code):
            return code
    raise TransientGenerationFailure(
        f'Invite code generation exceeded {max_attempts} attempts. Please retry.'
    )
