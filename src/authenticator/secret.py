import logging
from typing import Sequence

from .compat import random
from .exceptions import RandomSourceUnavailable
from .validation import BASE32_CHARS, DEFAULT_SECRET_LENGTH, validate_secret_length

logger = logging.getLogger(__name__)


def random_base32(length: int = DEFAULT_SECRET_LENGTH, chars: Sequence[str] = BASE32_CHARS) -> str:
    """
    Generates a new secret of ``length`` symbols, each drawn independently
    from ``chars`` by the system's secure random source.

    :raises InvalidParameter: if length is not a positive multiple of 8
    :raises RandomSourceUnavailable: if the OS cannot supply entropy
    """
    # Note: the otpauth scheme DOES NOT use base32 padding, so only lengths
    # divisible by 8 decode to whole bytes without ambiguity.
    validate_secret_length(length)

    try:
        return "".join(random.choice(chars) for _ in range(length))
    except (NotImplementedError, OSError) as e:
        logger.error("Secure random source unavailable: %s", e)
        raise RandomSourceUnavailable("Secure random source is unavailable.") from e
