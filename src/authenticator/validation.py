import re
from typing import Any, NamedTuple, Optional

from .exceptions import InvalidParameter, InvalidSecretEncoding

BASE32_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

DEFAULT_SECRET_LENGTH = 32
DEFAULT_CODE_LENGTH = 6
DEFAULT_PERIOD = 30

VALID_CODE_LENGTHS = (6, 7, 8)
VALID_PERIODS = (15, 30, 60)

_BASE32_RE = re.compile("^[A-Z2-7]*$")


class Parameters(NamedTuple):
    """
    The numeric part of a profile: secret length (in Base32 symbols),
    code length (in digits) and period (in seconds).
    """

    secret_length: int = DEFAULT_SECRET_LENGTH
    code_length: int = DEFAULT_CODE_LENGTH
    period: int = DEFAULT_PERIOD


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True must not pass as a code length of 1
    return isinstance(value, int) and not isinstance(value, bool)


def validate_secret_length(secret_length: Any) -> int:
    if not _is_int(secret_length) or secret_length <= 0 or secret_length % 8:
        raise InvalidParameter("Secret length must be longer than 0 and divisible by 8.", field="secret_length")
    return secret_length


def validate_code_length(code_length: Any) -> int:
    if not _is_int(code_length) or code_length not in VALID_CODE_LENGTHS:
        message = "Code length must be either {} digits.".format(", ".join(map(str, VALID_CODE_LENGTHS)))
        raise InvalidParameter(message, field="code_length")
    return code_length


def validate_period(period: Any) -> int:
    if not _is_int(period) or period not in VALID_PERIODS:
        message = "Period must be either {} seconds.".format(", ".join(map(str, VALID_PERIODS)))
        raise InvalidParameter(message, field="period")
    return period


def validate(
    secret_length: Any,
    code_length: Any,
    period: Any,
    issuer: Optional[str],
    user: Optional[str],
) -> Parameters:
    """
    Checks a candidate profile configuration.

    Rules run in a fixed order and the first failing one is reported, so the
    same bad input always yields the same message.

    :param secret_length: number of Base32 symbols in the secret
    :param code_length: number of digits in a code
    :param period: time step in seconds
    :param issuer: the name of the OTP issuer, must not contain ``:``
    :param user: name of the user account, must not contain ``:``
    :returns: the validated :class:`Parameters`
    :raises InvalidParameter: naming the offending field
    """
    validate_secret_length(secret_length)
    validate_code_length(code_length)
    validate_period(period)

    if not issuer or not user:
        raise InvalidParameter("Issuer and user are required.", field="issuer" if not issuer else "user")
    if not isinstance(issuer, str) or not isinstance(user, str):
        raise InvalidParameter("Issuer and user must be strings.", field="issuer" if not isinstance(issuer, str) else "user")

    if ":" in issuer:
        raise InvalidParameter("Colon is not allowed in the 'issuer' parameter.", field="issuer")
    if ":" in user:
        raise InvalidParameter("Colon is not allowed in the 'user' parameter.", field="user")

    return Parameters(secret_length, code_length, period)


def validate_secret(secret: Any, secret_length: int) -> str:
    """
    Checks a caller-supplied secret against the profile it will belong to.
    """
    if not isinstance(secret, str) or not _BASE32_RE.match(secret):
        raise InvalidSecretEncoding("Secret must only contain the characters A-Z and 2-7.")
    if len(secret) != secret_length:
        raise InvalidParameter(
            "Secret must be exactly {} characters long, got {}.".format(secret_length, len(secret)),
            field="secret",
        )
    return secret
