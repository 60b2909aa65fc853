import base64
import binascii
import calendar
import datetime
import hashlib
import hmac
import math
import struct
import time
from typing import Optional, Union

from . import utils
from .exceptions import InvalidSecretEncoding
from .validation import DEFAULT_CODE_LENGTH, DEFAULT_PERIOD, validate_code_length, validate_period

TimeLike = Union[int, float, datetime.datetime]


def to_unix_time(for_time: Optional[TimeLike] = None) -> int:
    """
    Normalises a point in time to whole Unix seconds. ``None`` reads the
    system clock; this is the only place the engine looks at it.
    """
    if for_time is None:
        return int(time.time())
    if isinstance(for_time, datetime.datetime):
        if for_time.tzinfo:
            return calendar.timegm(for_time.utctimetuple())
        return int(time.mktime(for_time.timetuple()))
    return math.floor(for_time)


def get_time_slice(unix_time: int, period: int = DEFAULT_PERIOD, offset: int = 0) -> int:
    """
    Returns the TOTP counter for ``unix_time``: the number of whole
    ``period``-second steps since the epoch, shifted by ``offset`` steps.
    """
    return unix_time // period + offset


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns a time slice into the 8-byte big-endian HMAC message.

    The slice occupies the low 4 bytes only; anything beyond 32 bits
    (including the sign of a pre-epoch slice) wraps.
    """
    return struct.pack(">I", i & 0xFFFFFFFF).rjust(padding, b"\0")


def byte_secret(secret: str) -> bytes:
    """
    Decodes a Base32 secret into HMAC key material.

    :raises InvalidSecretEncoding: if the secret is empty or not Base32
    """
    if not secret:
        raise InvalidSecretEncoding("Secret must not be empty.")
    # otpauth secrets are stored without "=" padding
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecretEncoding("Secret is not valid Base32: {}".format(e)) from e


def dynamic_truncate(digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation: the low nibble of the last byte picks a
    4-byte window, read big-endian with the sign bit cleared.
    """
    offset = digest[-1] & 0x0F
    return struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF


def format_code(value: int, code_length: int) -> str:
    return str(value % 10**code_length).zfill(code_length)


def generate_otp(secret: str, counter: int, code_length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    :param secret: the Base32 secret
    :param counter: the time slice to use as the HMAC message
    :param code_length: number of digits in the result
    """
    hasher = hmac.new(byte_secret(secret), int_to_bytestring(counter), hashlib.sha1)
    return format_code(dynamic_truncate(hasher.digest()), code_length)


def calculate_code(
    secret: str,
    code_length: int = DEFAULT_CODE_LENGTH,
    period: int = DEFAULT_PERIOD,
    at_time: Optional[TimeLike] = None,
) -> str:
    """
    Computes the code for ``secret`` at ``at_time``.

    The parameters are checked here as well since this may be called
    without a profile.

    :param secret: the Base32 secret
    :param code_length: 6, 7 or 8
    :param period: 15, 30 or 60 seconds
    :param at_time: Unix timestamp or datetime, defaults to now
    :returns: the zero-padded decimal code
    """
    validate_code_length(code_length)
    validate_period(period)
    return generate_otp(secret, get_time_slice(to_unix_time(at_time), period), code_length)


def authenticate(
    secret: str,
    code: str,
    code_length: int = DEFAULT_CODE_LENGTH,
    period: int = DEFAULT_PERIOD,
    at_time: Optional[TimeLike] = None,
) -> bool:
    """
    Checks ``code`` against the code for the time slice containing
    ``at_time``. Only that exact slice is accepted: a code from the previous
    or next step fails.

    :param secret: the Base32 secret
    :param code: the code submitted by the user
    :param code_length: 6, 7 or 8
    :param period: 15, 30 or 60 seconds
    :param at_time: Unix timestamp or datetime, defaults to now
    """
    expected = calculate_code(secret, code_length, period, at_time)
    return utils.strings_equal(str(code), expected)
