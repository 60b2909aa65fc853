import logging
import re
from typing import Dict, Optional
from urllib.parse import parse_qsl, unquote, urlparse

from .exceptions import AuthenticatorError as AuthenticatorError
from .exceptions import InvalidParameter as InvalidParameter
from .exceptions import InvalidSecretEncoding as InvalidSecretEncoding
from .exceptions import RandomSourceUnavailable as RandomSourceUnavailable
from .otp import authenticate as authenticate
from .otp import calculate_code as calculate_code
from .otp import get_time_slice as get_time_slice
from .profile import Preset as Preset
from .profile import Profile as Profile
from .profile import create_profile as create_profile
from .secret import random_base32 as random_base32
from .validation import BASE32_CHARS as BASE32_CHARS
from .validation import DEFAULT_CODE_LENGTH, DEFAULT_PERIOD
from .validation import Parameters as Parameters

logging.getLogger(__name__).addHandler(logging.NullHandler())

logger = logging.getLogger(__name__)

# "ACME (alice@example.com)"; the user may itself contain parentheses, the
# issuer is taken up to the first " (". Issuer and user never contain ":" so
# the usual "ACME:alice@example.com" form is unambiguous too.
_LABEL_RE = re.compile(r"^(?P<issuer>[^(]+?) \((?P<user>.+)\)$")


def _split_label(label: str, issuer: Optional[str]) -> Dict[str, Optional[str]]:
    if issuer is not None:
        prefix = "{} (".format(issuer)
        if label.startswith(prefix) and label.endswith(")"):
            return {"issuer": issuer, "user": label[len(prefix) : -1]}
    match = _LABEL_RE.match(label)
    if match:
        return match.groupdict()
    if ":" in label:
        label_issuer, user = label.split(":", 1)
        return {"issuer": label_issuer, "user": user}
    return {"issuer": None, "user": label}


def parse_uri(uri: str) -> Profile:
    """
    Rebuilds a :class:`Profile`, with its existing secret, from a
    provisioning URI.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the otpauth://totp/ URI to parse
    :returns: Profile object
    :raises InvalidParameter: if the URI is not a usable TOTP URI
    :raises InvalidSecretEncoding: if the secret is not Base32
    """
    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != "otpauth":
        raise InvalidParameter("Not an otpauth URI", field="uri")
    if parsed_uri.netloc != "totp":
        raise InvalidParameter("Not a supported OTP type", field="uri")

    secret = None
    issuer = None
    code_length = DEFAULT_CODE_LENGTH
    period = DEFAULT_PERIOD

    for key, value in parse_qsl(parsed_uri.query):
        if key == "secret":
            secret = value.upper()
        elif key == "issuer":
            issuer = value
        elif key == "algorithm":
            if value.upper() != "SHA1":
                raise InvalidParameter("Invalid value for algorithm, must be SHA1", field="algorithm")
        elif key in ("digits", "period"):
            try:
                number = int(value)
            except ValueError as e:
                field = "code_length" if key == "digits" else "period"
                raise InvalidParameter("{} must be an integer, got {!r}".format(key, value), field=field) from e
            if key == "digits":
                code_length = number
            else:
                period = number

    # The issuer parameter, when present, tells where the label's issuer ends.
    otp_data = _split_label(unquote(parsed_uri.path[1:]), issuer)
    if issuer is not None:
        if otp_data["issuer"] is not None and otp_data["issuer"] != issuer:
            raise InvalidParameter(
                "If issuer is specified in both label and parameters, it should be equal.", field="issuer"
            )
        otp_data["issuer"] = issuer

    if not secret:
        raise InvalidParameter("No secret found in URI", field="secret")

    logger.debug("Parsed provisioning URI for issuer=%r user=%r", otp_data["issuer"], otp_data["user"])
    return Profile(
        otp_data["issuer"],
        otp_data["user"],
        Parameters(len(secret), code_length, period),
        secret=secret,
    )
