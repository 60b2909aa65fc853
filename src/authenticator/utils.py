import unicodedata
from hmac import compare_digest
from urllib.parse import quote

DEFAULT_QR_HOST = "chart.googleapis.com"
DEFAULT_QR_SIZE = 300


def build_uri(secret: str, issuer: str, user: str, code_length: int, period: int) -> str:
    """
    Returns the provisioning URI for a TOTP profile.

    This can then be encoded in a QR Code and used to provision the Google
    Authenticator app.

    For module-internal use.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param secret: the Base32 secret, emitted as-is
    :param issuer: the name of the OTP issuer; this will be the
        organization title of the OTP entry in Authenticator
    :param user: name of the user account
    :param code_length: the length of the OTP generated code
    :param period: the number of seconds the OTP generator is set to
        expire every code
    :returns: provisioning uri
    """
    # The label is "issuer (user)" rather than the usual "issuer:user";
    # colons are forbidden in both parts.
    label = quote("{} ({})".format(issuer, user), safe="")

    # No algorithm parameter: SHA1 is the only digest and the default for every app.
    return "otpauth://totp/{0}?secret={1}&issuer={2}&digits={3}&period={4}".format(
        label, secret, quote(issuer, safe=""), code_length, period
    )


def build_qr_url(uri: str, size: int = DEFAULT_QR_SIZE, host: str = DEFAULT_QR_HOST) -> str:
    """
    Returns a URL to an external chart service that renders ``uri`` as a
    ``size`` x ``size`` QR code. The URL is never fetched here.
    """
    return "https://{0}/chart?chs={1}x{1}&chld=M|0&cht=qr&chl={2}".format(host, size, uri)


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
