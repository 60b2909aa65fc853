import enum
import logging
from typing import Any, Optional, Union

from . import otp, utils
from .otp import TimeLike
from .qr import render_png
from .secret import random_base32
from .validation import (
    DEFAULT_CODE_LENGTH,
    DEFAULT_PERIOD,
    DEFAULT_SECRET_LENGTH,
    Parameters,
    validate,
    validate_secret,
)

logger = logging.getLogger(__name__)


class Preset(enum.Enum):
    """
    Named parameter bundles. They differ only in their numbers; every preset
    goes through the same validation and code generation.
    """

    DEFAULT = Parameters(DEFAULT_SECRET_LENGTH, DEFAULT_CODE_LENGTH, DEFAULT_PERIOD)
    SIMPLE = Parameters(16, 6, 30)
    SECURE = Parameters(64, 8, 15)

    @property
    def parameters(self) -> Parameters:
        return self.value

    def calculate_code(
        self,
        secret: str,
        code_length: Optional[int] = None,
        period: Optional[int] = None,
        at_time: Optional[TimeLike] = None,
    ) -> str:
        return otp.calculate_code(
            secret,
            self.value.code_length if code_length is None else code_length,
            self.value.period if period is None else period,
            at_time,
        )

    def authenticate(
        self,
        secret: str,
        code: str,
        code_length: Optional[int] = None,
        period: Optional[int] = None,
        at_time: Optional[TimeLike] = None,
    ) -> bool:
        """
        Checks ``code`` with this preset's code length and period unless the
        caller overrides them.
        """
        return otp.authenticate(
            secret,
            code,
            self.value.code_length if code_length is None else code_length,
            self.value.period if period is None else period,
            at_time,
        )


class Profile(object):
    """
    One user's TOTP configuration and secret. Immutable once built.
    """

    __slots__ = ("_issuer", "_user", "_parameters", "_secret")

    def __init__(
        self,
        issuer: str,
        user: str,
        parameters: Union[Preset, Parameters] = Preset.DEFAULT,
        secret: Optional[str] = None,
    ) -> None:
        """
        :param issuer: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :param user: name of the user account
        :param parameters: a :class:`Preset` or custom :class:`Parameters`
        :param secret: an existing Base32 secret; a new one is generated if omitted
        """
        if isinstance(parameters, Preset):
            parameters = parameters.parameters
        params = validate(parameters.secret_length, parameters.code_length, parameters.period, issuer, user)

        if secret is None:
            secret = random_base32(params.secret_length)
        else:
            validate_secret(secret, params.secret_length)

        object.__setattr__(self, "_issuer", issuer)
        object.__setattr__(self, "_user", user)
        object.__setattr__(self, "_parameters", params)
        object.__setattr__(self, "_secret", secret)
        logger.debug(
            "Created profile issuer=%r user=%r secret_length=%d code_length=%d period=%d",
            issuer,
            user,
            *params,
        )

    @classmethod
    def from_preset(cls, preset: Preset, issuer: str, user: str) -> "Profile":
        return cls(issuer, user, preset)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Profile is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Profile is immutable")

    def __repr__(self) -> str:
        return "<Profile issuer={!r} user={!r} secret_length={} code_length={} period={}>".format(
            self._issuer, self._user, *self._parameters
        )

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def user(self) -> str:
        return self._user

    @property
    def secret(self) -> str:
        return self._secret

    @property
    def parameters(self) -> Parameters:
        return self._parameters

    @property
    def secret_length(self) -> int:
        return self._parameters.secret_length

    @property
    def code_length(self) -> int:
        return self._parameters.code_length

    @property
    def period(self) -> int:
        return self._parameters.period

    @property
    def label(self) -> str:
        # e.g. "ACME (alice@example.com)"
        return "{} ({})".format(self._issuer, self._user)

    def timecode(self, for_time: Optional[TimeLike] = None) -> int:
        return otp.get_time_slice(otp.to_unix_time(for_time), self.period)

    def at(self, for_time: TimeLike) -> str:
        """
        Generates the code for the given time.

        :param for_time: Unix timestamp or datetime
        :returns: OTP
        """
        return otp.calculate_code(self._secret, self.code_length, self.period, for_time)

    def now(self) -> str:
        """
        Generates the current code.
        """
        return otp.calculate_code(self._secret, self.code_length, self.period)

    current_code = now

    def verify(self, code: str, for_time: Optional[TimeLike] = None) -> bool:
        """
        Verifies the code against this profile's code length and period.

        :param code: the OTP to check against
        :param for_time: time to check the code at, defaults to now
        """
        return otp.authenticate(self._secret, code, self.code_length, self.period, for_time)

    def provisioning_uri(self) -> str:
        """
        Returns the otpauth URI for this profile.  This can then be encoded
        in a QR Code and used to provision an OTP app like Google
        Authenticator.
        """
        return utils.build_uri(self._secret, self._issuer, self._user, self.code_length, self.period)

    def qr_code_url(self, size: int = utils.DEFAULT_QR_SIZE, host: str = utils.DEFAULT_QR_HOST) -> str:
        return utils.build_qr_url(self.provisioning_uri(), size, host)

    def qr_code_png(self, size: int = utils.DEFAULT_QR_SIZE) -> bytes:
        return render_png(self.provisioning_uri(), size)


def create_profile(
    issuer: str,
    user: str,
    preset: Union[Preset, Parameters] = Preset.DEFAULT,
    secret: Optional[str] = None,
) -> Profile:
    return Profile(issuer, user, preset, secret)
