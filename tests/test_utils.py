import io

import pytest
from PIL import Image

import authenticator
from authenticator import utils
from authenticator.exceptions import InvalidParameter, InvalidSecretEncoding
from authenticator.qr import render_png


def test_build_uri_encodes_label_and_issuer():
    uri = utils.build_uri("JBSWY3DPEHPK3PXP", "My Bank & Co", "a b+c", 7, 60)
    assert uri == (
        "otpauth://totp/My%20Bank%20%26%20Co%20%28a%20b%2Bc%29"
        "?secret=JBSWY3DPEHPK3PXP&issuer=My%20Bank%20%26%20Co&digits=7&period=60"
    )
    assert "+" not in uri
    assert "algorithm" not in uri


def test_build_qr_url():
    assert utils.build_qr_url("otpauth://totp/x", 100, "charts.example.org") == (
        "https://charts.example.org/chart?chs=100x100&chld=M|0&cht=qr&chl=otpauth://totp/x"
    )


def test_strings_equal():
    assert utils.strings_equal("123456", "123456")
    assert not utils.strings_equal("123456", "123457")
    assert not utils.strings_equal("123456", "12345")
    assert utils.strings_equal("１２３４５６", "123456")


@pytest.mark.parametrize("size", [21, 100, 300, 512])
def test_render_png_size(size):
    png = render_png("otpauth://totp/ACME%20%28bob%29?secret=JBSWY3DPEHPK3PXP&issuer=ACME&digits=6&period=30", size)
    assert Image.open(io.BytesIO(png)).size == (size, size)


@pytest.mark.parametrize("size", [0, -1, True])
def test_render_png_rejects_size(size):
    with pytest.raises(InvalidParameter):
        render_png("otpauth://totp/x", size)


def test_parse_uri_round_trip():
    profile = authenticator.create_profile("ACME Corp", "alice@example.com", authenticator.Preset.SECURE)
    parsed = authenticator.parse_uri(profile.provisioning_uri())
    assert parsed.secret == profile.secret
    assert parsed.issuer == "ACME Corp"
    assert parsed.user == "alice@example.com"
    assert parsed.parameters == profile.parameters


def test_parse_uri_standard_label_and_defaults():
    parsed = authenticator.parse_uri("otpauth://totp/ACME:alice?secret=jbswy3dpehpk3pxp&algorithm=SHA1")
    assert parsed.issuer == "ACME"
    assert parsed.user == "alice"
    assert parsed.secret == "JBSWY3DPEHPK3PXP"
    assert parsed.parameters == authenticator.Parameters(16, 6, 30)


@pytest.mark.parametrize(
    "uri,field",
    [
        ("https://totp/ACME:alice?secret=JBSWY3DPEHPK3PXP", "uri"),
        ("otpauth://hotp/ACME:alice?secret=JBSWY3DPEHPK3PXP&counter=0", "uri"),
        ("otpauth://totp/ACME:alice?issuer=ACME", "secret"),
        ("otpauth://totp/ACME:alice?secret=JBSWY3DPEHPK3PXP&issuer=Other", "issuer"),
        ("otpauth://totp/ACME:alice?secret=JBSWY3DPEHPK3PXP&algorithm=SHA256", "algorithm"),
        ("otpauth://totp/ACME:alice?secret=JBSWY3DPEHPK3PXP&digits=5", "code_length"),
        ("otpauth://totp/ACME:alice?secret=JBSWY3DPEHPK3PXP&digits=six", "code_length"),
        ("otpauth://totp/ACME:alice?secret=JBSWY3DPEHPK3PXP&period=45", "period"),
        ("otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP", "issuer"),
        ("otpauth://totp/ACME:alice?secret=JBSWY3DPEHPK3", "secret_length"),
    ],
)
def test_parse_uri_rejects(uri, field):
    with pytest.raises(InvalidParameter) as excinfo:
        authenticator.parse_uri(uri)
    assert excinfo.value.field == field


def test_parse_uri_rejects_bad_secret():
    with pytest.raises(InvalidSecretEncoding):
        authenticator.parse_uri("otpauth://totp/ACME:alice?secret=JBSWY3DPEHPK3PX1")


@pytest.mark.parametrize("user", ["bob (admin)", "(bob)", "bob ((x) y)", "a) (b"])
def test_parse_uri_user_with_parentheses(user):
    profile = authenticator.create_profile("ACME Corp", user)
    parsed = authenticator.parse_uri(profile.provisioning_uri())
    assert parsed.issuer == "ACME Corp"
    assert parsed.user == user
    assert parsed.secret == profile.secret


def test_parse_uri_label_without_issuer_parameter():
    parsed = authenticator.parse_uri("otpauth://totp/ACME%20%28bob%20%28admin%29%29?secret=JBSWY3DPEHPK3PXP")
    assert parsed.issuer == "ACME"
    assert parsed.user == "bob (admin)"


def test_parse_uri_empty_user_in_label():
    with pytest.raises(InvalidParameter) as excinfo:
        authenticator.parse_uri("otpauth://totp/ACME%20%28%29?secret=JBSWY3DPEHPK3PXP&issuer=ACME")
    assert excinfo.value.field == "user"
