import io

import qrcode
from PIL import Image
from qrcode.image.pil import PilImage

from .exceptions import InvalidParameter
from .utils import DEFAULT_QR_SIZE


def render_png(uri: str, size: int = DEFAULT_QR_SIZE) -> bytes:
    """
    Renders ``uri`` as a ``size`` x ``size`` PNG QR code, locally.

    Uses the same settings the chart service is asked for: error
    correction level M and no quiet zone.

    :param uri: the provisioning URI to encode
    :param size: width and height of the image in pixels
    :returns: the PNG file contents
    """
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidParameter("QR code size must be a positive number of pixels.", field="size")

    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=0)
    qr.add_data(uri)
    qr.make(fit=True)
    qr.box_size = max(1, size // qr.modules_count)

    img = qr.make_image(image_factory=PilImage, fill_color="black", back_color="white").get_image()
    if img.size != (size, size):
        img = img.resize((size, size), Image.NEAREST)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
