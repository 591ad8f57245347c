"""
Image Input Utility
Converts uploaded images to and from `data:<media-type>;base64,<payload>` strings.
"""

import base64
import binascii
import re

from cloudlab.ai_engine import InlineImage
from cloudlab.errors import EmptyInput

DEFAULT_MIME_TYPE = "image/jpeg"

_HEADER_PATTERN = re.compile(r'^data:(.*?);base64$')


def encode_data_url(data, mime_type=DEFAULT_MIME_TYPE):
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{payload}"


def decode_data_url(value):
    """
    Parses a data URL (or a bare base64 payload) into an InlineImage.

    A value without a `data:` header is treated as raw base64 with the default media type.
    """
    if not value or not value.strip():
        raise EmptyInput("No image selected")

    value = value.strip()
    mime_type = DEFAULT_MIME_TYPE
    payload = value

    if value.startswith("data:"):
        header, _, payload = value.partition(",")
        match = _HEADER_PATTERN.match(header)
        if match and match.group(1):
            mime_type = match.group(1)

    if not payload:
        raise EmptyInput("Image payload is empty")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EmptyInput("Image payload is not valid base64") from e

    if not data:
        raise EmptyInput("Image payload is empty")

    return InlineImage(data=data, mime_type=mime_type)


def image_from_upload(uploaded_file):
    """
    Streamlit UploadedFile -> data URL. Media type comes from the file's own type string.
    """
    if uploaded_file is None:
        return ""
    return encode_data_url(uploaded_file.getvalue(), getattr(uploaded_file, "type", None) or DEFAULT_MIME_TYPE)
