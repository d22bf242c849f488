import base64
import binascii


class Base64Util:

    @staticmethod
    def to_base64(plain_bytes: bytes) -> str:
        base64_bytes = base64.b64encode(plain_bytes)
        return base64_bytes.decode('ascii')

    @staticmethod
    def from_base64(base64_value: str) -> bytes:
        """Decode standard base64, rejecting characters outside the alphabet."""
        try:
            base64_bytes = base64_value.encode('ascii')
        except UnicodeEncodeError as exc:
            raise ValueError("base64 text must be ASCII") from exc
        try:
            return base64.b64decode(base64_bytes, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"invalid base64: {exc}") from exc
