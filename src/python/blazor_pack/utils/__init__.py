from .base64_util import Base64Util
