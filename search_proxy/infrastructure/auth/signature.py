import base64
import time
from pathlib import Path
from typing import Callable, Dict, Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from pydantic import BaseModel

from search_proxy.core.exceptions import ConfigurationError, SigningError
from search_proxy.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_KEY_VERSION = "1"

HEADER_CONSUMER_ID = "WM_CONSUMER.ID"
HEADER_TIMESTAMP = "WM_CONSUMER.INTIMESTAMP"
HEADER_KEY_VERSION = "WM_SEC.KEY_VERSION"
HEADER_SIGNATURE = "WM_SEC.AUTH_SIGNATURE"


class SignatureResponse(BaseModel):
    """A signature together with the millisecond timestamp it was computed over."""
    signature: str
    timestamp: int


def build_message(consumer_id: str, timestamp: int, key_version: str) -> str:
    """Canonical string the upstream API expects to be signed."""
    return f"{consumer_id}\n{timestamp}\n{key_version}\n"


def load_private_key(key_path: str) -> rsa.RSAPrivateKey:
    """
    Read and parse a PEM-encoded RSA private key.

    Args:
        key_path: Filesystem path to the key; relative paths resolve against the
            current working directory

    Returns:
        The parsed RSA private key

    Raises:
        ConfigurationError: If the key file cannot be located or read
        SigningError: If the file content is not an unencrypted RSA private key
    """
    resolved = Path(key_path).expanduser().resolve()
    try:
        pem = resolved.read_bytes()
    except OSError as e:
        logger.error(f"Private key could not be read from {resolved}: {e.strerror or e}")
        raise ConfigurationError(
            f"Private key could not be read: {e.strerror or type(e).__name__}",
            context={"key_path": str(resolved)},
        ) from e

    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.error(f"Private key at {resolved} is malformed: {e}")
        raise SigningError(
            "Private key is malformed",
            context={"key_path": str(resolved)},
            original_exception=e,
        ) from e

    if not isinstance(key, rsa.RSAPrivateKey):
        logger.error(f"Private key at {resolved} is not an RSA key")
        raise SigningError("Private key is not an RSA key", context={"key_path": str(resolved)})

    logger.info("Loaded RSA private key", extra={"key_path": str(resolved), "key_size": key.key_size})
    return key


class RequestSigner:
    """
    Produces the time-bound RSA-SHA256 signature the upstream catalog API
    authenticates callers with.

    The key is parsed on first use and kept for the lifetime of the signer.
    Every call to :meth:`generate_signature` captures a new timestamp and
    signs it, so signatures are never reused between outbound requests.
    """

    def __init__(
        self,
        consumer_id: str,
        private_key_path: str,
        key_version: str = DEFAULT_KEY_VERSION,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the request signer.

        Args:
            consumer_id: Consumer identifier issued by the upstream API
            private_key_path: Path to the PEM RSA private key
            key_version: Key version registered with the upstream API
            clock: Source of epoch seconds; replaceable in tests
        """
        self.consumer_id = consumer_id
        self.private_key_path = private_key_path
        self.key_version = key_version
        self._clock = clock
        self._private_key: Optional[rsa.RSAPrivateKey] = None

    @property
    def private_key(self) -> rsa.RSAPrivateKey:
        if self._private_key is None:
            self._private_key = load_private_key(self.private_key_path)
        return self._private_key

    def _now_millis(self) -> int:
        return int(self._clock() * 1000)

    def generate_signature(self) -> SignatureResponse:
        """
        Sign ``consumerID\\ntimestamp\\nkeyVersion\\n`` for the current instant.

        Returns:
            SignatureResponse: base64 signature and the timestamp embedded in it

        Raises:
            SigningError: If the key cannot be loaded or the signing operation fails
        """
        try:
            timestamp = self._now_millis()
            message = build_message(self.consumer_id, timestamp, self.key_version)
            raw = self.private_key.sign(
                message.encode("utf-8"),
                padding.PKCS1v15(),
                hashes.SHA256(),
            )
        except (ConfigurationError, SigningError) as e:
            logger.error(f"Error generating signature: {e.detail}")
            raise SigningError(
                f"Failed to generate signature: {e.detail}",
                context=e.context,
                original_exception=e,
            ) from e
        except Exception as e:
            logger.error(f"Error generating signature: {str(e)}", exc_info=True)
            raise SigningError(f"Failed to generate signature: {str(e)}", original_exception=e) from e

        return SignatureResponse(
            signature=base64.b64encode(raw).decode("ascii"),
            timestamp=timestamp,
        )

    def headers(self) -> Dict[str, str]:
        """Authentication headers for one outbound request, freshly signed."""
        signed = self.generate_signature()
        return {
            HEADER_CONSUMER_ID: self.consumer_id,
            HEADER_TIMESTAMP: str(signed.timestamp),
            HEADER_KEY_VERSION: self.key_version,
            HEADER_SIGNATURE: signed.signature,
        }

    def verify(self, signature: str, timestamp: int) -> bool:
        """
        Check a signature against the public half of the configured key.

        Args:
            signature: base64 signature as sent in ``WM_SEC.AUTH_SIGNATURE``
            timestamp: millisecond timestamp as sent in ``WM_CONSUMER.INTIMESTAMP``

        Returns:
            True if the signature matches the canonical message for ``timestamp``
        """
        message = build_message(self.consumer_id, timestamp, self.key_version)
        try:
            self.private_key.public_key().verify(
                base64.b64decode(signature),
                message.encode("utf-8"),
                padding.PKCS1v15(),
                hashes.SHA256(),
            )
        except (InvalidSignature, ValueError):
            return False
        return True
