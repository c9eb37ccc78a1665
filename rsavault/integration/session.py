"""
RSA Session Module

State model for an interactive RSA front end. A session holds:
- The editable public/private key strings and key length field
- The loaded key pair (with its Barrett constant)
- The last error and the last elapsed time

Rules:
- A key error blocks every cryptographic action until keys are
  regenerated or the session is reset
- Reset produces a brand-new default session instead of clearing fields
- Every action works on a clone of the key material
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..config import RSAConfig
from ..errors import DecodingError, ParseError, ValidationError
from ..logging import get_logger
from ..protocol.text_rsa import KeyPair, parse_bit_length
from ..utils import count_time


logger = get_logger(__name__)

KEYS_REQUIRED_MESSAGE = "You need to regenerate/reset keys"
INVALID_DECRYPTION_MESSAGE = "Invalid decryption result"
INVALID_VERIFY_INPUT_MESSAGE = "Invalid input for verify sign"


class Action(Enum):
    """Cryptographic actions a session can perform."""
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"
    SIGN = "sign"
    VERIFY = "verify"


def _strip_input(text: str) -> str:
    """Drop the single trailing newline text editors append."""
    return text[:-1] if text.endswith("\n") else text


@dataclass
class RSASession:
    """
    Application state for generating keys and running RSA on text.

    Example:
        >>> session = RSASession.new()
        >>> session.set_key_length("256")
        True
        >>> session.generate()['success']
        True
        >>> cipher = session.encrypt("hello")['output']
        >>> session.decrypt(cipher)['output']
        'hello'
    """
    config: RSAConfig = field(default_factory=RSAConfig)
    pub_key: str = ""
    priv_key: str = ""
    key_length: str = ""
    key_len: int = 0
    error: str = ""
    used_time: str = ""
    keys: Optional[KeyPair] = None

    @classmethod
    def new(cls, config: Optional[RSAConfig] = None) -> 'RSASession':
        """Fresh default session."""
        config = config or RSAConfig()
        return cls(
            config=config,
            key_length=str(config.default_key_length),
            key_len=config.default_key_length,
        )

    def reset(self) -> 'RSASession':
        """Return a brand-new default session with the same config."""
        return RSASession.new(self.config)

    @property
    def has_keys(self) -> bool:
        return self.keys is not None

    def _set_used_time(self, micros: int) -> None:
        self.used_time = f"Used time: {micros}us"

    # ========================================================================
    # Key management
    # ========================================================================

    def set_key_length(self, text: str) -> bool:
        """
        Update the key length field; non-numeric input is ignored.

        Returns:
            True if the length was accepted
        """
        try:
            length = parse_bit_length(text)
        except ParseError:
            return False
        self.key_len = length
        self.key_length = text
        return True

    def generate(self) -> Dict[str, Any]:
        """
        Generate a new key pair of `key_len` bits.

        Clears any previous key error.

        Returns:
            Dict with 'success', 'message' and 'used_time'
        """
        self.error = ""
        try:
            micros, keys = count_time(
                lambda: KeyPair.generate(self.key_len, self.config.miller_rabin_rounds)
            )
        except ValueError as exc:
            self.error = str(exc)
            return {'success': False, 'message': self.error}

        self._set_used_time(micros)
        self.keys = keys
        self.pub_key, self.priv_key = keys.to_strings()
        logger.info("Session generated a %d-bit key pair", keys.bits)
        return {
            'success': True,
            'message': 'Keys generated',
            'used_time': self.used_time,
        }

    def set_keys(self) -> Dict[str, Any]:
        """
        Load the key pair typed into pub_key / priv_key.

        On a parse or validation error the message is stored in `error`,
        the previously loaded keys stay untouched, and cryptographic actions
        are refused until keys are regenerated or the session is reset.

        Returns:
            Dict with 'success' and 'message'
        """
        try:
            keys = KeyPair.from_strings(self.pub_key, self.priv_key)
        except (ParseError, ValidationError) as exc:
            self.error = exc.message
            logger.debug("Rejected key strings: %s", exc.message)
            return {'success': False, 'message': exc.message}

        self.error = ""
        self.keys = keys
        self.key_len = keys.bits
        self.key_length = str(keys.bits)
        logger.info("Session loaded a %d-bit key pair", keys.bits)
        return {'success': True, 'message': 'Keys loaded'}

    # ========================================================================
    # Cryptographic actions
    # ========================================================================

    def _perform(self, action: Action, text: str,
                 func: Callable[[KeyPair, str], str]) -> Dict[str, Any]:
        if self.error or self.keys is None:
            self.error = KEYS_REQUIRED_MESSAGE
            return {'success': False, 'action': action.value, 'message': self.error}

        keys = self.keys.clone()
        text = _strip_input(text)
        try:
            micros, output = count_time(lambda: func(keys, text))
        except DecodingError:
            return {
                'success': False,
                'action': action.value,
                'message': INVALID_DECRYPTION_MESSAGE,
            }
        except ParseError as exc:
            return {'success': False, 'action': action.value, 'message': exc.message}

        self._set_used_time(micros)
        return {
            'success': True,
            'action': action.value,
            'message': 'OK',
            'output': output,
            'used_time': self.used_time,
        }

    def encrypt(self, text: str) -> Dict[str, Any]:
        """Encrypt text; output is the comma-joined hex ciphertext."""
        return self._perform(Action.ENCRYPT, text, lambda keys, s: keys.encrypt(s))

    def decrypt(self, text: str) -> Dict[str, Any]:
        """Decrypt a comma-joined hex ciphertext."""
        return self._perform(Action.DECRYPT, text, lambda keys, s: keys.decrypt(s))

    def sign(self, text: str) -> Dict[str, Any]:
        """Sign text; output is "<text>\\n<signature>"."""
        return self._perform(Action.SIGN, text,
                             lambda keys, s: f"{s}\n{keys.sign(s)}")

    def verify(self, text: str) -> Dict[str, Any]:
        """
        Verify "<message>\\n<signature>".

        Output is "<True|False>\\n<recovered text>".
        """
        def run(keys: KeyPair, s: str) -> str:
            parts = s.split("\n")
            if len(parts) != 2:
                return INVALID_VERIFY_INPUT_MESSAGE
            ok, recovered = keys.verify(parts[0], parts[1])
            return f"{ok}\n{recovered}"

        return self._perform(Action.VERIFY, text, run)
