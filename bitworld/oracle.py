"""A bounded record of submitted numbers and the rules for accepting unsigned submissions."""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, List, Optional, Tuple

from bitworld.primitives import Origin

logger = logging.getLogger(__name__)

KEY_TYPE = b"demo"
NUM_VEC_LEN = 10
UNSIGNED_TXS_PRIORITY = 100
HTTP_HEADER_USER_AGENT = "application/json"
FETCH_TIMEOUT_PERIOD = 3000
LOCK_TIMEOUT_EXPIRATION = FETCH_TIMEOUT_PERIOD + 1000
LOCK_BLOCK_EXPIRATION = 3

TAG_PREFIX = "ocw-demo"
TRANSACTION_LONGEVITY = 3

SUBMIT_NUMBER_UNSIGNED = "submit_number_unsigned"
SUBMIT_NUMBER_UNSIGNED_WITH_SIGNED_PAYLOAD = "submit_number_unsigned_with_signed_payload"


class OracleError(enum.Enum):
    """Errors of the off-chain submission paths."""

    UNKNOWN_OFFCHAIN_MUX = "UnknownOffchainMux"
    NO_LOCAL_ACCT_FOR_SIGNING = "NoLocalAcctForSigning"
    OFFCHAIN_SIGNED_TX_ERROR = "OffchainSignedTxError"
    OFFCHAIN_UNSIGNED_TX_ERROR = "OffchainUnsignedTxError"
    OFFCHAIN_UNSIGNED_TX_SIGNED_PAYLOAD_ERROR = "OffchainUnsignedTxSignedPayloadError"
    HTTP_FETCHING_ERROR = "HttpFetchingError"


@dataclass(frozen=True)
class Payload:
    """A number signed off-chain by the holder of ``public``."""

    number: int
    public: Any


@dataclass(frozen=True)
class NewNumber:
    """Event: a number was accepted; ``who`` is None for unsigned submissions."""

    who: Optional[Any]
    number: int


@dataclass(frozen=True)
class ValidTransaction:
    """How an accepted unsigned transaction is placed in the pool."""

    priority: int
    provides: Tuple[Tuple[str, bytes], ...]
    longevity: int
    propagate: bool


class InvalidTransaction(Exception):
    """An unsigned transaction that must not enter the pool."""

    BAD_PROOF = "BadProof"
    CALL = "Call"

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _valid_tx(provide: bytes) -> ValidTransaction:
    return ValidTransaction(
        priority=UNSIGNED_TXS_PRIORITY,
        provides=((TAG_PREFIX, provide),),
        longevity=TRANSACTION_LONGEVITY,
        propagate=True,
    )


class NumberOracle:
    """Keeps the most recent ``capacity`` submitted numbers, oldest first."""

    def __init__(self, capacity: int = NUM_VEC_LEN) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._numbers: Deque[int] = deque()
        self.events: List[NewNumber] = []

    @property
    def numbers(self) -> List[int]:
        return list(self._numbers)

    def _append_or_replace_number(self, number: int) -> None:
        if len(self._numbers) == self.capacity:
            self._numbers.popleft()
        self._numbers.append(number)
        logger.debug("Number vector: %s", list(self._numbers))

    def submit_number_signed(self, origin: Origin, number: int) -> None:
        """Signed call: record ``number`` on behalf of the signer."""
        who = origin.ensure_signed()
        logger.info("submit_number_signed: (%s, %r)", number, who)
        self._append_or_replace_number(number)
        self.events.append(NewNumber(who, number))

    def submit_number_unsigned(self, origin: Origin, number: int) -> None:
        """Unsigned call: record ``number``."""
        origin.ensure_none()
        logger.info("submit_number_unsigned: %s", number)
        self._append_or_replace_number(number)
        self.events.append(NewNumber(None, number))

    def submit_number_unsigned_with_signed_payload(
        self, origin: Origin, payload: Payload, signature: Any
    ) -> None:
        """Unsigned call carrying a signed payload; the signature is checked at validation."""
        origin.ensure_none()
        logger.info(
            "submit_number_unsigned_with_signed_payload: (%s, %r)",
            payload.number,
            payload.public,
        )
        self._append_or_replace_number(payload.number)
        self.events.append(NewNumber(None, payload.number))

    def validate_unsigned(
        self,
        call_name: str,
        payload: Optional[Payload] = None,
        signature: Any = None,
        verify: Optional[Callable[[Payload, Any], bool]] = None,
    ) -> ValidTransaction:
        """Decide whether an unsigned call may enter the pool; raise InvalidTransaction if not."""
        if call_name == SUBMIT_NUMBER_UNSIGNED:
            return _valid_tx(SUBMIT_NUMBER_UNSIGNED.encode())
        if call_name == SUBMIT_NUMBER_UNSIGNED_WITH_SIGNED_PAYLOAD:
            if payload is None or verify is None or not verify(payload, signature):
                raise InvalidTransaction(InvalidTransaction.BAD_PROOF)
            return _valid_tx(SUBMIT_NUMBER_UNSIGNED_WITH_SIGNED_PAYLOAD.encode())
        raise InvalidTransaction(InvalidTransaction.CALL)