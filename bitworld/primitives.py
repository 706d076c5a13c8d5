"""Shared identifiers, origins and errors used across the runtime modules."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass
from typing import Any, Hashable, Optional, Tuple

BlockNumber = int
AccountId = Hashable
Balance = int
CountryId = int
CurrencyId = int
GroupCollectionId = int
AssetId = int
AuctionId = int
SpotId = int
LandId = int
TokenId = int
Amount = int


class DispatchError(Exception):
    """A call failed and its effects must be discarded."""


class BadOrigin(DispatchError):
    """The origin of a call is not the kind the call requires."""

    def __init__(self, message: str = "BadOrigin") -> None:
        super().__init__(message)


class PalletError(DispatchError):
    """A named error raised by one of the runtime modules."""

    def __init__(self, variant: Any) -> None:
        self.variant = variant
        super().__init__(str(getattr(variant, "name", variant)))


class OriginKind(enum.Enum):
    """Who a call claims to come from."""

    SIGNED = "signed"
    ROOT = "root"
    NONE = "none"


@dataclass(frozen=True)
class Origin:
    """The origin of a dispatched call."""

    kind: OriginKind
    account: Any = None

    @classmethod
    def signed(cls, account: Any) -> "Origin":
        return cls(OriginKind.SIGNED, account)

    @classmethod
    def root(cls) -> "Origin":
        return cls(OriginKind.ROOT)

    @classmethod
    def none(cls) -> "Origin":
        return cls(OriginKind.NONE)

    def ensure_signed(self) -> Any:
        """Return the signing account, or raise BadOrigin."""
        if self.kind is not OriginKind.SIGNED:
            raise BadOrigin()
        return self.account

    def ensure_root(self) -> None:
        """Raise BadOrigin unless the origin is root."""
        if self.kind is not OriginKind.ROOT:
            raise BadOrigin()

    def ensure_none(self) -> None:
        """Raise BadOrigin unless the call is unsigned."""
        if self.kind is not OriginKind.NONE:
            raise BadOrigin()


class ItemKind(enum.Enum):
    """Kinds of item that can be put up for auction."""

    NFT = "nft"
    SPOT = "spot"
    COUNTRY = "country"
    BLOCK = "block"


@dataclass(frozen=True)
class ItemId:
    """Public identifier of an auctionable item.

    ``country_id`` is only meaningful for spots.
    """

    kind: ItemKind
    value: int
    country_id: CountryId = 0


class TokenKind(enum.IntEnum):
    """Variants of a social token currency id, in declaration order."""

    NATIVE = 0
    SOCIAL = 1
    DEX_SHARE = 2


@dataclass(frozen=True, order=True)
class SocialTokenCurrencyId:
    """Currency id: a native token, a social token or a DEX share of both."""

    kind: TokenKind
    token_id: TokenId
    paired_id: Optional[TokenId] = None

    @classmethod
    def native(cls, token_id: TokenId) -> "SocialTokenCurrencyId":
        return cls(TokenKind.NATIVE, token_id)

    @classmethod
    def social(cls, token_id: TokenId) -> "SocialTokenCurrencyId":
        return cls(TokenKind.SOCIAL, token_id)

    @classmethod
    def dex_share(cls, native_id: TokenId, social_id: TokenId) -> "SocialTokenCurrencyId":
        return cls(TokenKind.DEX_SHARE, native_id, social_id)

    def is_native_token_currency_id(self) -> bool:
        return self.kind is TokenKind.NATIVE

    def is_social_token_currency_id(self) -> bool:
        return self.kind is TokenKind.SOCIAL

    def is_dex_share_social_token_currency_id(self) -> bool:
        return self.kind is TokenKind.DEX_SHARE

    def split_dex_share_social_token_currency_id(
        self,
    ) -> Optional[Tuple["SocialTokenCurrencyId", "SocialTokenCurrencyId"]]:
        """Split a DEX share into its native and social parts."""
        if self.kind is not TokenKind.DEX_SHARE:
            return None
        return (
            SocialTokenCurrencyId.native(self.token_id),
            SocialTokenCurrencyId.social(self.paired_id),
        )

    @classmethod
    def join_dex_share_social_currency_id(
        cls,
        currency_id_0: "SocialTokenCurrencyId",
        currency_id_1: "SocialTokenCurrencyId",
    ) -> Optional["SocialTokenCurrencyId"]:
        """Join a native and a social id, in either order, into a DEX share."""
        kinds = (currency_id_0.kind, currency_id_1.kind)
        if kinds == (TokenKind.NATIVE, TokenKind.SOCIAL):
            return cls.dex_share(currency_id_0.token_id, currency_id_1.token_id)
        if kinds == (TokenKind.SOCIAL, TokenKind.NATIVE):
            return cls.dex_share(currency_id_1.token_id, currency_id_0.token_id)
        return None


@dataclass(frozen=True, order=True)
class TradingPair:
    """An ordered pair of currencies traded against each other."""

    first: SocialTokenCurrencyId
    second: SocialTokenCurrencyId

    @classmethod
    def new(
        cls, currency_id_a: SocialTokenCurrencyId, currency_id_b: SocialTokenCurrencyId
    ) -> "TradingPair":
        """Build a pair with the smaller id first."""
        if currency_id_a > currency_id_b:
            return cls(currency_id_b, currency_id_a)
        return cls(currency_id_a, currency_id_b)

    @classmethod
    def from_token_currency_ids(
        cls,
        currency_id_0: SocialTokenCurrencyId,
        currency_id_1: SocialTokenCurrencyId,
    ) -> Optional["TradingPair"]:
        """Pair a native with a social token, native first; otherwise None."""
        if currency_id_0.is_native_token_currency_id() and currency_id_1.is_social_token_currency_id():
            return cls(currency_id_0, currency_id_1)
        if currency_id_0.is_social_token_currency_id() and currency_id_1.is_native_token_currency_id():
            return cls(currency_id_1, currency_id_0)
        return None

    def get_dex_share_social_currency_id(self) -> Optional[SocialTokenCurrencyId]:
        return SocialTokenCurrencyId.join_dex_share_social_currency_id(self.first, self.second)


class Continuum(abc.ABC):
    """Something that can hand a continuum spot over to a country."""

    @abc.abstractmethod
    def transfer_spot(
        self, spot_id: SpotId, from_account: Any, to: Tuple[Any, CountryId]
    ) -> SpotId:
        """Transfer a spot and return its id; raise DispatchError on failure."""