"""NFT group collections, classes and assets with deposits held in class funds."""

from __future__ import annotations

import enum
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from bitworld.currency import Balances
from bitworld.primitives import AssetId, DispatchError, GroupCollectionId, Origin, PalletError

_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_ACCOUNT_LENGTH = 32
_MODULE_ACCOUNT_PREFIX = b"modl"

_MINT_BASE_WEIGHT = 456_053_000
_MINT_PER_ITEM_WEIGHT = 29_136_000
ROCKS_DB_READ_WEIGHT = 25_000_000
ROCKS_DB_WRITE_WEIGHT = 100_000_000


class TokenType(enum.Enum):
    """Whether tokens of a class may change hands."""

    TRANSFERABLE = "Transferable"
    BOUND_TO_ADDRESS = "BoundToAddress"

    def is_transferable(self) -> bool:
        return self is TokenType.TRANSFERABLE


class CollectionType(enum.Enum):
    """What the tokens of a class are used for."""

    COLLECTABLE = "Collectable"
    WEARABLE = "Wearable"
    EXECUTABLE = "Executable"

    def is_collectable(self) -> bool:
        return self is CollectionType.COLLECTABLE

    def is_executable(self) -> bool:
        return self is CollectionType.EXECUTABLE

    def is_wearable(self) -> bool:
        return self is CollectionType.WEARABLE


@dataclass(frozen=True)
class NftGroupCollectionData:
    name: bytes
    properties: bytes


@dataclass(frozen=True)
class NftClassData:
    """Class data: the deposit paid and the kind of tokens it holds."""

    deposit: int
    metadata: bytes
    token_type: TokenType = TokenType.TRANSFERABLE
    collection_type: CollectionType = CollectionType.COLLECTABLE
    total_supply: int = 0
    initial_supply: int = 0


@dataclass(frozen=True)
class NftAssetData:
    """Token data: the deposit paid for one token and its description."""

    deposit: int
    name: bytes
    description: bytes
    properties: bytes


@dataclass
class ClassInfo:
    metadata: bytes
    total_issuance: int
    owner: Any
    data: NftClassData


@dataclass
class TokenInfo:
    metadata: bytes
    owner: Any
    data: NftAssetData


class NftError(enum.Enum):
    """Errors raised by the NFT module."""

    ALREADY_INITIALIZED = "AlreadyInitialized"
    ASSET_INFO_NOT_FOUND = "AssetInfoNotFound"
    ASSET_ID_NOT_FOUND = "AssetIdNotFound"
    NO_PERMISSION = "NoPermission"
    NO_AVAILABLE_COLLECTION_ID = "NoAvailableCollectionId"
    COLLECTION_IS_NOT_EXIST = "CollectionIsNotExist"
    CLASS_ID_NOT_FOUND = "ClassIdNotFound"
    NON_TRANSFERABLE = "NonTransferable"
    INVALID_QUANTITY = "InvalidQuantity"
    NO_AVAILABLE_ASSET_ID = "NoAvailableAssetId"
    ASSET_ID_ALREADY_EXIST = "AssetIdAlreadyExist"
    ASSET_ALREADY_IN_AUCTION = "AssetAlreadyInAuction"
    SIGN_OWN_ASSET = "SignOwnAsset"
    NO_AVAILABLE_CLASS_ID = "NoAvailableClassId"
    NO_AVAILABLE_TOKEN_ID = "NoAvailableTokenId"


@dataclass(frozen=True)
class NewNftCollectionCreated:
    collection_id: GroupCollectionId


@dataclass(frozen=True)
class NewNftClassCreated:
    owner: Any
    class_id: int


@dataclass(frozen=True)
class NewNftMinted:
    first_asset_id: AssetId
    last_asset_id: AssetId
    owner: Any
    class_id: int
    quantity: int
    last_token_id: int


@dataclass(frozen=True)
class TransferedNft:
    from_account: Any
    to: Any
    token_id: int


@dataclass(frozen=True)
class NftConfig:
    """Deposits and the module id whose sub-accounts hold class funds."""

    create_class_deposit: int = 2
    create_asset_deposit: int = 1
    module_id: bytes = b"bit/bNFT"

    def __post_init__(self) -> None:
        if self.create_class_deposit < 0 or self.create_asset_deposit < 0:
            raise ValueError("deposits cannot be negative")
        if len(_MODULE_ACCOUNT_PREFIX) + len(self.module_id) + 4 > _ACCOUNT_LENGTH:
            raise ValueError("module id too long for an account id")


def mint_weight(
    quantity: int,
    db_read: int = ROCKS_DB_READ_WEIGHT,
    db_write: int = ROCKS_DB_WRITE_WEIGHT,
) -> int:
    """Weight of minting ``quantity`` tokens, saturating at 64 bits."""
    weight = (
        _MINT_BASE_WEIGHT
        + _MINT_PER_ITEM_WEIGHT * quantity
        + db_read * 3
        + db_write * 3
        + db_write * 2 * quantity
    )
    return min(weight, _U64_MAX)


def _fail(variant: NftError) -> PalletError:
    return PalletError(variant)


class NftPallet:
    """Group collections, NFT classes and assets, and who holds or signs them."""

    def __init__(
        self,
        config: NftConfig,
        currency: Balances,
        auction_checker: Optional[Callable[[AssetId], bool]] = None,
    ) -> None:
        self.config = config
        self.currency = currency
        self._auction_checker = auction_checker or (lambda _asset_id: False)

        self._assets: Dict[AssetId, Tuple[int, int]] = {}
        self._assets_by_owner: Dict[Hashable, List[AssetId]] = {}
        self._group_collections: Dict[GroupCollectionId, NftGroupCollectionData] = {}
        self._class_collections: Dict[int, GroupCollectionId] = {}
        self._asset_supporters: Dict[AssetId, List[Any]] = {}
        self.next_group_collection_id: GroupCollectionId = 0
        self.all_nft_collection_count = 0
        self.next_asset_id: AssetId = 0

        self.classes: Dict[int, ClassInfo] = {}
        self.tokens: Dict[Tuple[int, int], TokenInfo] = {}
        self.next_class_id = 0
        self._next_token_id: Dict[int, int] = {}

        self.events: List[Any] = []

    # Accounts

    def class_fund_account(self, class_id: int) -> bytes:
        """Sub-account of the module that holds the deposits of a class."""
        raw = _MODULE_ACCOUNT_PREFIX + self.config.module_id + class_id.to_bytes(4, "little")
        return raw.ljust(_ACCOUNT_LENGTH, b"\x00")

    # Calls

    def create_group(self, origin: Origin, name: bytes, properties: bytes) -> None:
        """Root call: create a group collection."""
        origin.ensure_root()
        if self.all_nft_collection_count >= _U64_MAX:
            raise DispatchError("Overflow adding a new collection to total collection")
        collection_id = self.do_create_group_collection(name, properties)
        self._group_collections[collection_id] = NftGroupCollectionData(
            bytes(name), bytes(properties)
        )
        self.all_nft_collection_count += 1
        self.events.append(NewNftCollectionCreated(collection_id))

    def create_class(
        self,
        origin: Origin,
        metadata: bytes,
        collection_id: GroupCollectionId,
        token_type: TokenType,
        collection_type: CollectionType,
    ) -> None:
        """Signed call: create a class in a collection, paying the class deposit."""
        sender = origin.ensure_signed()
        class_id = self.next_class_id
        if collection_id not in self._group_collections:
            raise _fail(NftError.COLLECTION_IS_NOT_EXIST)
        if class_id > _U32_MAX:
            raise _fail(NftError.NO_AVAILABLE_CLASS_ID)
        class_fund = self.class_fund_account(class_id)
        deposit = self.config.create_class_deposit
        self.currency.transfer(sender, class_fund, deposit, keep_alive=True)
        self.currency.reserve(class_fund, self.currency.free_balance(class_fund))

        data = NftClassData(
            deposit=deposit,
            metadata=bytes(metadata),
            token_type=token_type,
            collection_type=collection_type,
        )
        self.classes[class_id] = ClassInfo(bytes(metadata), 0, sender, data)
        self._next_token_id[class_id] = 0
        self.next_class_id = class_id + 1
        self._class_collections[class_id] = collection_id
        self.events.append(NewNftClassCreated(sender, class_id))

    def mint(
        self,
        origin: Origin,
        class_id: int,
        name: bytes,
        description: bytes,
        metadata: bytes,
        quantity: int,
    ) -> None:
        """Signed call: the class owner mints ``quantity`` assets, paying a deposit each."""
        sender = origin.ensure_signed()
        if quantity < 1:
            raise _fail(NftError.INVALID_QUANTITY)
        class_info = self.classes.get(class_id)
        if class_info is None:
            raise _fail(NftError.CLASS_ID_NOT_FOUND)
        if sender != class_info.owner:
            raise _fail(NftError.NO_PERMISSION)

        deposit = self.config.create_asset_deposit
        class_fund = self.class_fund_account(class_id)
        total_deposit = deposit * quantity
        self.currency.transfer(sender, class_fund, total_deposit, keep_alive=True)
        self.currency.reserve(class_fund, total_deposit)

        token_data = NftAssetData(deposit, bytes(name), bytes(description), bytes(metadata))
        new_asset_ids: List[AssetId] = []
        last_token_id = 0
        for _ in range(quantity):
            asset_id = self.next_asset_id
            if asset_id >= _U64_MAX:
                raise _fail(NftError.NO_AVAILABLE_ASSET_ID)
            self.next_asset_id = asset_id + 1
            new_asset_ids.append(asset_id)

            owned = self._assets_by_owner.get(sender)
            if owned is None:
                self._assets_by_owner[sender] = [asset_id]
            elif asset_id in owned:
                raise _fail(NftError.ASSET_ID_ALREADY_EXIST)
            else:
                owned.append(asset_id)

            token_id = self._mint_token(sender, class_id, bytes(metadata), token_data)
            self._assets[asset_id] = (class_id, token_id)
            last_token_id = token_id

        self.events.append(
            NewNftMinted(
                new_asset_ids[0], new_asset_ids[-1], sender, class_id, quantity, last_token_id
            )
        )

    def transfer(self, origin: Origin, to: Any, asset_id: AssetId) -> None:
        """Signed call: transfer an asset that is not in an auction."""
        sender = origin.ensure_signed()
        if self.check_item_in_auction(asset_id):
            raise _fail(NftError.ASSET_ALREADY_IN_AUCTION)
        token_id = self.do_transfer(sender, to, asset_id)
        self.events.append(TransferedNft(sender, to, token_id))

    def transfer_batch(self, origin: Origin, tos: List[Tuple[Any, AssetId]]) -> None:
        """Signed call: transfer several assets; bound assets are skipped."""
        sender = origin.ensure_signed()
        for to, asset_id in tos:
            asset = self._assets.get(asset_id)
            if asset is None:
                raise _fail(NftError.ASSET_ID_NOT_FOUND)
            class_info = self.classes.get(asset[0])
            if class_info is None:
                raise _fail(NftError.CLASS_ID_NOT_FOUND)
            if not class_info.data.token_type.is_transferable():
                continue
            token = self.tokens.get(asset)
            if token is None:
                raise _fail(NftError.ASSET_INFO_NOT_FOUND)
            if sender != token.owner:
                raise _fail(NftError.NO_PERMISSION)
            with suppress(PalletError):
                self.handle_asset_ownership_transfer(sender, to, asset_id)
            self._transfer_token(sender, to, asset)
            self.events.append(TransferedNft(sender, to, asset[1]))

    def sign_asset(self, origin: Origin, asset_id: AssetId) -> None:
        """Signed call: support an asset that the signer does not hold."""
        sender = origin.ensure_signed()
        if asset_id in self.get_assets_by_owner(sender):
            raise _fail(NftError.SIGN_OWN_ASSET)
        self._asset_supporters.setdefault(asset_id, []).append(sender)

    # Internals

    def do_create_group_collection(
        self, name: bytes, properties: bytes
    ) -> GroupCollectionId:
        """Store a group collection under the next free id and return that id."""
        collection_id = self.next_group_collection_id
        if collection_id >= _U64_MAX:
            raise _fail(NftError.NO_AVAILABLE_COLLECTION_ID)
        self.next_group_collection_id = collection_id + 1
        self._group_collections[collection_id] = NftGroupCollectionData(
            bytes(name), bytes(properties)
        )
        return collection_id

    def handle_asset_ownership_transfer(self, sender: Any, to: Any, asset_id: AssetId) -> None:
        """Move an asset id from the sender's list to the recipient's."""
        owned = self._assets_by_owner.get(sender, [])
        if asset_id not in owned:
            raise DispatchError("asset is not held by the sender")
        owned.remove(asset_id)
        self._assets_by_owner[sender] = owned

        received = self._assets_by_owner.get(to)
        if received is None:
            self._assets_by_owner[to] = [asset_id]
        elif asset_id in received:
            raise _fail(NftError.ASSET_ID_ALREADY_EXIST)
        else:
            received.append(asset_id)

    def do_transfer(self, sender: Any, to: Any, asset_id: AssetId) -> int:
        """Transfer an asset the sender holds and return its token id."""
        asset = self._assets.get(asset_id)
        if asset is None:
            raise _fail(NftError.ASSET_ID_NOT_FOUND)
        class_info = self.classes.get(asset[0])
        if class_info is None:
            raise _fail(NftError.CLASS_ID_NOT_FOUND)
        if not class_info.data.token_type.is_transferable():
            raise _fail(NftError.NON_TRANSFERABLE)
        if not self.check_nft_ownership(sender, asset_id):
            raise _fail(NftError.NO_PERMISSION)
        with suppress(PalletError):
            self.handle_asset_ownership_transfer(sender, to, asset_id)
        self._transfer_token(sender, to, asset)
        return asset[1]

    def check_nft_ownership(self, sender: Any, asset_id: AssetId) -> bool:
        """Whether ``sender`` owns the token behind ``asset_id``."""
        asset = self._assets.get(asset_id)
        if asset is None:
            raise _fail(NftError.ASSET_ID_NOT_FOUND)
        if asset[0] not in self.classes:
            raise _fail(NftError.CLASS_ID_NOT_FOUND)
        token = self.tokens.get(asset)
        if token is None:
            raise _fail(NftError.ASSET_INFO_NOT_FOUND)
        return sender == token.owner

    def check_item_in_auction(self, asset_id: AssetId) -> bool:
        return bool(self._auction_checker(asset_id))

    def _mint_token(
        self, owner: Any, class_id: int, metadata: bytes, data: NftAssetData
    ) -> int:
        token_id = self._next_token_id.get(class_id, 0)
        if token_id >= _U64_MAX:
            raise _fail(NftError.NO_AVAILABLE_TOKEN_ID)
        self._next_token_id[class_id] = token_id + 1
        self.classes[class_id].total_issuance += 1
        self.tokens[(class_id, token_id)] = TokenInfo(metadata, owner, data)
        return token_id

    def _transfer_token(self, from_account: Any, to: Any, token: Tuple[int, int]) -> None:
        info = self.tokens.get(token)
        if info is None:
            raise _fail(NftError.ASSET_INFO_NOT_FOUND)
        if info.owner != from_account:
            raise _fail(NftError.NO_PERMISSION)
        info.owner = to

    # Queries

    def get_asset(self, asset_id: AssetId) -> Optional[Tuple[int, int]]:
        return self._assets.get(asset_id)

    def get_assets_by_owner(self, owner: Any) -> List[AssetId]:
        return list(self._assets_by_owner.get(owner, []))

    def get_group_collection(
        self, collection_id: GroupCollectionId
    ) -> Optional[NftGroupCollectionData]:
        return self._group_collections.get(collection_id)

    def get_class_collection(self, class_id: int) -> GroupCollectionId:
        return self._class_collections.get(class_id, 0)

    def get_asset_supporters(self, asset_id: AssetId) -> Optional[List[Any]]:
        supporters = self._asset_supporters.get(asset_id)
        return None if supporters is None else list(supporters)