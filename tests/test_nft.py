import pytest

from bitworld.currency import Balances
from bitworld.nft import (
    ClassInfo,
    CollectionType,
    NewNftClassCreated,
    NewNftCollectionCreated,
    NewNftMinted,
    NftClassData,
    NftConfig,
    NftError,
    NftGroupCollectionData,
    NftPallet,
    TokenType,
    TransferedNft,
    mint_weight,
)
from bitworld.primitives import BadOrigin, Origin, PalletError

ALICE = 1
BOB = 2
CHARLIE = 3
CLASS_ID = 0
TOKEN_ID = 0
COLLECTION_ID = 0


def make_pallet(auction_checker=None):
    balances = Balances(existential_deposit=1)
    balances.deposit(ALICE, 100000)
    return NftPallet(NftConfig(), balances, auction_checker)


@pytest.fixture
def pallet():
    return make_pallet()


def init_test_nft(pallet, owner=ALICE):
    origin = Origin.signed(owner)
    pallet.create_group(Origin.root(), b"\x01", b"\x01")
    pallet.create_class(
        origin, b"\x01", COLLECTION_ID, TokenType.TRANSFERABLE, CollectionType.COLLECTABLE
    )
    pallet.mint(origin, CLASS_ID, b"\x01", b"\x01", b"\x01", 1)


def expect_error(variant, func, *args):
    with pytest.raises(PalletError) as exc:
        func(*args)
    assert exc.value.variant is variant


def test_create_group_should_work(pallet):
    pallet.create_group(Origin.root(), b"\x01", b"\x01")
    assert pallet.get_group_collection(0) == NftGroupCollectionData(b"\x01", b"\x01")
    assert pallet.all_nft_collection_count == 1
    assert pallet.events[-1] == NewNftCollectionCreated(0)


def test_create_group_requires_root(pallet):
    with pytest.raises(BadOrigin):
        pallet.create_group(Origin.signed(ALICE), b"\x01", b"\x01")
    assert pallet.get_group_collection(0) is None


def test_create_class_should_work(pallet):
    pallet.create_group(Origin.root(), b"\x01", b"\x01")
    pallet.create_class(
        Origin.signed(ALICE),
        b"\x01",
        COLLECTION_ID,
        TokenType.TRANSFERABLE,
        CollectionType.COLLECTABLE,
    )
    class_data = NftClassData(
        deposit=2,
        metadata=b"\x01",
        token_type=TokenType.TRANSFERABLE,
        collection_type=CollectionType.COLLECTABLE,
        total_supply=0,
        initial_supply=0,
    )
    assert pallet.get_class_collection(0) == 0
    assert pallet.all_nft_collection_count == 1
    assert pallet.classes[CLASS_ID] == ClassInfo(b"\x01", 0, ALICE, class_data)
    assert pallet.events[-1] == NewNftClassCreated(ALICE, CLASS_ID)
    assert pallet.currency.reserved_balance(pallet.class_fund_account(CLASS_ID)) == 2


def test_create_class_needs_existing_collection(pallet):
    expect_error(
        NftError.COLLECTION_IS_NOT_EXIST,
        pallet.create_class,
        Origin.signed(ALICE),
        b"\x01",
        5,
        TokenType.TRANSFERABLE,
        CollectionType.COLLECTABLE,
    )
    assert pallet.currency.free_balance(ALICE) == 100000


def test_mint_asset_should_work(pallet):
    init_test_nft(pallet)
    assert pallet.currency.reserved_balance(pallet.class_fund_account(CLASS_ID)) == 2 + 1
    assert pallet.next_asset_id == 1
    assert pallet.get_assets_by_owner(ALICE) == [0]
    assert pallet.get_asset(0) == (CLASS_ID, TOKEN_ID)
    assert pallet.events[-1] == NewNftMinted(0, 0, ALICE, CLASS_ID, 1, 0)

    pallet.mint(Origin.signed(ALICE), CLASS_ID, b"\x01", b"\x01", b"\x01", 2)
    assert pallet.next_asset_id == 3
    assert pallet.get_assets_by_owner(ALICE) == [0, 1, 2]
    assert pallet.get_asset(1) == (CLASS_ID, 1)
    assert pallet.get_asset(2) == (CLASS_ID, 2)
    assert pallet.events[-1] == NewNftMinted(1, 2, ALICE, CLASS_ID, 2, 2)


def test_mint_asset_should_fail(pallet):
    origin = Origin.signed(ALICE)
    pallet.create_group(Origin.root(), b"\x01", b"\x01")
    pallet.create_class(
        origin, b"\x01", COLLECTION_ID, TokenType.TRANSFERABLE, CollectionType.COLLECTABLE
    )
    expect_error(
        NftError.INVALID_QUANTITY, pallet.mint, origin, CLASS_ID, b"\x01", b"\x01", b"\x01", 0
    )
    expect_error(
        NftError.CLASS_ID_NOT_FOUND, pallet.mint, origin, 1, b"\x01", b"\x01", b"\x01", 1
    )
    expect_error(
        NftError.NO_PERMISSION,
        pallet.mint,
        Origin.signed(BOB),
        CLASS_ID,
        b"\x01",
        b"\x01",
        b"\x01",
        1,
    )
    assert pallet.next_asset_id == 0


def test_transfer_should_work(pallet):
    init_test_nft(pallet)
    pallet.transfer(Origin.signed(ALICE), BOB, 0)
    assert pallet.events[-1] == TransferedNft(1, 2, 0)
    assert pallet.tokens[(CLASS_ID, TOKEN_ID)].owner == BOB


def test_transfer_rejected_while_in_auction():
    pallet = make_pallet(lambda asset_id: asset_id == 0)
    init_test_nft(pallet)
    expect_error(
        NftError.ASSET_ALREADY_IN_AUCTION, pallet.transfer, Origin.signed(ALICE), BOB, 0
    )
    assert pallet.get_assets_by_owner(ALICE) == [0]


def test_transfer_batch_should_work(pallet):
    origin = Origin.signed(ALICE)
    init_test_nft(pallet)
    pallet.create_class(
        origin, b"\x01", COLLECTION_ID, TokenType.TRANSFERABLE, CollectionType.COLLECTABLE
    )
    pallet.mint(origin, 1, b"\x01", b"\x01", b"\x01", 1)
    pallet.transfer_batch(origin, [(BOB, 0), (BOB, 1)])
    assert pallet.events[-1] == TransferedNft(1, 2, 0)
    assert pallet.get_assets_by_owner(BOB) == [0, 1]
    assert pallet.get_assets_by_owner(ALICE) == []


def test_transfer_batch_should_fail(pallet):
    origin = Origin.signed(ALICE)
    init_test_nft(pallet)
    pallet.create_class(
        origin, b"\x01", COLLECTION_ID, TokenType.TRANSFERABLE, CollectionType.COLLECTABLE
    )
    pallet.mint(origin, 1, b"\x01", b"\x01", b"\x01", 1)
    expect_error(
        NftError.ASSET_ID_NOT_FOUND, pallet.transfer_batch, origin, [(BOB, 3), (BOB, 4)]
    )
    assert pallet.get_assets_by_owner(ALICE) == [0, 1]


def test_do_create_group_collection_should_work(pallet):
    assert pallet.do_create_group_collection(b"\x01", b"\x01") == 0
    assert pallet.get_group_collection(0) == NftGroupCollectionData(b"\x01", b"\x01")
    assert pallet.next_group_collection_id == 1


def test_do_handle_asset_ownership_transfer_should_work(pallet):
    init_test_nft(pallet)
    pallet.handle_asset_ownership_transfer(ALICE, BOB, 0)
    assert pallet.get_assets_by_owner(ALICE) == []
    assert pallet.get_assets_by_owner(BOB) == [0]


def test_do_transfer_should_work(pallet):
    init_test_nft(pallet)
    assert pallet.do_transfer(ALICE, BOB, 0) == TOKEN_ID
    assert pallet.get_assets_by_owner(ALICE) == []
    assert pallet.get_assets_by_owner(BOB) == [0]


def test_do_transfer_should_fail(pallet):
    origin = Origin.signed(ALICE)
    expect_error(NftError.ASSET_ID_NOT_FOUND, pallet.do_transfer, ALICE, BOB, 0)

    init_test_nft(pallet)
    expect_error(NftError.NO_PERMISSION, pallet.do_transfer, BOB, ALICE, 0)

    pallet.create_class(
        origin, b"\x01", COLLECTION_ID, TokenType.BOUND_TO_ADDRESS, CollectionType.COLLECTABLE
    )
    pallet.mint(origin, 1, b"\x01", b"\x01", b"\x01", 1)
    expect_error(NftError.NON_TRANSFERABLE, pallet.do_transfer, ALICE, BOB, 1)


def test_do_check_nft_ownership_should_work(pallet):
    init_test_nft(pallet)
    assert pallet.check_nft_ownership(ALICE, TOKEN_ID) is True
    assert pallet.check_nft_ownership(BOB, TOKEN_ID) is False


def test_do_check_nft_ownership_should_fail(pallet):
    expect_error(NftError.ASSET_ID_NOT_FOUND, pallet.check_nft_ownership, ALICE, TOKEN_ID)


def test_sign_asset(pallet):
    init_test_nft(pallet)
    expect_error(NftError.SIGN_OWN_ASSET, pallet.sign_asset, Origin.signed(ALICE), 0)
    assert pallet.get_asset_supporters(0) is None
    pallet.sign_asset(Origin.signed(BOB), 0)
    pallet.sign_asset(Origin.signed(CHARLIE), 0)
    assert pallet.get_asset_supporters(0) == [BOB, CHARLIE]


def test_bound_assets_are_skipped_in_batch(pallet):
    origin = Origin.signed(ALICE)
    pallet.create_group(Origin.root(), b"\x01", b"\x01")
    pallet.create_class(
        origin, b"\x01", COLLECTION_ID, TokenType.BOUND_TO_ADDRESS, CollectionType.WEARABLE
    )
    pallet.mint(origin, CLASS_ID, b"\x01", b"\x01", b"\x01", 1)
    pallet.transfer_batch(origin, [(BOB, 0)])
    assert pallet.get_assets_by_owner(ALICE) == [0]
    assert pallet.tokens[(CLASS_ID, TOKEN_ID)].owner == ALICE


def test_token_and_collection_type_predicates():
    assert TokenType.TRANSFERABLE.is_transferable()
    assert not TokenType.BOUND_TO_ADDRESS.is_transferable()
    assert CollectionType.COLLECTABLE.is_collectable()
    assert not CollectionType.COLLECTABLE.is_wearable()
    assert CollectionType.WEARABLE.is_wearable()
    assert CollectionType.EXECUTABLE.is_executable()
    assert not CollectionType.WEARABLE.is_executable()


def test_mint_weight_values():
    assert mint_weight(0, 0, 0) == 456_053_000
    assert mint_weight(1, 0, 0) == 485_189_000
    assert mint_weight(1, 0, 2**64) == 2**64 - 1


def test_class_fund_accounts_differ_per_class(pallet):
    first = pallet.class_fund_account(0)
    second = pallet.class_fund_account(1)
    assert first != second
    assert first.startswith(b"modlbit/bNFT")
    assert len(first) == 32