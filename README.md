# bitworld

In-memory models of a small virtual-world economy:

- `bitworld.primitives`: shared identifiers, call origins, errors, and social-token currency ids with trading pairs.
- `bitworld.currency`: a single-currency balance ledger, a multi-token ledger, and a router between the native currency and social tokens.
- `bitworld.nft`: NFT group collections, classes and minted assets, with transfers and supporters.
- `bitworld.oracle`: a bounded queue of recently submitted numbers, plus the rules for accepting unsigned submissions.

All state is held in ordinary Python objects. Failed calls raise `bitworld.primitives.DispatchError` or one of its subclasses.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Origins and errors

Every dispatchable call takes an `Origin` as its first argument:

```python
from bitworld.primitives import Origin

alice = Origin.signed(1)
root = Origin.root()
unsigned = Origin.none()
```

- `Origin.ensure_signed()` returns the signing account.
- `ensure_root()` and `ensure_none()` check the other two kinds.
- Each of them raises `BadOrigin` when the origin is of the wrong kind.

Named module errors are raised as `PalletError`. The error's `variant` attribute holds the enum member, for example `CurrencyError.INSUFFICIENT_BALANCE` or `NftError.NO_PERMISSION`.

## Currency ids and trading pairs

```python
from bitworld.primitives import SocialTokenCurrencyId, TradingPair

native = SocialTokenCurrencyId.native(0)
social = SocialTokenCurrencyId.social(7)

pair = TradingPair.from_token_currency_ids(social, native)
assert pair == TradingPair(native, social)
assert pair.get_dex_share_social_currency_id() == SocialTokenCurrencyId.dex_share(0, 7)
```

`TradingPair.new` puts the smaller id first. `from_token_currency_ids` returns `None` unless the two ids are one native and one social.

## Currencies

```python
from bitworld.currency import Balances, MultiTokens, SocialCurrencies, FixedCurrency
from bitworld.primitives import SocialTokenCurrencyId

native_id = SocialTokenCurrencyId.native(0)
balances = Balances(existential_deposit=1)
tokens = MultiTokens(existential_deposit=0)
currencies = SocialCurrencies(balances, tokens, native_id)

currencies.deposit(native_id, 1, 1000)
currencies.transfer(native_id, 1, 2, 250)
assert currencies.free_balance(native_id, 2) == 250

social_id = SocialTokenCurrencyId.social(1)
currencies.update_balance(social_id, 1, 400)   # positive: deposit
currencies.update_balance(social_id, 1, -100)  # otherwise: withdraw
assert currencies.total_issuance(social_id) == 300
```

- `Balances` keeps free and reserved funds for each account. It supports locks through `set_lock`, `extend_lock` and `remove_lock`.
- Reserved funds are managed with `reserve`, `unreserve`, `slash_reserved` and `repatriate_reserved`. The last of these takes a `BalanceStatus` that says where the moved funds land.
- An account whose total falls below the existential deposit is removed, and its dust is burned.
- `transfer(..., keep_alive=True)` refuses to reap the sender.
- `slash`, `unreserve` and `slash_reserved` return the part of the amount that could not be taken.
- `MultiTokens` keeps one `Balances` ledger per currency id. Its existential deposit is either a number or a callable of the currency id.
- `SocialCurrencies` sends the native currency id to the native ledger and every other id to the multi-token ledger. It appends `Transferred`, `Deposited`, `Withdrawn` and `BalanceUpdated` events to its `events` list.
- The dispatchable forms are `dispatch_transfer` (signed), `transfer_native_currency` (signed) and `dispatch_update_balance` (root).
- `FixedCurrency(currencies, currency_id)` is a view of one currency of the router.

## NFTs

```python
from bitworld.currency import Balances
from bitworld.nft import NftPallet, NftConfig, TokenType, CollectionType
from bitworld.primitives import Origin

balances = Balances(existential_deposit=1)
balances.deposit(1, 100_000)
alice, root = Origin.signed(1), Origin.root()

nft = NftPallet(NftConfig(), balances, auction_checker=lambda asset_id: False)
nft.create_group(root, b"\x01", b"\x01")
nft.create_class(alice, b"\x01", 0, TokenType.TRANSFERABLE, CollectionType.COLLECTABLE)
nft.mint(alice, 0, b"name", b"description", b"\x01", 2)
assert nft.get_assets_by_owner(1) == [0, 1]

nft.transfer(alice, 2, 0)
assert nft.get_assets_by_owner(2) == [0]
```

- Creating a class moves `NftConfig.create_class_deposit` into the class fund account and reserves it there. The class fund account is given by `class_fund_account(class_id)`.
- Each minted asset moves and reserves `create_asset_deposit` in the same way.
- Assets of a `TokenType.BOUND_TO_ADDRESS` class cannot be sent with `transfer`, which raises `NftError.NON_TRANSFERABLE`. `transfer_batch` skips them.
- `transfer` refuses assets for which the `auction_checker` returns true.
- `sign_asset` records a supporter of an asset that the signer does not hold. The supporters are read back with `get_asset_supporters`.
- Events such as `NewNftCollectionCreated`, `NewNftClassCreated`, `NewNftMinted` and `TransferedNft` are appended to `nft.events`.
- `mint_weight(quantity)` gives the weight charged for minting, saturating at 64 bits.

## Oracle

```python
from bitworld.oracle import NumberOracle, Payload, SUBMIT_NUMBER_UNSIGNED
from bitworld.primitives import Origin

oracle = NumberOracle(capacity=10)
oracle.submit_number_signed(Origin.signed(1), 42)
oracle.submit_number_unsigned(Origin.none(), 7)
assert oracle.numbers == [42, 7]

tx = oracle.validate_unsigned(SUBMIT_NUMBER_UNSIGNED)
assert tx.priority == 100
```

- When the queue is full, the oldest number is dropped.
- `validate_unsigned` accepts `submit_number_unsigned` in all cases.
- It accepts `submit_number_unsigned_with_signed_payload` only when the supplied `verify(payload, signature)` callable returns true.
- Otherwise it raises `InvalidTransaction`, whose `reason` is `"BadProof"` or `"Call"`.

## What the package does not do

- There is no continuum spot grid, auction-slot rotation or neighbourhood voting. `bitworld.primitives.Continuum` is only an abstract interface for something that transfers a spot.
- There is no persistent storage, network layer, command-line program or off-chain worker.
- The oracle records the numbers it is given. It does not fetch them from anywhere, and it does not sign anything itself.