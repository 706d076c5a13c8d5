"""Balances, multi-currency ledgers and a router between native and social tokens."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Union

from bitworld.primitives import Origin, PalletError


class CurrencyError(enum.Enum):
    """Errors raised by the currency ledgers."""

    AMOUNT_ZERO = "AmountZero"
    BALANCE_LOW = "BalanceLow"
    BALANCE_TOO_LOW = "BalanceTooLow"
    BALANCE_ZERO = "BalanceZero"
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    NO_PERMISSION_TOKEN_ISSUANCE = "NoPermissionTokenIssuance"
    SOCIAL_TOKEN_ALREADY_ISSUED = "SocialTokenAlreadyIssued"
    NO_AVAILABLE_TOKEN_ID = "NoAvailableTokenId"
    COUNTRY_FUND_IS_NOT_AVAILABLE = "CountryFundIsNotAvailable"
    AMOUNT_INTO_BALANCE_FAILED = "AmountIntoBalanceFailed"
    LIQUIDITY_RESTRICTIONS = "LiquidityRestrictions"
    EXISTENTIAL_DEPOSIT = "ExistentialDeposit"
    KEEP_ALIVE = "KeepAlive"
    DEAD_ACCOUNT = "DeadAccount"


class BalanceStatus(enum.Enum):
    """Where repatriated reserved funds end up on the beneficiary."""

    FREE = "free"
    RESERVED = "reserved"


@dataclass(frozen=True)
class Transferred:
    currency_id: Any
    from_account: Any
    to: Any
    amount: int


@dataclass(frozen=True)
class BalanceUpdated:
    currency_id: Any
    who: Any
    amount: int


@dataclass(frozen=True)
class Deposited:
    currency_id: Any
    who: Any
    amount: int


@dataclass(frozen=True)
class Withdrawn:
    currency_id: Any
    who: Any
    amount: int


def _fail(variant: CurrencyError) -> PalletError:
    return PalletError(variant)


def _non_negative(value: int) -> int:
    if value < 0:
        raise ValueError(f"balance amounts cannot be negative: {value}")
    return value


@dataclass
class _Account:
    free: int = 0
    reserved: int = 0

    @property
    def total(self) -> int:
        return self.free + self.reserved


class Balances:
    """A single-currency ledger with free and reserved funds and locks."""

    def __init__(self, existential_deposit: int = 0) -> None:
        self._existential_deposit = _non_negative(existential_deposit)
        self._accounts: Dict[Hashable, _Account] = {}
        self._locks: Dict[Hashable, Dict[Hashable, int]] = {}
        self._issuance = 0

    def _account(self, who: Hashable) -> _Account:
        current = self._accounts.get(who)
        return _Account(current.free, current.reserved) if current else _Account()

    def _settle(self, who: Hashable, account: _Account) -> None:
        """Store an account, burning it as dust when it falls under the deposit."""
        total = account.total
        if total == 0 or total < self._existential_deposit:
            self._issuance -= total
            self._accounts.pop(who, None)
            self._locks.pop(who, None)
        else:
            self._accounts[who] = account

    def _frozen(self, who: Hashable) -> int:
        return max(self._locks.get(who, {}).values(), default=0)

    def minimum_balance(self) -> int:
        return self._existential_deposit

    def total_issuance(self) -> int:
        return self._issuance

    def total_balance(self, who: Hashable) -> int:
        return self._account(who).total

    def free_balance(self, who: Hashable) -> int:
        return self._account(who).free

    def reserved_balance(self, who: Hashable) -> int:
        return self._account(who).reserved

    def ensure_can_withdraw(self, who: Hashable, amount: int) -> None:
        """Raise unless ``amount`` can leave the free balance of ``who``."""
        _non_negative(amount)
        free = self.free_balance(who)
        if amount > free:
            raise _fail(CurrencyError.BALANCE_TOO_LOW)
        if free - amount < self._frozen(who):
            raise _fail(CurrencyError.LIQUIDITY_RESTRICTIONS)

    def transfer(
        self, from_account: Hashable, to: Hashable, amount: int, keep_alive: bool = False
    ) -> None:
        """Move free funds; the sender may be reaped unless ``keep_alive``."""
        _non_negative(amount)
        if amount == 0 or from_account == to:
            return
        source = self._account(from_account)
        if source.free < amount:
            raise _fail(CurrencyError.INSUFFICIENT_BALANCE)
        new_free = source.free - amount
        if new_free < self._frozen(from_account):
            raise _fail(CurrencyError.LIQUIDITY_RESTRICTIONS)
        target = self._account(to)
        if target.total == 0 and amount < self._existential_deposit:
            raise _fail(CurrencyError.EXISTENTIAL_DEPOSIT)
        if keep_alive and new_free + source.reserved < self._existential_deposit:
            raise _fail(CurrencyError.KEEP_ALIVE)
        source.free = new_free
        target.free += amount
        self._accounts[to] = target
        self._settle(from_account, source)

    def deposit(self, who: Hashable, amount: int) -> None:
        """Credit ``who``; a deposit too small to open an account is dropped."""
        _non_negative(amount)
        if amount == 0:
            return
        account = self._account(who)
        if account.total == 0 and amount < self._existential_deposit:
            return
        account.free += amount
        self._issuance += amount
        self._accounts[who] = account

    def withdraw(self, who: Hashable, amount: int) -> None:
        """Debit free funds of ``who`` and reduce issuance."""
        _non_negative(amount)
        if amount == 0:
            return
        account = self._account(who)
        if account.free < amount:
            raise _fail(CurrencyError.INSUFFICIENT_BALANCE)
        if account.free - amount < self._frozen(who):
            raise _fail(CurrencyError.LIQUIDITY_RESTRICTIONS)
        account.free -= amount
        self._issuance -= amount
        self._settle(who, account)

    def can_slash(self, who: Hashable, amount: int) -> bool:
        _non_negative(amount)
        return amount == 0 or self.free_balance(who) >= amount

    def slash(self, who: Hashable, amount: int) -> int:
        """Take up to ``amount`` from free then reserved funds; return what was left unslashed."""
        _non_negative(amount)
        if amount == 0:
            return 0
        account = self._account(who)
        from_free = min(account.free, amount)
        account.free -= from_free
        remaining = amount - from_free
        from_reserved = min(account.reserved, remaining)
        account.reserved -= from_reserved
        remaining -= from_reserved
        self._issuance -= from_free + from_reserved
        if who in self._accounts or account.total:
            self._settle(who, account)
        return remaining

    def update_balance(self, who: Hashable, by_amount: int) -> None:
        """Deposit a positive amount, withdraw the magnitude of any other."""
        if by_amount > 0:
            self.deposit(who, by_amount)
        else:
            self.withdraw(who, -by_amount)

    def can_reserve(self, who: Hashable, value: int) -> bool:
        _non_negative(value)
        if value == 0:
            return True
        free = self.free_balance(who)
        return free >= value and free - value >= self._frozen(who)

    def reserve(self, who: Hashable, value: int) -> None:
        """Move ``value`` from free to reserved funds."""
        _non_negative(value)
        if value == 0:
            return
        account = self._account(who)
        if account.free < value:
            raise _fail(CurrencyError.INSUFFICIENT_BALANCE)
        if account.free - value < self._frozen(who):
            raise _fail(CurrencyError.LIQUIDITY_RESTRICTIONS)
        account.free -= value
        account.reserved += value
        self._accounts[who] = account

    def unreserve(self, who: Hashable, value: int) -> int:
        """Move up to ``value`` back to free funds; return the part not moved."""
        _non_negative(value)
        if value == 0 or who not in self._accounts:
            return value
        account = self._account(who)
        actual = min(account.reserved, value)
        account.reserved -= actual
        account.free += actual
        self._accounts[who] = account
        return value - actual

    def slash_reserved(self, who: Hashable, value: int) -> int:
        """Burn up to ``value`` of reserved funds; return the part not slashed."""
        _non_negative(value)
        if value == 0 or who not in self._accounts:
            return value
        account = self._account(who)
        actual = min(account.reserved, value)
        account.reserved -= actual
        self._issuance -= actual
        self._settle(who, account)
        return value - actual

    def repatriate_reserved(
        self, slashed: Hashable, beneficiary: Hashable, value: int, status: BalanceStatus
    ) -> int:
        """Move reserved funds to another account; return the part not moved."""
        _non_negative(value)
        if value == 0:
            return 0
        if slashed == beneficiary:
            if status is BalanceStatus.FREE:
                return self.unreserve(slashed, value)
            return max(value - self.reserved_balance(slashed), 0)
        if beneficiary not in self._accounts:
            raise _fail(CurrencyError.DEAD_ACCOUNT)
        source = self._account(slashed)
        target = self._account(beneficiary)
        actual = min(source.reserved, value)
        source.reserved -= actual
        if status is BalanceStatus.FREE:
            target.free += actual
        else:
            target.reserved += actual
        self._accounts[beneficiary] = target
        if slashed in self._accounts:
            self._settle(slashed, source)
        return value - actual

    def set_lock(self, lock_id: Hashable, who: Hashable, amount: int) -> None:
        """Freeze ``amount`` of the free balance under ``lock_id``."""
        _non_negative(amount)
        if amount == 0:
            self.remove_lock(lock_id, who)
            return
        self._locks.setdefault(who, {})[lock_id] = amount

    def extend_lock(self, lock_id: Hashable, who: Hashable, amount: int) -> None:
        """Raise an existing lock to at least ``amount``, creating it if needed."""
        _non_negative(amount)
        if amount == 0:
            return
        locks = self._locks.setdefault(who, {})
        locks[lock_id] = max(locks.get(lock_id, 0), amount)

    def remove_lock(self, lock_id: Hashable, who: Hashable) -> None:
        locks = self._locks.get(who)
        if locks is None:
            return
        locks.pop(lock_id, None)
        if not locks:
            del self._locks[who]


class MultiTokens:
    """One ledger per currency id."""

    def __init__(
        self, existential_deposit: Union[int, Callable[[Any], int]] = 0
    ) -> None:
        self._existential_deposit = existential_deposit
        self._ledgers: Dict[Hashable, Balances] = {}

    def ledger(self, currency_id: Hashable) -> Balances:
        """The ledger for ``currency_id``, created on first use."""
        ledger = self._ledgers.get(currency_id)
        if ledger is None:
            deposit = self._existential_deposit
            amount = deposit(currency_id) if callable(deposit) else deposit
            ledger = self._ledgers[currency_id] = Balances(amount)
        return ledger

    def minimum_balance(self, currency_id: Hashable) -> int:
        return self.ledger(currency_id).minimum_balance()

    def total_issuance(self, currency_id: Hashable) -> int:
        return self.ledger(currency_id).total_issuance()

    def total_balance(self, currency_id: Hashable, who: Hashable) -> int:
        return self.ledger(currency_id).total_balance(who)

    def free_balance(self, currency_id: Hashable, who: Hashable) -> int:
        return self.ledger(currency_id).free_balance(who)

    def ensure_can_withdraw(self, currency_id: Hashable, who: Hashable, amount: int) -> None:
        if amount == 0:
            return
        self.ledger(currency_id).ensure_can_withdraw(who, amount)

    def transfer(
        self, currency_id: Hashable, from_account: Hashable, to: Hashable, amount: int
    ) -> None:
        if amount == 0 or from_account == to:
            return
        self.ensure_can_withdraw(currency_id, from_account, amount)
        self.ledger(currency_id).transfer(from_account, to, amount)

    def deposit(self, currency_id: Hashable, who: Hashable, amount: int) -> None:
        self.ledger(currency_id).deposit(who, amount)

    def withdraw(self, currency_id: Hashable, who: Hashable, amount: int) -> None:
        if amount == 0:
            return
        self.ensure_can_withdraw(currency_id, who, amount)
        self.ledger(currency_id).withdraw(who, amount)

    def can_slash(self, currency_id: Hashable, who: Hashable, amount: int) -> bool:
        return self.ledger(currency_id).can_slash(who, amount)

    def slash(self, currency_id: Hashable, who: Hashable, amount: int) -> int:
        return self.ledger(currency_id).slash(who, amount)

    def update_balance(self, currency_id: Hashable, who: Hashable, by_amount: int) -> None:
        if by_amount > 0:
            self.deposit(currency_id, who, by_amount)
        else:
            self.withdraw(currency_id, who, -by_amount)


@dataclass
class SocialCurrencies:
    """Routes the native currency to one ledger and every other currency to another."""

    native: Balances
    multi: MultiTokens
    native_currency_id: Any
    events: List[Any] = field(default_factory=list)

    def __init__(self, native: Balances, multi: MultiTokens, native_currency_id: Any) -> None:
        self.native = native
        self.multi = multi
        self.native_currency_id = native_currency_id
        self.events = []

    def _is_native(self, currency_id: Any) -> bool:
        return currency_id == self.native_currency_id

    def minimum_balance(self, currency_id: Any) -> int:
        if self._is_native(currency_id):
            return self.native.minimum_balance()
        return self.multi.minimum_balance(currency_id)

    def total_issuance(self, currency_id: Any) -> int:
        if self._is_native(currency_id):
            return self.native.total_issuance()
        return self.multi.total_issuance(currency_id)

    def total_balance(self, currency_id: Any, who: Hashable) -> int:
        if self._is_native(currency_id):
            return self.native.total_balance(who)
        return self.multi.total_balance(currency_id, who)

    def free_balance(self, currency_id: Any, who: Hashable) -> int:
        if self._is_native(currency_id):
            return self.native.free_balance(who)
        return self.multi.free_balance(currency_id, who)

    def ensure_can_withdraw(self, currency_id: Any, who: Hashable, amount: int) -> None:
        if self._is_native(currency_id):
            self.native.ensure_can_withdraw(who, amount)
        else:
            self.multi.ensure_can_withdraw(currency_id, who, amount)

    def transfer(self, currency_id: Any, from_account: Hashable, to: Hashable, amount: int) -> None:
        if amount == 0 or from_account == to:
            return
        if self._is_native(currency_id):
            self.native.transfer(from_account, to, amount)
        else:
            self.multi.transfer(currency_id, from_account, to, amount)
        self.events.append(Transferred(currency_id, from_account, to, amount))

    def deposit(self, currency_id: Any, who: Hashable, amount: int) -> None:
        if amount == 0:
            return
        if self._is_native(currency_id):
            self.native.deposit(who, amount)
        else:
            self.multi.deposit(currency_id, who, amount)
        self.events.append(Deposited(currency_id, who, amount))

    def withdraw(self, currency_id: Any, who: Hashable, amount: int) -> None:
        if amount == 0:
            return
        if self._is_native(currency_id):
            self.native.withdraw(who, amount)
        else:
            self.multi.withdraw(currency_id, who, amount)
        self.events.append(Withdrawn(currency_id, who, amount))

    def can_slash(self, currency_id: Any, who: Hashable, amount: int) -> bool:
        if self._is_native(currency_id):
            return self.native.can_slash(who, amount)
        return self.multi.can_slash(currency_id, who, amount)

    def slash(self, currency_id: Any, who: Hashable, amount: int) -> int:
        if self._is_native(currency_id):
            return self.native.slash(who, amount)
        return self.multi.slash(currency_id, who, amount)

    def update_balance(self, currency_id: Any, who: Hashable, by_amount: int) -> None:
        if self._is_native(currency_id):
            self.native.update_balance(who, by_amount)
        else:
            self.multi.update_balance(currency_id, who, by_amount)
        self.events.append(BalanceUpdated(currency_id, who, by_amount))

    def dispatch_transfer(self, origin: Origin, dest: Hashable, currency_id: Any, amount: int) -> None:
        """Signed call: transfer any currency from the signer to ``dest``."""
        sender = origin.ensure_signed()
        self.transfer(currency_id, sender, dest, amount)

    def transfer_native_currency(self, origin: Origin, dest: Hashable, amount: int) -> None:
        """Signed call: transfer native currency from the signer to ``dest``."""
        sender = origin.ensure_signed()
        self.native.transfer(sender, dest, amount)
        self.events.append(Transferred(self.native_currency_id, sender, dest, amount))

    def dispatch_update_balance(
        self, origin: Origin, who: Hashable, currency_id: Any, amount: int
    ) -> None:
        """Root call: change the balance of ``who`` by a signed amount."""
        origin.ensure_root()
        self.update_balance(currency_id, who, amount)


class FixedCurrency:
    """A view of one currency of a SocialCurrencies router."""

    def __init__(self, currencies: SocialCurrencies, currency_id: Any) -> None:
        self.currencies = currencies
        self.currency_id = currency_id

    def minimum_balance(self) -> int:
        return self.currencies.minimum_balance(self.currency_id)

    def total_issuance(self) -> int:
        return self.currencies.total_issuance(self.currency_id)

    def total_balance(self, who: Hashable) -> int:
        return self.currencies.total_balance(self.currency_id, who)

    def free_balance(self, who: Hashable) -> int:
        return self.currencies.free_balance(self.currency_id, who)

    def ensure_can_withdraw(self, who: Hashable, amount: int) -> None:
        self.currencies.ensure_can_withdraw(self.currency_id, who, amount)

    def transfer(self, from_account: Hashable, to: Hashable, amount: int) -> None:
        self.currencies.transfer(self.currency_id, from_account, to, amount)

    def deposit(self, who: Hashable, amount: int) -> None:
        self.currencies.deposit(self.currency_id, who, amount)

    def withdraw(self, who: Hashable, amount: int) -> None:
        self.currencies.withdraw(self.currency_id, who, amount)

    def can_slash(self, who: Hashable, amount: int) -> bool:
        return self.currencies.can_slash(self.currency_id, who, amount)

    def slash(self, who: Hashable, amount: int) -> int:
        return self.currencies.slash(self.currency_id, who, amount)

    def update_balance(self, who: Hashable, by_amount: int) -> None:
        self.currencies.update_balance(self.currency_id, who, by_amount)