import pytest

from bitworld.oracle import (
    NUM_VEC_LEN,
    UNSIGNED_TXS_PRIORITY,
    InvalidTransaction,
    NewNumber,
    NumberOracle,
    Payload,
)
from bitworld.primitives import BadOrigin, Origin

ALICE = 1


def test_signed_submission_records_number_and_event():
    oracle = NumberOracle()
    oracle.submit_number_signed(Origin.signed(ALICE), 42)
    assert oracle.numbers == [42]
    assert oracle.events == [NewNumber(ALICE, 42)]


def test_unsigned_submission_has_no_author():
    oracle = NumberOracle()
    oracle.submit_number_unsigned(Origin.none(), 7)
    assert oracle.numbers == [7]
    assert oracle.events[-1] == NewNumber(None, 7)


def test_signed_payload_submission_records_payload_number():
    oracle = NumberOracle()
    oracle.submit_number_unsigned_with_signed_payload(
        Origin.none(), Payload(number=9, public="pub"), "sig"
    )
    assert oracle.numbers == [9]
    assert oracle.events[-1] == NewNumber(None, 9)


def test_unsigned_call_rejects_signed_origin():
    oracle = NumberOracle()
    with pytest.raises(BadOrigin):
        oracle.submit_number_unsigned(Origin.signed(ALICE), 1)
    assert oracle.numbers == []


def test_signed_call_rejects_unsigned_origin():
    oracle = NumberOracle()
    with pytest.raises(BadOrigin):
        oracle.submit_number_signed(Origin.none(), 1)
    assert oracle.events == []


def test_default_capacity_drops_oldest():
    oracle = NumberOracle()
    for n in range(NUM_VEC_LEN + 3):
        oracle.submit_number_unsigned(Origin.none(), n)
    assert len(oracle.numbers) == NUM_VEC_LEN
    assert oracle.numbers == list(range(3, NUM_VEC_LEN + 3))


def test_custom_capacity():
    oracle = NumberOracle(capacity=2)
    for n in (5, 6, 7):
        oracle.submit_number_unsigned(Origin.none(), n)
    assert oracle.numbers == [6, 7]


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        NumberOracle(capacity=0)


def test_validate_plain_unsigned():
    tx = NumberOracle().validate_unsigned("submit_number_unsigned")
    assert tx.priority == UNSIGNED_TXS_PRIORITY
    assert tx.longevity == 3
    assert tx.propagate is True
    assert tx.provides == (("ocw-demo", b"submit_number_unsigned"),)


def test_validate_signed_payload_good_proof():
    payload = Payload(number=3, public="pub")
    seen = []

    def verify(p, s):
        seen.append((p, s))
        return True

    tx = NumberOracle().validate_unsigned(
        "submit_number_unsigned_with_signed_payload", payload, "sig", verify
    )
    assert seen == [(payload, "sig")]
    assert tx.provides == (("ocw-demo", b"submit_number_unsigned_with_signed_payload"),)


def test_validate_signed_payload_bad_proof():
    with pytest.raises(InvalidTransaction) as info:
        NumberOracle().validate_unsigned(
            "submit_number_unsigned_with_signed_payload",
            Payload(number=3, public="pub"),
            "sig",
            lambda p, s: False,
        )
    assert info.value.reason == InvalidTransaction.BAD_PROOF


def test_validate_unknown_call():
    with pytest.raises(InvalidTransaction) as info:
        NumberOracle().validate_unsigned("submit_number_signed")
    assert info.value.reason == InvalidTransaction.CALL