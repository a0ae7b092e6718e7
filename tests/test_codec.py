"""Tests for the FHE byte codec."""

from __future__ import annotations

import cbor2
import pytest

from fhe_web3.codec import decode, encode
from fhe_web3.errors import ConversionError, ErrorKind
from fhe_web3.fhe.types import (
    CRYPTO_OBJECT_TYPES,
    Ciphertext,
    PrivateKey,
    PublicKey,
    SchemeParams,
    detect_object_type,
)


@pytest.fixture()
def objects(public_key: PublicKey, private_key: PrivateKey, ciphertext: Ciphertext) -> list:
    return [public_key, private_key, ciphertext]


class TestRoundTrip:
    """decode(encode(x)) == x for every variant."""

    def test_round_trip(self, objects: list) -> None:
        for obj in objects:
            assert decode(type(obj), encode(obj)) == obj

    def test_mixin_round_trip(self, objects: list) -> None:
        for obj in objects:
            assert type(obj).from_bytes(obj.to_bytes()) == obj

    def test_deterministic(self, objects: list) -> None:
        for obj in objects:
            assert encode(obj) == encode(obj)
            rebuilt = type(obj).from_bytes(encode(obj))
            assert encode(rebuilt) == encode(obj)

    def test_empty_payload(self, params: SchemeParams) -> None:
        obj = Ciphertext(params=params, data_type="Unsigned64", data=b"")
        assert Ciphertext.from_bytes(obj.to_bytes()) == obj

    def test_accepts_bytearray_and_memoryview(self, ciphertext: Ciphertext) -> None:
        data = ciphertext.to_bytes()
        assert Ciphertext.from_bytes(bytearray(data)) == ciphertext
        assert Ciphertext.from_bytes(memoryview(data)) == ciphertext

    def test_encoding_is_tagged_map(self, public_key: PublicKey) -> None:
        payload = cbor2.loads(public_key.to_bytes())
        assert payload["type"] == "PublicKey"
        assert payload["data"] == public_key.data


class TestDecodeFailures:
    """Malformed buffers raise ConversionError, never a default object."""

    def test_truncated(self, objects: list) -> None:
        for obj in objects:
            data = encode(obj)
            for n in [0, 1, 2, len(data) // 2, len(data) - 2, len(data) - 1]:
                with pytest.raises(ConversionError) as exc_info:
                    decode(type(obj), data[:n])
                assert exc_info.value.kind is ErrorKind.CONVERSION

    def test_every_prefix_fails(self, public_key: PublicKey) -> None:
        small = PublicKey(params=public_key.params, data=b"abc")
        data = small.to_bytes()
        for n in range(len(data)):
            with pytest.raises(ConversionError):
                PublicKey.from_bytes(data[:n])

    def test_trailing_data(self, ciphertext: Ciphertext) -> None:
        with pytest.raises(ConversionError, match="Trailing"):
            Ciphertext.from_bytes(ciphertext.to_bytes() + b"\x00")

    def test_wrong_variant(self, public_key: PublicKey, private_key: PrivateKey) -> None:
        with pytest.raises(ConversionError, match="Expected PrivateKey"):
            PrivateKey.from_bytes(public_key.to_bytes())
        with pytest.raises(ConversionError, match="Expected Ciphertext"):
            Ciphertext.from_bytes(private_key.to_bytes())

    def test_garbage(self) -> None:
        with pytest.raises(ConversionError):
            PublicKey.from_bytes(b"\xff\xff\xff\xff")

    def test_not_a_map(self) -> None:
        with pytest.raises(ConversionError, match="Expected a map"):
            PublicKey.from_bytes(cbor2.dumps([1, 2, 3]))

    def test_missing_field(self) -> None:
        data = cbor2.dumps({"type": "Ciphertext", "data": b"x", "data_type": "Signed"})
        with pytest.raises(ConversionError, match="params"):
            Ciphertext.from_bytes(data)

    def test_wrong_field_type(self, params: SchemeParams) -> None:
        data = cbor2.dumps({"type": "PublicKey", "params": params.to_wire(), "data": "not bytes"})
        with pytest.raises(ConversionError, match="wrong type"):
            PublicKey.from_bytes(data)

    def test_unexpected_field(self, params: SchemeParams) -> None:
        data = cbor2.dumps(
            {"type": "PublicKey", "params": params.to_wire(), "data": b"x", "extra": 1}
        )
        with pytest.raises(ConversionError, match="extra"):
            PublicKey.from_bytes(data)

    def test_bool_is_not_int(self) -> None:
        bad_params = {"scheme": "bfv", "poly_modulus_degree": True, "plain_modulus": 7}
        data = cbor2.dumps({"type": "PublicKey", "params": bad_params, "data": b"x"})
        with pytest.raises(ConversionError):
            PublicKey.from_bytes(data)

    def test_not_bytes(self) -> None:
        with pytest.raises(ConversionError):
            PublicKey.from_bytes("a string")  # type: ignore[arg-type]


class TestDetectObjectType:
    def test_detects_each_variant(self, objects: list) -> None:
        for obj in objects:
            assert detect_object_type(obj.to_bytes()) is type(obj)

    def test_unknown(self) -> None:
        with pytest.raises(ConversionError):
            detect_object_type(b"nope")

    def test_all_variants_listed(self) -> None:
        assert set(CRYPTO_OBJECT_TYPES) == {PublicKey, PrivateKey, Ciphertext}


def test_private_key_repr_hides_data(private_key: PrivateKey) -> None:
    assert "secret" not in repr(private_key)
    assert "bytes" in repr(private_key)
