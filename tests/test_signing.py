"""
Unit tests for request signing
"""

import hashlib

import pytest

from gamehub_proxy.domain.signing import canonicalize, sign, stringify


def md5(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


class TestCanonicalize:
    def test_keys_sorted_and_sign_excluded(self):
        params = {"time": "1", "sign": "old", "app_id": "2", "token": "t"}
        assert canonicalize(params, "K") == "app_id=2&time=1&token=t&K"

    def test_order_independent(self):
        assert sign({"a": 1, "b": 2}, "K") == sign({"b": 2, "a": 1}, "K")

    def test_sign_field_does_not_affect_digest(self):
        assert sign({"a": 1, "sign": "x"}, "K") == sign({"a": 1, "sign": "y"}, "K") == sign({"a": 1}, "K")

    def test_numbers_and_numeric_strings_sign_alike(self):
        assert sign({"app_id": 585690, "page": 1.0}, "K") == sign({"app_id": "585690", "page": "1"}, "K")

    def test_empty_params_keep_separator(self):
        assert canonicalize({}, "K") == "&K"
        assert canonicalize({"sign": "x"}, "K") == "&K"


class TestStringify:
    def test_scalars(self):
        assert stringify("abc") == "abc"
        assert stringify(True) == "true"
        assert stringify(False) == "false"
        assert stringify(None) == "null"
        assert stringify(42) == "42"
        assert stringify(3.0) == "3"
        assert stringify(2.5) == "2.5"

    def test_containers(self):
        assert stringify([1, "a", None, 2.0]) == "1,a,,2"
        assert stringify({"nested": 1}) == "[object Object]"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.0, "0"),
            (-0.0, "0"),
            (5.0, "5"),
            (-2.5, "-2.5"),
            (0.1, "0.1"),
            (123.456, "123.456"),
            (0.000001, "0.000001"),
            (0.00001, "0.00001"),
            (1e-7, "1e-7"),
            (1.5e-7, "1.5e-7"),
            (1e16, "10000000000000000"),
            (1e20, "100000000000000000000"),
            (1e21, "1e+21"),
            (1.5e21, "1.5e+21"),
            (-1e21, "-1e+21"),
            (1e100, "1e+100"),
            (float("inf"), "Infinity"),
            (float("-inf"), "-Infinity"),
            (float("nan"), "NaN"),
        ],
    )
    def test_floats_render_like_javascript_numbers(self, value, expected):
        assert stringify(value) == expected

    def test_large_float_signs_in_exponent_form(self):
        assert canonicalize({"n": 1e21}, "K") == "n=1e+21&K"


class TestSign:
    def test_documented_example(self):
        params = {"token": "T", "sign": "x", "time": "1760032301893", "app_id": "585690"}
        assert sign(params, "K") == md5("app_id=585690&time=1760032301893&token=T&K")

    def test_lowercase_hex(self):
        digest = sign({"a": "1"}, "K")
        assert len(digest) == 32
        assert digest == digest.lower()
        int(digest, 16)

    def test_secret_changes_digest(self):
        assert sign({"a": "1"}, "K") != sign({"a": "1"}, "other")
