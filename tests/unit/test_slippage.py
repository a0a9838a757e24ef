"""Unit tests for slippage and pro-rata amount helpers."""

import pytest

from apwine_sdk.core.exceptions import ValidationError
from apwine_sdk.core.slippage import max_amount_with_slippage, min_amount_with_slippage, pro_rata


class TestSlippage:

    @pytest.mark.parametrize("amount,slippage,expected", [
        (1000, 0.5, 995),
        (1000, 0, 1000),
        (999, 0.5, 994),
        (10 ** 18, 1, 99 * 10 ** 16),
        (1, 99.9, 0),
    ])
    def test_min_amount(self, amount, slippage, expected):
        assert min_amount_with_slippage(amount, slippage) == expected

    @pytest.mark.parametrize("amount,slippage,expected", [
        (1000, 0.5, 1005),
        (1000, 0, 1000),
        (999, 0.5, 1004),
        (10 ** 18, 1, 101 * 10 ** 16),
    ])
    def test_max_amount(self, amount, slippage, expected):
        assert max_amount_with_slippage(amount, slippage) == expected

    def test_large_amounts_are_exact(self):
        """Test amounts beyond float precision keep every digit."""
        amount = 123456789012345678901234567890
        assert min_amount_with_slippage(amount, 0.5) == amount * 995 // 1000

    @pytest.mark.parametrize("slippage", [-0.1, 100, 250])
    def test_invalid_slippage(self, slippage):
        with pytest.raises(ValidationError) as exc_info:
            min_amount_with_slippage(1000, slippage)
        assert exc_info.value.field == 'slippage_tolerance'

        with pytest.raises(ValidationError):
            max_amount_with_slippage(1000, slippage)


class TestProRata:

    def test_round_down(self):
        assert pro_rata(1000, 1, 3) == 333

    def test_round_up(self):
        assert pro_rata(1000, 1, 3, round_up=True) == 334

    def test_exact_share(self):
        assert pro_rata(4000, 100, 2000) == pro_rata(4000, 100, 2000, round_up=True) == 200

    def test_zero_total(self):
        with pytest.raises(ValidationError):
            pro_rata(1000, 1, 0)
