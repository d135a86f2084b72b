import pytest

from nethermind.clmm.exceptions import FullMathRevert
from nethermind.clmm.math import ClmmMath

from ..utils import uint_max


class TestMulDiv:
    Q64 = 2**64
    U128_MAX = uint_max(128)

    def test_raises_if_denominator_is_0(self):
        with pytest.raises(FullMathRevert):
            ClmmMath.full_math.mul_div_floor(self.Q64, 5, 0)

    def test_raises_if_denominator_is_0_rounding_up(self):
        with pytest.raises(FullMathRevert):
            ClmmMath.full_math.mul_div_ceil(self.Q64, 5, 0)

    def test_raises_if_output_overflows_u128(self):
        with pytest.raises(FullMathRevert):
            ClmmMath.full_math.mul_div_floor(self.Q64 * 2, self.Q64 * 2, 1)

    def test_raises_on_overflow_with_all_max_inputs(self):
        with pytest.raises(FullMathRevert):
            ClmmMath.full_math.mul_div_floor(self.U128_MAX, self.U128_MAX, self.U128_MAX - 1)

    def test_all_max_inputs(self):
        assert ClmmMath.full_math.mul_div_floor(self.U128_MAX, self.U128_MAX, self.U128_MAX) == self.U128_MAX

    def test_accepts_wider_max_value(self):
        result = ClmmMath.full_math.mul_div_floor(self.Q64 * 2, self.Q64 * 2, 1, max_value=uint_max(256))
        assert result == 2**130

    def test_is_accurate_with_phantom_overflow(self):
        result = 4375 * self.Q64 // 1000
        assert ClmmMath.full_math.mul_div_floor(self.Q64, self.Q64 * 35, self.Q64 * 8) == result

    def test_is_accurate_with_phantom_overflow_and_repeating_decimal(self):
        result = 1 * self.Q64 // 3
        assert ClmmMath.full_math.mul_div_floor(self.Q64, self.Q64 * 1000, self.Q64 * 3000) == result

    def test_rounds_up_with_repeating_decimal(self):
        result = (1 * self.Q64 // 3) + 1
        assert ClmmMath.full_math.mul_div_ceil(self.Q64, self.Q64 * 1000, self.Q64 * 3000) == result

    def test_rounding_up_is_exact_when_divisible(self):
        assert ClmmMath.full_math.mul_div_ceil(10, 10, 5) == 20
        assert ClmmMath.full_math.mul_div_floor(10, 10, 5) == 20

    def test_raises_on_negative_operands(self):
        with pytest.raises(FullMathRevert):
            ClmmMath.full_math.mul_div_floor(-1, 5, 2)


class TestDivRoundingUp:
    def test_rounds_up(self):
        assert ClmmMath.full_math.div_rounding_up(7, 2) == 4

    def test_exact_division(self):
        assert ClmmMath.full_math.div_rounding_up(8, 2) == 4

    def test_raises_if_denominator_is_0(self):
        with pytest.raises(FullMathRevert):
            ClmmMath.full_math.div_rounding_up(8, 0)
