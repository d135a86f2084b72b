from nethermind.clmm.exceptions import FullMathRevert

from .shared import U128_MAX


class FullMathModule:
    """Math Module for computing (a * b / denominator) with a full width intermediate product"""

    @classmethod
    def _check_operands(cls, *operands: int):
        for operand in operands:
            if operand < 0:
                raise FullMathRevert(f"Negative operand {operand} passed to unsigned mul_div")

    @classmethod
    def mul_div_floor(cls, numerator_1: int, numerator_2: int, denominator: int, max_value: int = U128_MAX) -> int:
        """
        Computes the result of (numerator_1 * numerator_2) / denominator.
        Returns value rounded down, raising FullMathRevert if it exceeds max_value (u128 by default)
        """
        cls._check_operands(numerator_1, numerator_2, denominator)
        if denominator == 0:
            raise FullMathRevert("Division By Zero")

        return_val = (numerator_1 * numerator_2) // denominator
        if return_val > max_value:
            raise FullMathRevert(f"Value {return_val} overflows {max_value.bit_length()} bits")
        return return_val

    @classmethod
    def mul_div_ceil(cls, numerator_1: int, numerator_2: int, denominator: int, max_value: int = U128_MAX) -> int:
        """
        Computes the result of (numerator_1 * numerator_2) / denominator.
        Returns value rounded up, raising FullMathRevert if it exceeds max_value (u128 by default)
        """
        cls._check_operands(numerator_1, numerator_2, denominator)
        if denominator == 0:
            raise FullMathRevert("Division By Zero")

        return_val = -((-numerator_1 * numerator_2) // denominator)
        if return_val > max_value:
            raise FullMathRevert("Mul Div Rounding Up Overflows when Rounding")
        return return_val

    @classmethod
    def div_rounding_up(cls, numerator: int, denominator: int) -> int:
        """Computes numerator / denominator, rounded up"""
        cls._check_operands(numerator, denominator)
        if denominator == 0:
            raise FullMathRevert("Division By Zero")

        return -(-numerator // denominator)
