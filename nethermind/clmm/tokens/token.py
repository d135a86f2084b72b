from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address


class Token:
    """
    Class for representing token mints traded in CLMM pools.

    Token amounts are always handled as raw integer units.  The decimals are used to convert raw amounts into
    human-readable amounts, and to adjust pool prices for display.
    """

    name: str
    """
        UTF-8 Name of the token
    """

    symbol: str
    """
        Token Symbol
    """

    decimals: int
    """
        Number of decimals of the mint
    """

    address: ChecksumAddress
    """
        Checksum Address of the token mint
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        decimals: int,
        address: ChecksumAddress | str,
    ) -> None:
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.address = to_checksum_address(address)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.address == other.address and self.decimals == other.decimals

    def __hash__(self) -> int:
        return hash((self.address, self.decimals))

    def __repr__(self) -> str:
        return f"Token({self.symbol}, {self.address})"

    def convert_decimals(self, raw_token_amount: int) -> float:
        """
        Divides raw token amounts by token decimals.

        :param int raw_token_amount:
            Raw token amount
        :return:
            Token amount adjusted by decimals
        """
        return raw_token_amount / 10**self.decimals

    def human_readable(self, raw_token_amount: int) -> str:
        """
        Converts raw token amount to human-readable string containing the correct decimals and the token symbol.

        :param raw_token_amount:
            raw token amount
        :return:
            Human-readable string containing token amount and symbol
        """

        return f"{self.convert_decimals(raw_token_amount)} {self.symbol}"
