"""Token protocols: fungible-balance ledgers the engine moves funds through."""
from typing import Protocol


class CollateralToken(Protocol):
    """The collateral asset. A ``False`` return means the transfer did not happen."""

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer(self, recipient: str, amount: int) -> bool: ...


class SyntheticToken(Protocol):
    """The pegged synthetic asset; the engine is its sole minter and burner."""

    def mint(self, recipient: str, amount: int) -> bool: ...

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer(self, recipient: str, amount: int) -> bool: ...

    def burn(self, amount: int) -> None: ...
