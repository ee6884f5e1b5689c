from rafflenet.abi import address
from rafflenet.contract import Contract, payable


class RejectingEntrant(Contract):
    """Raffle player that cannot receive ETH (it has no payable ``receive``)."""

    @payable
    def enter(self, raffle: address) -> None:
        self.at(raffle).enter_raffle(value=self.msg.value)
