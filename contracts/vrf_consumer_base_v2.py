from typing import List

from rafflenet.abi import address, uint256
from rafflenet.contract import Contract, external
from rafflenet.exceptions import CustomError


class OnlyCoordinatorCanFulfill(CustomError):
    fields = (("have", address), ("want", address))


class VRFConsumerBaseV2(Contract):
    """Base for contracts that consume VRF randomness.

    The coordinator delivers randomness through ``raw_fulfill_random_words``,
    which checks the caller before handing the words to the subclass's
    ``fulfill_random_words``.
    """

    ERRORS = (OnlyCoordinatorCanFulfill,)

    def __init__(self, vrf_coordinator: address):
        self.vrf_coordinator = vrf_coordinator

    def fulfill_random_words(self, request_id, random_words):
        raise NotImplementedError

    @external
    def raw_fulfill_random_words(self, request_id: uint256, random_words: List[uint256]) -> None:
        if self.msg.sender != self.vrf_coordinator:
            raise OnlyCoordinatorCanFulfill(self.msg.sender, self.vrf_coordinator)
        self.fulfill_random_words(request_id, random_words)
