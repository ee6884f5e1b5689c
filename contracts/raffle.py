"""Raffle: pay to enter, a keeper triggers the draw, VRF picks the winner.

Round lifecycle::

    OPEN --perform_upkeep--> CALCULATING --raw_fulfill_random_words--> OPEN

``perform_upkeep`` may be called by anyone; it only goes through when
``check_upkeep`` says the raffle is open, the interval has elapsed, and
there is at least one player and a balance to pay out. While CALCULATING
no one can enter and no second request can be made.
"""
from enum import IntEnum
from typing import Tuple

from rafflenet.abi import ZERO_ADDRESS, address, bytes32, uint32, uint64, uint256
from rafflenet.contract import Event, external, payable, view
from rafflenet.exceptions import CustomError

from contracts.automation_compatible import AutomationCompatible
from contracts.vrf_consumer_base_v2 import VRFConsumerBaseV2


class RaffleState(IntEnum):
    OPEN = 0
    CALCULATING = 1


class NotEnoughPaid(CustomError):
    fields = (("sent", uint256), ("required", uint256))


class NotOpen(CustomError):
    pass


class UpkeepNotNeeded(CustomError):
    fields = (
        ("current_balance", uint256),
        ("num_players", uint256),
        ("raffle_state", uint256),
        ("elapsed", uint256),
    )


class TransferFailed(CustomError):
    pass


class NonexistentRequest(CustomError):
    fields = (("request_id", uint256),)


RaffleEnter = Event("RaffleEnter", ("player", address, True))
RequestedRaffleWinner = Event("RequestedRaffleWinner", ("request_id", uint256, True))
WinnerPicked = Event("WinnerPicked", ("winner", address, True))


class Raffle(VRFConsumerBaseV2, AutomationCompatible):
    REQUEST_CONFIRMATIONS = 3
    NUM_WORDS = 1

    EVENTS = (RaffleEnter, RequestedRaffleWinner, WinnerPicked)
    ERRORS = (NotEnoughPaid, NotOpen, UpkeepNotNeeded, TransferFailed, NonexistentRequest)

    def __init__(
        self,
        vrf_coordinator_v2: address,
        entrance_fee: uint256,
        gas_lane: bytes32,
        subscription_id: uint64,
        callback_gas_limit: uint32,
        interval: uint256,
    ):
        super().__init__(vrf_coordinator_v2)
        self.entrance_fee = entrance_fee
        self.gas_lane = gas_lane
        self.subscription_id = subscription_id
        self.callback_gas_limit = callback_gas_limit
        self.interval = interval
        self.players = []
        self.raffle_state = RaffleState.OPEN
        self.last_timestamp = self.block.timestamp
        self.recent_winner = ZERO_ADDRESS
        self.pending_request_id = 0

    @payable
    def enter_raffle(self) -> None:
        if self.msg.value < self.entrance_fee:
            raise NotEnoughPaid(self.msg.value, self.entrance_fee)
        if self.raffle_state != RaffleState.OPEN:
            raise NotOpen()
        self.players.append(self.msg.sender)
        self.emit(RaffleEnter, player=self.msg.sender)

    def _upkeep_needed(self):
        is_open = self.raffle_state == RaffleState.OPEN
        time_passed = self.block.timestamp - self.last_timestamp >= self.interval
        has_players = len(self.players) > 0
        has_balance = self.balance > 0
        return is_open and time_passed and has_players and has_balance

    @view
    def check_upkeep(self, check_data: bytes) -> Tuple[bool, bytes]:
        return self._upkeep_needed(), b""

    @external
    def perform_upkeep(self, perform_data: bytes) -> None:
        if not self._upkeep_needed():
            raise UpkeepNotNeeded(
                self.balance,
                len(self.players),
                int(self.raffle_state),
                self.block.timestamp - self.last_timestamp,
            )
        self.raffle_state = RaffleState.CALCULATING
        request_id = self.at(self.vrf_coordinator).request_random_words(
            self.gas_lane,
            self.subscription_id,
            self.REQUEST_CONFIRMATIONS,
            self.callback_gas_limit,
            self.NUM_WORDS,
        )
        self.pending_request_id = request_id
        self.emit(RequestedRaffleWinner, request_id=request_id)

    def fulfill_random_words(self, request_id, random_words):
        if self.raffle_state != RaffleState.CALCULATING or request_id != self.pending_request_id:
            raise NonexistentRequest(request_id)
        winner = self.players[random_words[0] % len(self.players)]
        self.recent_winner = winner
        self.players = []
        self.raffle_state = RaffleState.OPEN
        self.last_timestamp = self.block.timestamp
        self.pending_request_id = 0
        if not self.send_value(winner, self.balance):
            raise TransferFailed()
        self.emit(WinnerPicked, winner=winner)

    @view
    def get_entrance_fee(self) -> uint256:
        return self.entrance_fee

    @view
    def get_raffle_state(self) -> RaffleState:
        return self.raffle_state

    @view
    def get_interval(self) -> uint256:
        return self.interval

    @view
    def get_latest_timestamp(self) -> uint256:
        return self.last_timestamp

    @view
    def get_recent_winner(self) -> address:
        return self.recent_winner

    @view
    def get_player(self, index: uint256) -> address:
        return self.players[index]

    @view
    def get_number_of_players(self) -> uint256:
        return len(self.players)

    @view
    def get_num_words(self) -> uint256:
        return self.NUM_WORDS

    @view
    def get_request_confirmations(self) -> uint256:
        return self.REQUEST_CONFIRMATIONS

    @view
    def get_pending_request_id(self) -> uint256:
        return self.pending_request_id

    @view
    def get_subscription_id(self) -> uint64:
        return self.subscription_id
