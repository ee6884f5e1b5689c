from rafflenet.contract import ContractContainer

from contracts import raffle
from contracts.test import rejecting_entrant, vrf_coordinator_v2_mock

Raffle = ContractContainer(raffle.Raffle)
VRFCoordinatorV2Mock = ContractContainer(vrf_coordinator_v2_mock.VRFCoordinatorV2Mock)
RejectingEntrant = ContractContainer(rejecting_entrant.RejectingEntrant)
