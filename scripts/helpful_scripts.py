import time

from web3 import Web3

from contracts import VRFCoordinatorV2Mock
from rafflenet import accounts, config, network
from rafflenet.services import KeeperNode, VRFNode

BASE_FEE = Web3.to_wei(0.25, "ether")  # LINK paid per request
GAS_PRICE_LINK = 10**9  # LINK per gas

LOCAL_BLOCKCHAIN_ENVS = ["development", "ganache-local"]
contracts_to_mock = {
    "vrf_coordinator": VRFCoordinatorV2Mock,
}


def deploy_mocks(base_fee=BASE_FEE, gas_price_link=GAS_PRICE_LINK):
    account = get_account()
    print(f"The active network is {network.show_active()}")
    print("Deploying mocks...")
    print("-------------------------")
    print("Deploying VRF coordinator mock ...")
    vrf_coordinator = VRFCoordinatorV2Mock.deploy(base_fee, gas_price_link, {"from": account})
    print(f"Deployed to {vrf_coordinator.address}")
    return vrf_coordinator


def get_account(index=None):
    if index is not None:
        return accounts[index]
    if network.show_active() in LOCAL_BLOCKCHAIN_ENVS:
        return accounts[0]
    from_key = config["wallets"].get("from_key")
    if not from_key or from_key.startswith("$"):
        raise ValueError(f"Set PRIVATE_KEY to use {network.show_active()}")
    return accounts.add(from_key)


def get_contract(contract_name):
    """Latest deployment of a collaborator contract, deploying mocks if there is none."""
    contract_type = contracts_to_mock[contract_name]
    if len(contract_type) <= 0:
        deploy_mocks()
    return contract_type[-1]


def start_automation(raffle, operator=None):
    """Register keeper and VRF nodes that drive ``raffle`` on every network tick."""
    operator = operator if operator else accounts[9]
    keeper = KeeperNode(operator)
    keeper.register(raffle)
    vrf_node = VRFNode(get_contract("vrf_coordinator"), operator)
    network.add_service(keeper)
    network.add_service(vrf_node)
    print(f"Automation started for {raffle.address}")
    return keeper, vrf_node


def listen_for_event(contract, event, timeout=200, poll_interval=2):
    """Listen for an event to be fired from a contract.
    We are waiting for the event to return, so this function is blocking.
    Every poll mines a block, which lets keepers and oracle nodes act.
    Args:
        contract ([rafflenet.contract.ProjectContract]):
        A deployed contract proxy.
        event ([string]): The event you'd like to listen for.
        timeout (int, optional): The max amount in seconds you'd like to
        wait for that event to fire. Defaults to 200 seconds.
        poll_interval ([int]): How often to check for events.
        Defaults to 2 seconds.
    """
    start_time = time.time()
    current_time = time.time()
    event_filter = contract.events[event].create_filter(from_block="latest")
    while current_time - start_time < timeout:
        network.tick()
        for event_response in event_filter.get_new_entries():
            if event in event_response.event:
                print("Found event!")
                return event_response
        time.sleep(poll_interval)
        current_time = time.time()
    print("Timeout reached, no event found.")
    return {"event": None}
