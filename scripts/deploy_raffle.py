import os

from web3 import Web3

from contracts import Raffle
from rafflenet import chain, config, network
from scripts.helpful_scripts import (
    get_account,
    get_contract,
    listen_for_event,
    start_automation,
)
from scripts.update_front_end import update_front_end
from scripts.vrf_scripts.create_subscription import (
    add_consumer,
    create_subscription,
    fund_subscription,
)

'''
address vrfCoordinatorV2,
uint256 entranceFee,
bytes32 gasLane, // keyHash
uint64 subscriptionId,
uint32 callbackGasLimit,
uint256 interval
'''


def deploy_raffle(front_end_update=False):
    account = get_account()
    network_config = config["networks"][network.show_active()]
    vrf_coordinator = get_contract("vrf_coordinator")
    subscription_id = network_config.get("subscription_id")
    if not subscription_id:
        subscription_id = create_subscription(account)
        fund_subscription(subscription_id, account=account)
    entrance_fee = Web3.to_wei(network_config.get("entrance_fee", 0.01), "ether")
    print("Deploying Raffle...")
    raffle = Raffle.deploy(
        vrf_coordinator.address,
        entrance_fee,
        network_config["keyhash"],
        subscription_id,
        network_config.get("callback_gas_limit", 500000),
        network_config.get("interval", 30),
        {"from": account},
    )
    raffle.tx.wait(network_config.get("block_confirmations", 1))
    add_consumer(subscription_id, raffle, account)
    print(f"Raffle deployed at {raffle.address}")
    if network_config.get("automation"):
        start_automation(raffle)
    if front_end_update or os.environ.get("UPDATE_FRONT_END"):
        update_front_end(raffle)
    return raffle


def enter_raffle(account=None):
    account = account if account else get_account()
    raffle = Raffle[-1]
    tx = raffle.enter_raffle({"from": account, "value": raffle.get_entrance_fee()})
    tx.wait(1)
    print("You entered the raffle!")
    return tx


def end_raffle():
    account = get_account()
    raffle = Raffle[-1]
    if config["networks"][network.show_active()].get("automation"):
        # keepers and the VRF node close the round on their own
        listen_for_event(raffle, "WinnerPicked", timeout=60, poll_interval=1)
    else:
        chain.sleep(raffle.get_interval() + 1)
        tx = raffle.perform_upkeep(b"", {"from": account})
        tx.wait(1)
        request_id = tx.events["RequestedRaffleWinner"]["request_id"]
        vrf_coordinator = get_contract("vrf_coordinator")
        vrf_coordinator.fulfill_random_words(request_id, raffle.address, {"from": account}).wait(1)
    winner = raffle.get_recent_winner()
    print(f"{winner} is the new winner!")
    return winner


def main():
    deploy_raffle()
    enter_raffle()
    end_raffle()
