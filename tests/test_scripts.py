import json

import pytest
from click.testing import CliRunner

from contracts import Raffle
from rafflenet import chain, network
from rafflenet.cli import cli
from rafflenet.contract import ProjectContract
from scripts.deploy_raffle import deploy_raffle, end_raffle, enter_raffle
from scripts.helpful_scripts import LOCAL_BLOCKCHAIN_ENVS, get_account, get_contract
from scripts.update_front_end import update_front_end
from scripts.vrf_scripts.create_subscription import (
    add_consumer,
    create_subscription,
    fund_subscription,
)


def test_subscription_scripts():
    if network.show_active() not in LOCAL_BLOCKCHAIN_ENVS:
        pytest.skip()
    # Arrange
    account = get_account()
    consumer = get_account(index=5)
    # Act
    subscription_id = create_subscription(account)
    fund_subscription(subscription_id, amount=10**18, account=account)
    add_consumer(subscription_id, consumer.address, account)
    # Assert
    balance, _, owner, consumers = get_contract("vrf_coordinator").get_subscription(subscription_id)
    assert balance == 10**18
    assert owner == account.address
    assert consumers == [consumer.address]


def test_deploy_enter_and_end_raffle():
    if network.show_active() not in LOCAL_BLOCKCHAIN_ENVS:
        pytest.skip()
    # Arrange
    player = get_account(index=6)
    raffle = deploy_raffle()
    vrf_coordinator = get_contract("vrf_coordinator")
    # Act
    enter_raffle(player)
    winner = end_raffle()
    # Assert
    assert Raffle[-1] == raffle
    assert vrf_coordinator.consumer_is_added(raffle.get_subscription_id(), raffle)
    assert winner == player.address
    assert raffle.get_raffle_state() == 0
    assert raffle.get_number_of_players() == 0


def test_update_front_end_writes_addresses_and_abi(lottery_contract, tmp_path):
    # Arrange
    addresses_file = tmp_path / "constants" / "contractAddresses.json"
    abi_file = tmp_path / "constants" / "abi.json"
    # Act
    update_front_end(lottery_contract, addresses_file, abi_file)
    update_front_end(lottery_contract, addresses_file, abi_file)
    # Assert
    addresses = json.loads(addresses_file.read_text())
    assert addresses == {str(chain.id): [lottery_contract.address]}
    abi = json.loads(abi_file.read_text())
    assert abi == Raffle.abi
    front_end_raffle = ProjectContract.from_abi("Raffle", addresses[str(chain.id)][0], abi)
    assert front_end_raffle.get_entrance_fee() == lottery_contract.get_entrance_fee()


def test_update_front_end_keeps_other_chains(lottery_contract, tmp_path):
    addresses_file = tmp_path / "contractAddresses.json"
    other = {"5": ["0x0000000000000000000000000000000000000001"]}
    addresses_file.write_text(json.dumps(other))

    update_front_end(lottery_contract, addresses_file, tmp_path / "abi.json")

    addresses = json.loads(addresses_file.read_text())
    assert addresses["5"] == other["5"]
    assert addresses[str(chain.id)] == [lottery_contract.address]


def test_cli_lists_networks():
    result = CliRunner().invoke(cli, ["networks"])
    assert result.exit_code == 0
    assert "* development: chain id 1337" in result.output
    assert "staging: chain id 11155111 (automation)" in result.output
