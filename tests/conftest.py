import pytest

from contracts import Raffle
from rafflenet import chain, network
from scripts.deploy_raffle import deploy_raffle
from scripts.helpful_scripts import get_contract


def pytest_addoption(parser):
    parser.addoption("--network", action="store", default=None, help="network to run the tests on")


@pytest.fixture(scope="session", autouse=True)
def active_network(request):
    network.connect(request.config.getoption("--network"))
    chain.snapshot()
    yield network.show_active()
    network.disconnect()


@pytest.fixture(autouse=True)
def isolation(active_network):
    # rewind the chain after every test and drop services started by it
    yield
    network.clear_services()
    chain.revert()


@pytest.fixture()
def lottery_contract():
    raffle_contract = Raffle[-1] if len(Raffle) > 0 else deploy_raffle()
    return raffle_contract


@pytest.fixture()
def vrf_coordinator(lottery_contract):
    return get_contract("vrf_coordinator")


@pytest.fixture()
def entrance_fee(lottery_contract):
    return lottery_contract.get_entrance_fee()


@pytest.fixture()
def interval(lottery_contract):
    return lottery_contract.get_interval()
