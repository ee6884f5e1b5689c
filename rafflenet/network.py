import logging
import os

from web3 import Web3

from rafflenet.account import accounts
from rafflenet.chain import chain
from rafflenet.config import config
from rafflenet.exceptions import NotConnected, RaffleNetError, UnknownNetwork

logger = logging.getLogger(__name__)

DEV_ACCOUNT_COUNT = 10
DEV_ACCOUNT_BALANCE = 100  # ether

_active = None
_services = []


def connect(network=None):
    """Start a fresh chain for ``network``.

    Without a name the ``RAFFLE_NETWORK`` environment variable is used,
    then ``networks.default`` from the project config.
    """
    global _active
    network = network or os.environ.get("RAFFLE_NETWORK") or config["networks"]["default"]
    if network == "default" or network not in config["networks"]:
        raise UnknownNetwork(f"Unknown network '{network}'")
    if _active is not None:
        raise RaffleNetError(f"Already connected to network '{_active}'")
    settings = config["networks"][network] or {}

    chain.reset(chain_id=settings.get("chain_id", 1337))
    accounts._reset(
        count=DEV_ACCOUNT_COUNT,
        initial_balance=Web3.to_wei(settings.get("initial_balance", DEV_ACCOUNT_BALANCE), "ether"),
        faucet=Web3.to_wei(settings.get("faucet", 0), "ether"),
    )
    _services.clear()
    _active = network
    logger.info("Connected to %s (chain id %s)", network, chain.id)


def disconnect():
    global _active
    if _active is None:
        raise NotConnected("Not connected to any network")
    logger.info("Disconnected from %s", _active)
    _active = None
    _services.clear()


def is_connected():
    return _active is not None


def show_active():
    return _active


def add_service(service):
    """Register an off-chain service polled on every ``tick()``."""
    _services.append(service)


def clear_services():
    _services.clear()


def tick():
    """Mine a block and let every registered service react to it."""
    if _active is None:
        raise NotConnected("Not connected to any network")
    chain.mine()
    for service in list(_services):
        service.poll()
    return chain.height
