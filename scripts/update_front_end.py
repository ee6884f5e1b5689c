import json
import os
from pathlib import Path

from contracts import Raffle
from rafflenet import chain, config


def _front_end_path(key, path):
    return Path(path if path else config["front_end"][key])


def update_front_end(raffle=None, addresses_file=None, abi_file=None):
    raffle = raffle if raffle else Raffle[-1]
    print("Updating front end...")
    update_contract_addresses(raffle, addresses_file)
    update_abi(raffle, abi_file)
    print("Front end updated!")


def update_abi(raffle, abi_file=None):
    path = _front_end_path("abi_file", abi_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(raffle.abi))


def update_contract_addresses(raffle, addresses_file=None):
    path = _front_end_path("addresses_file", addresses_file)
    chain_id = str(chain.id)
    current_addresses = json.loads(path.read_text()) if path.exists() else {}
    if chain_id in current_addresses:
        if raffle.address not in current_addresses[chain_id]:
            current_addresses[chain_id].append(raffle.address)
    else:
        current_addresses[chain_id] = [raffle.address]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(current_addresses))


def main():
    if os.environ.get("UPDATE_FRONT_END"):
        update_front_end()
