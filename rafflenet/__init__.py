from rafflenet import exceptions, network
from rafflenet.account import accounts
from rafflenet.chain import chain
from rafflenet.config import config
from rafflenet.contract import ContractContainer, ProjectContract

__all__ = [
    "ContractContainer",
    "ProjectContract",
    "accounts",
    "chain",
    "config",
    "exceptions",
    "network",
]
