"""Contract base class, ABI decorators and the proxies used by scripts.

Contract code subclasses ``Contract`` and marks its externally callable
functions with ``@external``, ``@payable`` or ``@view``. Public attributes
set on the instance are the contract's storage and are rolled back when a
transaction reverts; attributes starting with an underscore are runtime
bookkeeping.

Scripts and tests never touch contract instances directly. They go
through a ``ContractContainer`` (``Raffle.deploy(...)``, ``Raffle[-1]``)
which hands out ``ProjectContract`` proxies whose methods send
transactions or make calls on the active chain.
"""
import copy
import logging

from web3 import Web3

from rafflenet.abi import ZERO_ADDRESS, build_abi, type_name
from rafflenet.chain import chain, to_address
from rafflenet.exceptions import ContractNotFound, VirtualMachineError

logger = logging.getLogger(__name__)


def external(fn):
    fn._mutability = "nonpayable"
    return fn


def payable(fn):
    fn._mutability = "payable"
    fn._payable = True
    return fn


def view(fn):
    fn._mutability = "view"
    return fn


def revert(reason=None):
    raise VirtualMachineError(reason)


class Event:
    """Event declaration: ``Event("Name", ("field", abi_type, indexed), ...)``."""

    def __init__(self, name, *inputs):
        self.name = name
        self.inputs = [(field[0], field[1], field[2] if len(field) > 2 else False) for field in inputs]

    def __repr__(self):
        return f"<Event {self.name}>"

    @property
    def fields(self):
        return [name for name, _, _ in self.inputs]

    def abi(self):
        return {
            "type": "event",
            "name": self.name,
            "anonymous": False,
            "inputs": [
                {"name": name, "type": type_name(kind), "indexed": indexed}
                for name, kind, indexed in self.inputs
            ],
        }


class _Interface:
    def __init__(self, caller, address):
        self._caller = caller
        self._target = to_address(address)

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def call(*args, value=0):
            return self._caller._chain._message_call(self._caller._address, self._target, name, args, value)

        return call


class Contract:
    EVENTS = ()
    ERRORS = ()

    @property
    def msg(self):
        return self._chain.msg

    @property
    def block(self):
        return self._chain.pending_block

    @property
    def address(self):
        return self._address

    @property
    def balance(self):
        return self._chain.balance_of(self._address)

    def emit(self, event, **values):
        if set(values) != set(event.fields):
            raise TypeError(f"{event.name} expects {event.fields}, got {sorted(values)}")
        self._chain._emit(self._address, event, {name: values[name] for name in event.fields})

    def send_value(self, to, amount):
        """Send ``amount`` wei to ``to``; returns False instead of reverting on failure."""
        return self._chain._send_value(self._address, to, amount)

    def at(self, address):
        """Interface to another contract; calls run with this contract as ``msg.sender``."""
        return _Interface(self, address)

    def try_call(self, address, fn_name, *args, value=0):
        return self._chain._try_call(self._address, address, fn_name, args, value)

    def _storage(self):
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}

    def _load_storage(self, data):
        for key in [k for k in vars(self) if not k.startswith("_")]:
            delattr(self, key)
        vars(self).update(data)


def _split_tx(args):
    if args and isinstance(args[-1], dict):
        return list(args[:-1]), dict(args[-1])
    return list(args), {}


def _format_arg(kind, value):
    if kind == "address":
        return to_address(value)
    if kind.endswith("[]"):
        return [_format_arg(kind[:-2], v) for v in value]
    if kind in ("bytes", "bytes32") and isinstance(value, str):
        return Web3.to_bytes(hexstr=value)
    return value


def _format_args(inputs, args):
    if len(args) != len(inputs):
        raise ValueError(f"Sequence has incorrect length, expected {len(inputs)} but got {len(args)}")
    return tuple(_format_arg(i["type"], a) for i, a in zip(inputs, args))


class _ContractMethod:
    def __init__(self, contract, abi):
        self._contract = contract
        self.abi = abi
        self._name = abi["name"]

    def __repr__(self):
        return f"<{type(self).__name__} '{self._contract._name}.{self._name}'>"

    def call(self, *args):
        args, tx = _split_tx(args)
        return chain.call(
            self._contract.address,
            self._name,
            _format_args(self.abi["inputs"], args),
            sender=tx.get("from", ZERO_ADDRESS),
            value=tx.get("value", 0),
        )

    def transact(self, *args):
        args, tx = _split_tx(args)
        if "from" not in tx:
            raise AttributeError("Final argument must be a dict of transaction parameters that includes a `from` field")
        return chain.transact(
            self._contract.address,
            self._name,
            _format_args(self.abi["inputs"], args),
            sender=tx["from"],
            value=tx.get("value", 0),
        )


class ContractTx(_ContractMethod):
    def __call__(self, *args):
        return self.transact(*args)


class ContractCall(_ContractMethod):
    def __call__(self, *args):
        return self.call(*args)


class _EventFilter:
    def __init__(self, address, event, from_block):
        self._address = address
        self._event = event
        if from_block == "latest":
            from_block = chain.height
        self._from_block = from_block
        self._seen = set()

    def get_new_entries(self):
        entries = []
        for log in chain.get_logs(self._address, self._event, self._from_block):
            key = (log.transactionHash, log.logIndex)
            if key not in self._seen:
                self._seen.add(key)
                entries.append(log)
        return entries

    def get_all_entries(self):
        return chain.get_logs(self._address, self._event, self._from_block)


class _ContractEvent:
    def __init__(self, address, name):
        self._address = address
        self.name = name

    def create_filter(self, from_block="latest"):
        return _EventFilter(self._address, self.name, from_block)

    def get_logs(self, from_block=0):
        return chain.get_logs(self._address, self.name, from_block)


class _ContractEvents:
    def __init__(self, contract):
        self._contract = contract
        self._names = [e["name"] for e in contract.abi if e["type"] == "event"]

    def __getitem__(self, name):
        if name not in self._names:
            raise KeyError(f"{self._contract._name} has no event '{name}'")
        return _ContractEvent(self._contract.address, name)

    def __iter__(self):
        return iter(self._names)


class ProjectContract:
    """Proxy for a deployed contract, built from its address and ABI."""

    def __init__(self, name, address, abi, tx=None):
        self._name = name
        self.address = to_address(address)
        self.abi = abi
        self.tx = tx
        self._methods = {e["name"]: e for e in abi if e["type"] == "function"}
        self.events = _ContractEvents(self)

    @classmethod
    def from_abi(cls, name, address, abi):
        if not chain.is_contract(address):
            raise ContractNotFound(f"No contract deployed at {address}")
        return cls(name, address, abi)

    def __getattr__(self, name):
        methods = self.__dict__.get("_methods", {})
        if name not in methods:
            raise AttributeError(f"Contract '{self.__dict__.get('_name')}' has no attribute '{name}'")
        entry = methods[name]
        if entry["stateMutability"] in ("view", "pure"):
            return ContractCall(self, entry)
        return ContractTx(self, entry)

    def __repr__(self):
        return f"<{self._name} Contract '{self.address}'>"

    def __str__(self):
        return self.address

    def __eq__(self, other):
        if isinstance(other, str):
            return other.lower() == self.address.lower()
        return isinstance(other, ProjectContract) and other.address == self.address

    def __hash__(self):
        return hash(self.address)

    def balance(self):
        return chain.balance_of(self.address)


class ContractContainer:
    """Deployable contract type and the list of its deployments."""

    def __init__(self, contract_cls):
        self._contract_cls = contract_cls
        self._name = contract_cls.__name__
        self.abi = build_abi(contract_cls)
        self._deployed = []

    def __repr__(self):
        return f"<ContractContainer '{self._name}' {self._live()}>"

    def _live(self):
        return [p for p in self._deployed if isinstance(chain.get_code(p.address), self._contract_cls)]

    def __getitem__(self, index):
        return self._live()[index]

    def __len__(self):
        return len(self._live())

    def __iter__(self):
        return iter(self._live())

    def deploy(self, *args):
        args, tx = _split_tx(args)
        if "from" not in tx:
            raise AttributeError("Final argument must be a dict of transaction parameters that includes a `from` field")
        constructor = next((e for e in self.abi if e["type"] == "constructor"), {"inputs": []})
        receipt = chain.deploy(
            self._contract_cls,
            _format_args(constructor["inputs"], args),
            sender=tx["from"],
            value=tx.get("value", 0),
        )
        contract = ProjectContract(self._name, receipt.contract_address, copy.deepcopy(self.abi), tx=receipt)
        self._deployed = [p for p in self._deployed if p.address != contract.address]
        self._deployed.append(contract)
        logger.info("%s deployed at %s", self._name, contract.address)
        return contract

    def at(self, address):
        if not isinstance(chain.get_code(address), self._contract_cls):
            raise ContractNotFound(f"No {self._name} deployed at {address}")
        return ProjectContract(self._name, address, copy.deepcopy(self.abi))
