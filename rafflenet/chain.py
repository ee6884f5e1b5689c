"""In-process development chain.

Holds balances, nonces, deployed contracts, blocks and logs. Every
transaction mines one block and is atomic: if contract code reverts, the
world state is restored to what it was before the transaction started.
"""
import copy
import logging
import time
from typing import NamedTuple

from web3 import Web3
from web3.datastructures import AttributeDict

from rafflenet.abi import ZERO_ADDRESS
from rafflenet.exceptions import (
    ContractNotFound,
    InsufficientFunds,
    Panic,
    VirtualMachineError,
)
from rafflenet.transaction import TransactionReceipt

logger = logging.getLogger(__name__)


class Block(NamedTuple):
    number: int
    timestamp: int


class Msg(NamedTuple):
    sender: str
    value: int


class _Frame(NamedTuple):
    address: str
    msg: Msg


class _WorldState(NamedTuple):
    balances: dict
    nonces: dict
    contracts: dict
    storage: dict
    log_mark: object


class _Snapshot(NamedTuple):
    world: _WorldState
    blocks: list
    log_count: int
    history_count: int
    time_offset: int


def to_address(value):
    """Normalize an account, contract or hex string to a checksum address."""
    if hasattr(value, "address"):
        value = value.address
    return Web3.to_checksum_address(value)


class Chain:
    def __init__(self, chain_id=1337):
        self.reset(chain_id)

    def reset(self, chain_id=None):
        if chain_id is not None:
            self.id = chain_id
        self._time_offset = 0
        self._balances = {}
        self._nonces = {}
        self._contracts = {}
        self._logs = []
        self._pending_logs = None
        self._pending_block = None
        self._frames = []
        self._snapshots = []
        self._blocks = [Block(0, self.time())]
        self.history = []

    def __repr__(self):
        return f"<Chain id={self.id} height={self.height}>"

    def __len__(self):
        return len(self._blocks)

    def __getitem__(self, number):
        return self._blocks[number]

    @property
    def height(self):
        return self._blocks[-1].number

    def time(self):
        return int(time.time()) + self._time_offset

    def sleep(self, seconds):
        """Move the chain clock forward without mining a block."""
        self._time_offset += int(seconds)

    def mine(self, blocks=1, timestamp=None):
        if timestamp is not None:
            self._time_offset += int(timestamp) - self.time()
        for _ in range(blocks):
            self._blocks.append(self._next_block())
        return self.height

    def snapshot(self):
        self._snapshots.append(
            _Snapshot(
                world=self._capture(),
                blocks=list(self._blocks),
                log_count=len(self._logs),
                history_count=len(self.history),
                time_offset=self._time_offset,
            )
        )

    def revert(self):
        """Return to the most recent snapshot. The snapshot is kept."""
        if not self._snapshots:
            raise ValueError("No snapshot to revert to")
        snap = self._snapshots[-1]
        self._restore(snap.world)
        self._blocks = list(snap.blocks)
        del self._logs[snap.log_count:]
        del self.history[snap.history_count:]
        self._time_offset = snap.time_offset
        return self.height

    # state access

    def balance_of(self, address):
        return self._balances.get(to_address(address), 0)

    def set_balance(self, address, value):
        self._balances[to_address(address)] = value

    def get_code(self, address):
        """Return the contract instance at ``address``, or None for accounts."""
        return self._contracts.get(to_address(address))

    def is_contract(self, address):
        return self.get_code(address) is not None

    def get_logs(self, address=None, event=None, from_block=0):
        logs = []
        for log in self._logs:
            if address is not None and log.address != to_address(address):
                continue
            if event is not None and log.event != event:
                continue
            if log.blockNumber >= from_block:
                logs.append(log)
        return logs

    @property
    def msg(self):
        return self._frames[-1].msg

    @property
    def pending_block(self):
        return self._pending_block

    # transactions

    def deploy(self, contract_cls, args, sender, value=0):
        sender = to_address(sender)
        address = self._create_address(sender)

        def run():
            instance = contract_cls.__new__(contract_cls)
            instance._chain = self
            instance._address = address
            self._contracts[address] = instance
            self._balances.setdefault(address, 0)
            self._invoke(instance, contract_cls.__init__, args, sender, value)

        return self._transact(sender, None, value, run, "constructor", contract_address=address)

    def transact(self, address, fn_name, args, sender, value=0):
        sender = to_address(sender)
        address = to_address(address)
        contract = self._contract(address)

        def run():
            fn = self._external(contract, fn_name)
            return self._invoke(contract, fn, args, sender, value)

        return self._transact(sender, address, value, run, fn_name)

    def transfer(self, sender, to, value):
        sender = to_address(sender)
        to = to_address(to)

        def run():
            if to in self._contracts:
                self._message_call(sender, to, "receive", (), value)
            else:
                self._move(sender, to, value)

        return self._transact(sender, to, value, run, None)

    def call(self, address, fn_name, args, sender=ZERO_ADDRESS, value=0):
        """Execute a function without keeping any of its effects."""
        address = to_address(address)
        contract = self._contract(address)
        state = self._capture()
        self._pending_logs = []
        self._pending_block = self._next_block()
        try:
            fn = self._external(contract, fn_name)
            return self._invoke(contract, fn, args, to_address(sender), value)
        finally:
            self._restore(state)
            self._pending_logs = None
            self._pending_block = None

    # execution used by contract code

    def _message_call(self, caller, address, fn_name, args, value=0):
        contract = self._contracts.get(to_address(address))
        if contract is None:
            raise VirtualMachineError(f"call to non-contract {address}")
        fn = self._external(contract, fn_name)
        return self._invoke(contract, fn, args, caller, value)

    def _try_call(self, caller, address, fn_name, args, value=0):
        state = self._capture()
        try:
            result = self._message_call(caller, address, fn_name, args, value)
        except VirtualMachineError as exc:
            logger.debug("sub-call %s.%s reverted: %s", address, fn_name, exc)
            self._restore(state)
            return False, exc
        return True, result

    def _send_value(self, caller, to, value):
        to = to_address(to)
        contract = self._contracts.get(to)
        if contract is not None:
            receive = getattr(type(contract), "receive", None)
            if not getattr(receive, "_payable", False):
                return False
            success, _ = self._try_call(caller, to, "receive", (), value)
            return success
        try:
            self._move(caller, to, value)
        except InsufficientFunds:
            return False
        return True

    def _emit(self, address, event, values):
        self._pending_logs.append((address, event.name, values))

    # internals

    def _contract(self, address):
        contract = self._contracts.get(address)
        if contract is None:
            raise ContractNotFound(f"No contract deployed at {address}")
        return contract

    def _external(self, contract, fn_name):
        fn = getattr(type(contract), fn_name, None)
        if fn is None or not hasattr(fn, "_mutability"):
            raise VirtualMachineError(f"function selector was not recognized: {fn_name}")
        return fn

    def _invoke(self, contract, fn, args, sender, value):
        if value:
            if not getattr(fn, "_payable", False):
                raise VirtualMachineError(f"{fn.__name__} is not payable")
            self._move(sender, contract._address, value)
        self._frames.append(_Frame(contract._address, Msg(sender, value)))
        try:
            return fn(contract, *args)
        except (ArithmeticError, LookupError) as exc:
            raise Panic(f"{type(exc).__name__}: {exc}") from exc
        finally:
            self._frames.pop()

    def _move(self, sender, to, value):
        balance = self._balances.get(sender, 0)
        if balance < value:
            raise InsufficientFunds(sender, balance, value)
        self._balances[sender] = balance - value
        self._balances[to] = self._balances.get(to, 0) + value

    def _create_address(self, sender):
        nonce = self._nonces.get(sender, 0)
        digest = Web3.keccak(text=f"{self.id}:{sender}:{nonce}")
        return Web3.to_checksum_address("0x" + bytes(digest[-20:]).hex())

    def _next_block(self):
        last = self._blocks[-1]
        return Block(last.number + 1, max(self.time(), last.timestamp))

    def _capture(self):
        return _WorldState(
            balances=dict(self._balances),
            nonces=dict(self._nonces),
            contracts=dict(self._contracts),
            storage={addr: copy.deepcopy(c._storage()) for addr, c in self._contracts.items()},
            log_mark=None if self._pending_logs is None else len(self._pending_logs),
        )

    def _restore(self, state):
        self._balances = dict(state.balances)
        self._nonces = dict(state.nonces)
        self._contracts = dict(state.contracts)
        for addr, storage in state.storage.items():
            self._contracts[addr]._load_storage(copy.deepcopy(storage))
        if state.log_mark is not None and self._pending_logs is not None:
            del self._pending_logs[state.log_mark:]

    def _transact(self, sender, receiver, value, run, fn_name, contract_address=None):
        nonce = self._nonces.get(sender, 0)
        txid = "0x" + bytes(Web3.keccak(text=f"{self.id}:tx:{sender}:{nonce}")).hex()
        block = self._next_block()
        state = self._capture()
        self._pending_logs = []
        self._pending_block = block
        error = None
        return_value = None
        try:
            return_value = run()
        except VirtualMachineError as exc:
            self._restore(state)
            error = exc
        except Exception:
            self._restore(state)
            raise
        finally:
            pending = self._pending_logs
            self._pending_logs = None
            self._pending_block = None

        logs = []
        if error is None:
            for address, name, values in pending:
                logs.append(
                    AttributeDict(
                        {
                            "event": name,
                            "address": address,
                            "args": AttributeDict(values),
                            "blockNumber": block.number,
                            "transactionHash": txid,
                            "logIndex": len(logs),
                        }
                    )
                )
        self._nonces[sender] = nonce + 1
        self._blocks.append(block)
        self._logs.extend(logs)

        receipt = TransactionReceipt(
            chain=self,
            txid=txid,
            sender=sender,
            receiver=receiver,
            value=value,
            fn_name=fn_name,
            status=0 if error else 1,
            block=block,
            logs=logs,
            return_value=return_value,
            contract_address=contract_address if error is None else None,
            revert_msg=error.revert_msg if error else None,
        )
        self.history.append(receipt)
        if error is not None:
            logger.debug("%s reverted: %s", receipt, error)
            error.txid = txid
            raise error
        logger.debug("%s confirmed in block %d", receipt, block.number)
        return receipt


chain = Chain()
