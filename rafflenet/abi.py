"""ABI types for contract annotations and JSON ABI generation.

Contract functions annotate their parameters and return values with the
types below (``address``, ``uint256``, ...). They behave like the plain
Python type they wrap and only exist so the interface description handed to
front-ends carries the Solidity type names.
"""
import inspect
from enum import IntEnum
from typing import List, NewType, get_args, get_origin, get_type_hints

address = NewType("address", str)
bytes32 = NewType("bytes32", bytes)
uint8 = NewType("uint8", int)
uint16 = NewType("uint16", int)
uint32 = NewType("uint32", int)
uint64 = NewType("uint64", int)
uint96 = NewType("uint96", int)
uint256 = NewType("uint256", int)

ZERO_ADDRESS = "0x" + "0" * 40

_PLAIN_TYPES = {bool: "bool", bytes: "bytes", str: "string", int: "int256"}


def type_name(hint):
    if hint in _PLAIN_TYPES:
        return _PLAIN_TYPES[hint]
    if hasattr(hint, "__supertype__"):
        return hint.__name__
    if get_origin(hint) in (list, List):
        (inner,) = get_args(hint)
        return type_name(inner) + "[]"
    if isinstance(hint, type) and issubclass(hint, IntEnum):
        return "uint8"
    raise TypeError(f"no ABI type for {hint!r}")


def _outputs(hint):
    if hint is None or hint is type(None):
        return []
    if get_origin(hint) is tuple:
        return [{"name": "", "type": type_name(h)} for h in get_args(hint)]
    return [{"name": "", "type": type_name(hint)}]


def _inputs(fn):
    hints = get_type_hints(fn)
    names = list(inspect.signature(fn).parameters)[1:]
    return [{"name": name, "type": type_name(hints[name])} for name in names]


def function_abi(fn):
    return {
        "type": "function",
        "name": fn.__name__,
        "inputs": _inputs(fn),
        "outputs": _outputs(get_type_hints(fn).get("return")),
        "stateMutability": fn._mutability,
    }


def build_abi(contract_cls):
    """Build the JSON ABI (a list of dicts) for a contract class."""
    abi = []
    init = contract_cls.__init__
    if init is not object.__init__ and hasattr(init, "__code__"):
        abi.append(
            {
                "type": "constructor",
                "inputs": _inputs(init),
                "stateMutability": "payable" if getattr(init, "_payable", False) else "nonpayable",
            }
        )

    seen_events, seen_errors = {}, {}
    for klass in reversed(contract_cls.__mro__):
        for event in vars(klass).get("EVENTS", ()):
            seen_events[event.name] = event
        for error in vars(klass).get("ERRORS", ()):
            seen_errors[error.__name__] = error

    for name in sorted(dir(contract_cls)):
        if name.startswith("_"):
            continue
        member = getattr(contract_cls, name)
        if not callable(member) or not hasattr(member, "_mutability"):
            continue
        if name == "receive":
            abi.append({"type": "receive", "stateMutability": "payable"})
        else:
            abi.append(function_abi(member))

    for event in seen_events.values():
        abi.append(event.abi())
    for error in seen_errors.values():
        abi.append(
            {
                "type": "error",
                "name": error.__name__,
                "inputs": [{"name": n, "type": type_name(t)} for n, t in error.fields],
            }
        )
    return abi
