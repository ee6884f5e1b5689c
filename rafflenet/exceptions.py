class RaffleNetError(Exception):
    pass


class VirtualMachineError(RaffleNetError):
    """Raised when a call or transaction reverts.

    ``revert_msg`` holds the revert string, or the error name for custom
    errors and panics.
    """

    def __init__(self, revert_msg=None):
        self.revert_msg = revert_msg
        super().__init__(f"revert: {revert_msg}" if revert_msg else "revert")


class CustomError(VirtualMachineError):
    """Base class for named contract errors.

    Subclasses list their arguments as ``(name, abi_type)`` pairs in
    ``fields``; the values are kept in ``inputs`` and the class shows up in
    the ABI as an ``error`` entry.
    """

    fields = ()

    def __init__(self, *values):
        if len(values) != len(self.fields):
            raise TypeError(
                f"{type(self).__name__} takes {len(self.fields)} arguments, got {len(values)}"
            )
        self.inputs = {name: value for (name, _), value in zip(self.fields, values)}
        super().__init__(type(self).__name__)

    def __str__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in self.inputs.items())
        return f"revert: {type(self).__name__}({args})"


class Panic(VirtualMachineError):
    def __init__(self, reason):
        self.reason = reason
        super().__init__("Panic")

    def __str__(self):
        return f"revert: Panic ({self.reason})"


class ContractNotFound(RaffleNetError):
    pass


class UnknownNetwork(RaffleNetError):
    pass


class NotConnected(RaffleNetError):
    pass


class InsufficientFunds(VirtualMachineError):
    def __init__(self, address, balance, value):
        self.address = address
        super().__init__(f"insufficient funds: {address} has {balance}, needs {value}")
