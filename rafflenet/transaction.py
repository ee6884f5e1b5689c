class EventDict:
    """Events emitted by a transaction, addressable by position or by name.

    Looking up a name returns the arguments of the first event with that
    name; use ``get_all`` when a transaction emits the same event more than
    once.
    """

    def __init__(self, logs):
        self._logs = list(logs)

    def __getitem__(self, key):
        if isinstance(key, int):
            return self._logs[key].args
        for log in self._logs:
            if log.event == key:
                return log.args
        raise KeyError(f"Event '{key}' was not emitted")

    def __contains__(self, name):
        return any(log.event == name for log in self._logs)

    def __len__(self):
        return len(self._logs)

    def __iter__(self):
        return (log.args for log in self._logs)

    def __repr__(self):
        return f"<EventDict {[log.event for log in self._logs]}>"

    def keys(self):
        return list(dict.fromkeys(log.event for log in self._logs))

    def get_all(self, name):
        return [log.args for log in self._logs if log.event == name]


class TransactionReceipt:
    def __init__(
        self,
        chain,
        txid,
        sender,
        receiver,
        value,
        fn_name,
        status,
        block,
        logs,
        return_value,
        contract_address,
        revert_msg,
    ):
        self._chain = chain
        self.txid = txid
        self.sender = sender
        self.receiver = receiver
        self.value = value
        self.fn_name = fn_name
        self.status = status
        self.block_number = block.number
        self.timestamp = block.timestamp
        self.events = EventDict(logs)
        self.return_value = return_value
        self.contract_address = contract_address
        self.revert_msg = revert_msg

    def __repr__(self):
        name = self.fn_name or "transfer"
        state = "confirmed" if self.status else "reverted"
        return f"<Transaction '{self.txid[:10]}...' {name} ({state})>"

    @property
    def confirmations(self):
        return self._chain.height - self.block_number + 1

    def wait(self, required_confs=1):
        """Mine blocks until the transaction has ``required_confs`` confirmations."""
        while self.confirmations < required_confs:
            self._chain.mine()
        return self
