"""Off-chain services for networks that run automation.

``KeeperNode`` plays the automation network: it polls ``check_upkeep`` on
every registered contract and calls ``perform_upkeep`` when it returns
true. ``VRFNode`` plays the randomness oracle: it watches the coordinator
for ``RandomWordsRequested`` and fulfills each request once it has the
number of confirmations the consumer asked for.

Both are driven by ``network.tick()``.
"""
import logging

from rafflenet.chain import chain
from rafflenet.exceptions import VirtualMachineError

logger = logging.getLogger(__name__)


class KeeperNode:
    def __init__(self, operator):
        self.operator = operator
        self._upkeeps = []

    def register(self, contract):
        if contract not in self._upkeeps:
            self._upkeeps.append(contract)
            logger.info("Registered upkeep %s", contract.address)

    def poll(self):
        performed = []
        for upkeep in self._upkeeps:
            upkeep_needed, perform_data = upkeep.check_upkeep(b"")
            if not upkeep_needed:
                continue
            try:
                tx = upkeep.perform_upkeep(perform_data, {"from": self.operator})
            except VirtualMachineError as exc:
                logger.warning("perform_upkeep on %s reverted: %s", upkeep.address, exc)
                continue
            logger.info("Performed upkeep on %s in block %d", upkeep.address, tx.block_number)
            performed.append(tx)
        return performed


class VRFNode:
    def __init__(self, coordinator, operator):
        self.coordinator = coordinator
        self.operator = operator
        self._filter = coordinator.events["RandomWordsRequested"].create_filter(from_block="latest")
        self._pending = []

    @property
    def pending(self):
        return list(self._pending)

    def poll(self):
        self._pending.extend(self._filter.get_new_entries())
        fulfilled, waiting = [], []
        for log in self._pending:
            if chain.height - log.blockNumber < log.args.minimum_request_confirmations:
                waiting.append(log)
                continue
            try:
                tx = self.coordinator.fulfill_random_words(
                    log.args.request_id, log.args.sender, {"from": self.operator}
                )
            except VirtualMachineError as exc:
                if exc.revert_msg == "nonexistent request":
                    logger.info("Request %d was already fulfilled", log.args.request_id)
                    continue
                # retried on the next tick
                logger.error("Could not fulfill request %d: %s", log.args.request_id, exc)
                waiting.append(log)
                continue
            logger.info("Fulfilled request %d for %s", log.args.request_id, log.args.sender)
            fulfilled.append(tx)
        self._pending = waiting
        return fulfilled
