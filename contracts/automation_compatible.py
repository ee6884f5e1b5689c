from rafflenet.contract import Contract


class AutomationCompatible(Contract):
    """Interface polled by keeper nodes.

    ``check_upkeep`` is a view returning ``(upkeep_needed, perform_data)``;
    keepers pass ``perform_data`` back to ``perform_upkeep`` when
    ``upkeep_needed`` is true.
    """

    def check_upkeep(self, check_data):
        raise NotImplementedError

    def perform_upkeep(self, perform_data):
        raise NotImplementedError
