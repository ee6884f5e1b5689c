from eth_account import Account as EthAccount
from web3 import Web3

from rafflenet.chain import chain, to_address


class Account:
    def __init__(self, address, private_key=None):
        self.address = Web3.to_checksum_address(address)
        self._private_key = private_key

    def __repr__(self):
        return f"<Account '{self.address}'>"

    def __str__(self):
        return self.address

    def __eq__(self, other):
        if isinstance(other, str):
            return other.lower() == self.address.lower()
        return hasattr(other, "address") and other.address == self.address

    def __hash__(self):
        return hash(self.address)

    def balance(self):
        return chain.balance_of(self.address)

    def transfer(self, to, amount):
        return chain.transfer(self.address, to_address(to), amount)


class Accounts:
    """Accounts available on the active network.

    Development accounts are derived from fixed keys so their addresses
    are the same on every run.
    """

    def __init__(self):
        self._accounts = []
        self._faucet = 0

    def _reset(self, count=10, initial_balance=0, faucet=0):
        self._accounts = []
        self._faucet = faucet
        for i in range(count):
            key = Web3.keccak(text=f"rafflenet:development:{i}")
            account = EthAccount.from_key(key)
            self._accounts.append(Account(account.address, account.key))
            chain.set_balance(account.address, initial_balance)

    def __getitem__(self, index):
        return self._accounts[index]

    def __len__(self):
        return len(self._accounts)

    def __iter__(self):
        return iter(self._accounts)

    def __contains__(self, address):
        return any(a == address for a in self._accounts)

    def add(self, private_key=None):
        """Add an account from a private key, or a new random one.

        On networks with a faucet the account is topped up whenever its
        balance is empty.
        """
        if private_key is None:
            eth_account = EthAccount.create()
        else:
            eth_account = EthAccount.from_key(private_key)
        account = self.at(eth_account.address)
        if account is None:
            account = Account(eth_account.address, eth_account.key)
            self._accounts.append(account)
        if self._faucet and chain.balance_of(account.address) == 0:
            chain.set_balance(account.address, self._faucet)
        return account

    def at(self, address, force=False):
        """Look up a known account. With ``force`` any address is returned as an
        account that can send transactions, which lets tests act as a contract.
        """
        for account in self._accounts:
            if account == address:
                return account
        if not force:
            return None
        account = Account(to_address(address))
        self._accounts.append(account)
        return account

    def clear(self):
        self._accounts = []


accounts = Accounts()
