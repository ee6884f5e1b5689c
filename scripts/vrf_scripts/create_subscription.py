from rafflenet import config, network
from scripts.helpful_scripts import get_account, get_contract

DEFAULT_FUND_AMOUNT = 2 * 10**18  # 2 LINK


def create_subscription(account=None):
    account = account if account else get_account()
    vrf_coordinator = get_contract("vrf_coordinator")
    tx = vrf_coordinator.create_subscription({"from": account})
    tx.wait(1)
    subscription_id = tx.events["SubscriptionCreated"]["sub_id"]
    print(f"Created subscription {subscription_id}")
    return subscription_id


def fund_subscription(subscription_id, amount=None, account=None):
    account = account if account else get_account()
    if amount is None:
        amount = config["networks"][network.show_active()].get("fund_amount", DEFAULT_FUND_AMOUNT)
    vrf_coordinator = get_contract("vrf_coordinator")
    tx = vrf_coordinator.fund_subscription(subscription_id, amount, {"from": account})
    tx.wait(1)
    print(f"Funded subscription {subscription_id} with {amount / 10**18} LINK")
    return tx


def add_consumer(subscription_id, consumer, account=None):
    account = account if account else get_account()
    vrf_coordinator = get_contract("vrf_coordinator")
    tx = vrf_coordinator.add_consumer(subscription_id, consumer, {"from": account})
    tx.wait(1)
    print(f"Added {consumer} to subscription {subscription_id}")
    return tx


def main():
    subscription_id = create_subscription()
    fund_subscription(subscription_id)
