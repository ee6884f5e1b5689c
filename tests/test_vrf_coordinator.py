import pytest

from contracts import VRFCoordinatorV2Mock
from rafflenet import exceptions
from scripts.helpful_scripts import BASE_FEE, GAS_PRICE_LINK, get_account

KEY_HASH = "0x" + "11" * 32
FUND_AMOUNT = 10**18
CALLBACK_GAS_LIMIT = 100000


@pytest.fixture()
def coordinator():
    return VRFCoordinatorV2Mock.deploy(BASE_FEE, GAS_PRICE_LINK, {"from": get_account()})


@pytest.fixture()
def subscription_id(coordinator):
    tx = coordinator.create_subscription({"from": get_account()})
    sub_id = tx.return_value
    coordinator.fund_subscription(sub_id, FUND_AMOUNT, {"from": get_account()})
    return sub_id


@pytest.fixture()
def consumer(coordinator, subscription_id):
    account = get_account(index=7)
    coordinator.add_consumer(subscription_id, account, {"from": get_account()})
    return account


def _request(coordinator, subscription_id, consumer, num_words=1):
    tx = coordinator.request_random_words(
        KEY_HASH, subscription_id, 3, CALLBACK_GAS_LIMIT, num_words, {"from": consumer}
    )
    return tx.return_value


def test_create_and_fund_subscription(coordinator):
    owner = get_account()
    tx = coordinator.create_subscription({"from": owner})
    assert tx.return_value == 1
    assert tx.events["SubscriptionCreated"]["owner"] == owner.address

    tx = coordinator.fund_subscription(1, FUND_AMOUNT, {"from": get_account(index=1)})
    assert tx.events["SubscriptionFunded"]["old_balance"] == 0
    assert tx.events["SubscriptionFunded"]["new_balance"] == FUND_AMOUNT
    assert coordinator.get_subscription(1) == (FUND_AMOUNT, 0, owner.address, [])
    assert coordinator.create_subscription({"from": owner}).return_value == 2


def test_funding_unknown_subscription_reverts(coordinator):
    with pytest.raises(exceptions.VirtualMachineError) as excinfo:
        coordinator.fund_subscription(42, FUND_AMOUNT, {"from": get_account()})
    assert excinfo.value.revert_msg == "InvalidSubscription"


def test_only_owner_manages_consumers(coordinator, subscription_id):
    with pytest.raises(exceptions.VirtualMachineError) as excinfo:
        coordinator.add_consumer(subscription_id, get_account(index=2), {"from": get_account(index=1)})
    assert excinfo.value.revert_msg == "MustBeSubOwner"
    assert excinfo.value.inputs["owner"] == get_account().address


def test_adding_a_consumer_twice_is_a_no_op(coordinator, subscription_id, consumer):
    tx = coordinator.add_consumer(subscription_id, consumer, {"from": get_account()})
    assert "ConsumerAdded" not in tx.events
    assert coordinator.get_subscription(subscription_id)[3] == [consumer.address]
    assert coordinator.consumer_is_added(subscription_id, consumer)


def test_remove_consumer(coordinator, subscription_id, consumer):
    coordinator.remove_consumer(subscription_id, consumer, {"from": get_account()})
    assert not coordinator.consumer_is_added(subscription_id, consumer)
    with pytest.raises(exceptions.VirtualMachineError) as excinfo:
        coordinator.remove_consumer(subscription_id, consumer, {"from": get_account()})
    assert excinfo.value.revert_msg == "InvalidConsumer"


def test_only_consumers_can_request(coordinator, subscription_id):
    stranger = get_account(index=8)
    with pytest.raises(exceptions.VirtualMachineError) as excinfo:
        _request(coordinator, subscription_id, stranger)
    assert excinfo.value.revert_msg == "InvalidConsumer"
    assert excinfo.value.inputs == {"sub_id": subscription_id, "consumer": stranger.address}


def test_request_ids_and_seeds_increase(coordinator, subscription_id, consumer):
    tx = coordinator.request_random_words(KEY_HASH, subscription_id, 3, CALLBACK_GAS_LIMIT, 2, {"from": consumer})
    second = _request(coordinator, subscription_id, consumer)

    event = tx.events["RandomWordsRequested"]
    assert tx.return_value == 1
    assert event["pre_seed"] == 100
    assert event["sender"] == consumer.address
    assert event["num_words"] == 2
    assert second == 2
    assert coordinator.pending_request_exists(subscription_id)
    assert coordinator.get_subscription(subscription_id)[1] == 2


def test_too_many_words_reverts(coordinator, subscription_id, consumer):
    with pytest.raises(exceptions.VirtualMachineError) as excinfo:
        _request(coordinator, subscription_id, consumer, num_words=501)
    assert excinfo.value.revert_msg == "NumWordsTooBig"


def test_fulfillment_charges_the_subscription(coordinator, subscription_id, consumer):
    request_id = _request(coordinator, subscription_id, consumer)

    tx = coordinator.fulfill_random_words(request_id, consumer, {"from": get_account()})

    payment = BASE_FEE + GAS_PRICE_LINK * CALLBACK_GAS_LIMIT
    event = tx.events["RandomWordsFulfilled"]
    assert event["payment"] == payment
    # plain accounts cannot take the callback
    assert event["success"] is False
    assert coordinator.get_subscription(subscription_id)[0] == FUND_AMOUNT - payment
    assert not coordinator.pending_request_exists(subscription_id)
    with pytest.raises(exceptions.VirtualMachineError):
        coordinator.fulfill_random_words(request_id, consumer, {"from": get_account()})


def test_fulfillment_without_funds_reverts(coordinator, consumer):
    owner = get_account()
    sub_id = coordinator.create_subscription({"from": owner}).return_value
    coordinator.add_consumer(sub_id, consumer, {"from": owner})
    request_id = _request(coordinator, sub_id, consumer)

    with pytest.raises(exceptions.VirtualMachineError) as excinfo:
        coordinator.fulfill_random_words(request_id, consumer, {"from": owner})

    assert excinfo.value.revert_msg == "InsufficientBalance"
    assert coordinator.pending_request_exists(sub_id)


def test_override_must_match_requested_word_count(coordinator, subscription_id, consumer):
    request_id = _request(coordinator, subscription_id, consumer, num_words=2)
    with pytest.raises(exceptions.VirtualMachineError) as excinfo:
        coordinator.fulfill_random_words_with_override(request_id, consumer, [1], {"from": get_account()})
    assert excinfo.value.revert_msg == "InvalidRandomWords"


def test_cancel_subscription(coordinator, subscription_id):
    refund_to = get_account(index=3)
    tx = coordinator.cancel_subscription(subscription_id, refund_to, {"from": get_account()})
    assert tx.events["SubscriptionCanceled"]["amount"] == FUND_AMOUNT
    assert tx.events["SubscriptionCanceled"]["to"] == refund_to.address
    with pytest.raises(exceptions.VirtualMachineError):
        coordinator.get_subscription(subscription_id)
