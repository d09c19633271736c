import pytest

from bizledger.domain.errors import NotFoundError
from bizledger.domain.models import NotificationKind
from bizledger.services.notification_service import NotificationBus


def test_notifications_expire_after_ttl(clock):
    bus = NotificationBus(ttl_seconds=3.0, clock=clock)
    first = bus.show("one", "success")
    clock.advance(2)
    second = bus.show("two", NotificationKind.INFO)

    assert [n.id for n in bus.active()] == [first.id, second.id]

    clock.advance(1)
    assert [n.id for n in bus.active()] == [second.id]

    clock.advance(2)
    assert bus.active() == []


def test_manual_dismissal_and_no_deduplication(clock):
    bus = NotificationBus(ttl_seconds=3.0, clock=clock)
    a = bus.show("same", "info")
    b = bus.show("same", "info")
    assert a.id != b.id
    assert len(bus.active()) == 2

    bus.remove(a.id)
    bus.remove("does-not-exist")
    assert [n.id for n in bus.active()] == [b.id]


def test_subscribers_receive_and_can_unsubscribe(clock):
    bus = NotificationBus(clock=clock)
    seen = []
    unsubscribe = bus.subscribe(seen.append)

    bus.show("hello", "success")
    unsubscribe()
    bus.show("ignored", "success")

    assert [n.message for n in seen] == ["hello"]


def test_failing_subscriber_does_not_break_publisher(clock):
    bus = NotificationBus(clock=clock)

    def boom(_n):
        raise RuntimeError("subscriber bug")

    seen = []
    bus.subscribe(boom)
    bus.subscribe(seen.append)

    bus.show("still delivered", "warning")
    assert len(seen) == 1


def test_unknown_kind_is_rejected(clock):
    bus = NotificationBus(clock=clock)
    with pytest.raises(ValueError):
        bus.show("x", "loud")


def test_service_failures_are_published_as_errors(container):
    seen = []
    container.notifications.subscribe(seen.append)

    with pytest.raises(NotFoundError):
        container.inventory.delete_product("missing")

    assert seen[-1].kind is NotificationKind.ERROR
    assert seen[-1].message == "Product not found."


def test_successful_mutations_publish_matching_kinds(container):
    p = container.inventory.add_product("Widget", 1, 2, 3)
    container.inventory.delete_product(p.id)

    kinds = [(n.kind, n.message) for n in container.notifications.active()]
    assert kinds == [
        (NotificationKind.SUCCESS, "Product added successfully."),
        (NotificationKind.DELETE, "Product deleted."),
    ]


def test_publishing_evicts_expired_entries_without_reads(clock):
    bus = NotificationBus(ttl_seconds=3.0, clock=clock)
    for i in range(5):
        bus.show(f"msg {i}", "info")
        clock.advance(4)

    latest = bus.show("latest", "info")

    assert [n.id for n in bus._notifications] == [latest.id]
