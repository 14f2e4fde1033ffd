from imperium.events import EventBus, EndOfTurn, UnitDeselected


def test_handlers_receive_their_event_type():
    bus = EventBus()
    got = []
    bus.subscribe(EndOfTurn, got.append)
    bus.publish(UnitDeselected())
    bus.publish(EndOfTurn(player_id="player-0"))
    assert [e.player_id for e in got] == ["player-0"]


def test_unsubscribe():
    bus = EventBus()
    got = []
    unsubscribe = bus.subscribe(EndOfTurn, got.append)
    unsubscribe()
    bus.publish(EndOfTurn(player_id="player-0"))
    assert got == []


def test_subscribe_all_sees_every_event_after_typed_handlers():
    bus = EventBus()
    order = []
    bus.subscribe_all(lambda e: order.append(("all", e.name)))
    bus.subscribe(EndOfTurn, lambda e: order.append(("typed", e.name)))
    bus.publish(EndOfTurn(player_id="p"))
    bus.publish(UnitDeselected())
    assert order == [("typed", "endOfTurn"), ("all", "endOfTurn"), ("all", "unitDeselected")]
