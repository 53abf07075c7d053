import asyncio

import pytest

from conftest import FakeTranslator
from interpreter.services.exceptions import SessionStateError
from interpreter.services.session import SessionController, SessionState
from interpreter.services.translation import Language, TranslationGateway


pytestmark = pytest.mark.asyncio


async def make_controller(speech, translator=None, **kwargs):
    gateway = TranslationGateway(translator or FakeTranslator(), timeout_sec=2.0)
    await gateway.select_language(Language.SPANISH)
    return SessionController(gateway, speech, **kwargs)


async def wait_for_state(controller, state, timeout=1.0):
    async def poll():
        while controller.state is not state:
            await asyncio.sleep(0.01)
    await asyncio.wait_for(poll(), timeout)


async def test_stop_flushes_last_sentence_and_speaks_everything(device, speech):
    controller = await make_controller(speech)
    await controller.start()

    await controller.on_snapshot("Hello there. How are")
    sentences = await controller.on_snapshot("Hello there. How are you")
    assert [s.text for s in sentences] == ["Hello there."]

    await controller.stop()

    assert device.texts == ["[es] Hello there.", "[es] How are you"]
    assert controller.state is SessionState.IDLE
    assert controller.session is None


async def test_state_changes_are_reported(speech):
    changes = []
    controller = await make_controller(
        speech, on_state_change=lambda state, session_id: changes.append((state, session_id))
    )

    session = await controller.start()
    await controller.stop()

    assert [state for state, _ in changes] == [
        SessionState.ACTIVE,
        SessionState.FINALIZING,
        SessionState.IDLE,
    ]
    assert {session_id for _, session_id in changes} == {session.session_id}


async def test_snapshots_dropped_while_idle(device, speech):
    controller = await make_controller(speech)

    assert await controller.on_snapshot("Hello there. How") == []
    assert await controller.on_snapshot("Hello there. How are") == []

    await controller.start()
    # the dropped snapshots never reached the new session
    assert controller.session.finalizer.state.previous_snapshot == ""


async def test_snapshots_dropped_while_finalizing(device, speech):
    translator = FakeTranslator(delays={"Last words": 0.2})
    controller = await make_controller(speech, translator)
    await controller.start()
    await controller.on_snapshot("Last words")

    stopping = asyncio.create_task(controller.stop())
    await wait_for_state(controller, SessionState.FINALIZING)

    assert await controller.on_snapshot("Last words. And more. Even") == []

    await stopping
    assert device.texts == ["[es] Last words"]


async def test_clear_discards_in_flight_translations(device, speech):
    translator = FakeTranslator(delays={"First sentence.": 0.3, "Second sentence.": 0.3})
    results = []
    controller = await make_controller(speech, translator, on_sentence=results.append)
    await controller.start()

    await controller.on_snapshot("First sentence. Second sentence")
    sentences = await controller.on_snapshot("First sentence. Second sentence.")
    assert [s.sequence_number for s in sentences] == [0, 1]

    await controller.clear()
    await asyncio.sleep(0.4)

    assert device.utterances == []
    assert results == []
    assert controller.state is SessionState.IDLE
    # once on start, once on clear
    assert device.stops == 2


async def test_clear_while_draining_cancels_the_drain(device, speech):
    translator = FakeTranslator(delays={"Slow goodbye": 0.3})
    changes = []
    controller = await make_controller(
        speech, translator, on_state_change=lambda state, session_id: changes.append(state)
    )
    await controller.start()
    await controller.on_snapshot("Slow goodbye")

    stopping = asyncio.create_task(controller.stop())
    await wait_for_state(controller, SessionState.FINALIZING)
    await controller.clear()
    await stopping

    assert device.utterances == []
    assert controller.state is SessionState.IDLE
    assert changes == [SessionState.ACTIVE, SessionState.FINALIZING, SessionState.IDLE]


async def test_restart_resets_sequence_numbers(device, speech):
    controller = await make_controller(speech)

    first = await controller.start()
    await controller.on_snapshot("Morning all. Let")
    await controller.on_snapshot("Morning all. Let us")
    assert first.next_sequence == 1

    second = await controller.start()

    assert second.session_id != first.session_id
    assert second.next_sequence == 0
    assert controller.state is SessionState.ACTIVE

    await controller.on_snapshot("Evening all. Let")
    await controller.on_snapshot("Evening all. Let us")
    await controller.stop()

    assert ("speak", "[es] Evening all.", f"utt-{second.session_id}-0") in device.events
    assert ("speak", "[es] Let us", f"utt-{second.session_id}-1") in device.events


async def test_stop_is_ignored_when_idle(speech):
    changes = []
    controller = await make_controller(speech, on_state_change=lambda state, session_id: changes.append(state))

    await controller.stop()

    assert changes == []
    assert controller.state is SessionState.IDLE


async def test_snapshot_from_recognizer_thread(device, speech):
    controller = await make_controller(speech)
    await controller.start()

    def recognizer_callbacks():
        controller.on_snapshot_threadsafe("Good evening. Wel").result(timeout=1)
        return controller.on_snapshot_threadsafe("Good evening. Welcome").result(timeout=1)

    sentences = await asyncio.to_thread(recognizer_callbacks)
    await controller.stop()

    assert [s.text for s in sentences] == ["Good evening."]
    assert device.texts == ["[es] Good evening.", "[es] Welcome"]


async def test_threadsafe_snapshot_requires_started_controller(speech):
    controller = await make_controller(speech)

    with pytest.raises(SessionStateError):
        controller.on_snapshot_threadsafe("Hello")


async def test_stats_describe_active_session(speech):
    controller = await make_controller(speech)
    assert controller.stats()["state"] == "idle"

    session = await controller.start()
    await controller.on_snapshot("One more. Two")
    await controller.on_snapshot("One more. Two more")

    stats = controller.stats()
    assert stats["state"] == "active"
    assert stats["session_id"] == session.session_id
    assert stats["next_sequence"] == 1
    assert stats["dispatch"]["submitted"] == 1

    await controller.clear()
