"""MessagePoller behaviour against a scripted fake client."""

import time
from threading import Event, Thread

from marketplace.client.api_client import ApiError
from marketplace.client.messaging import MessagePoller


class FakeClient:
    def __init__(self):
        self.conversations = [{"id": "c1", "unread_count": 2}, {"id": "c2", "unread_count": 0}]
        self.messages = {"c1": [{"id": "m1", "content": "hi"}], "c2": [{"id": "m2", "content": "yo"}]}
        self.calls = []
        self.fail_next = False

    def list_conversations(self):
        self.calls.append(("list_conversations",))
        if self.fail_next:
            self.fail_next = False
            raise ApiError(500, "Failed to fetch conversations")
        return [dict(c) for c in self.conversations]

    def get_messages(self, conversation_id):
        self.calls.append(("get_messages", conversation_id))
        return list(self.messages[conversation_id])

    def mark_read(self, conversation_id):
        self.calls.append(("mark_read", conversation_id))
        for conversation in self.conversations:
            if conversation["id"] == conversation_id:
                conversation["unread_count"] = 0
        return {"success": True}

    def send_message(self, conversation_id, content):
        self.calls.append(("send_message", conversation_id, content))
        message = {"id": f"m{len(self.calls)}", "content": content}
        self.messages[conversation_id].append(message)
        return message


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_selecting_fetches_messages_and_marks_read():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=60, conversation_interval=60)
    try:
        poller.select_conversation("c1")
        assert poller.messages == [{"id": "m1", "content": "hi"}]
        assert ("mark_read", "c1") in client.calls
    finally:
        poller.stop()


def test_next_conversation_poll_reports_zero_unread_after_selection():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=60, conversation_interval=60)
    try:
        poller.start()
        assert poller.conversations[0]["unread_count"] == 2

        poller.select_conversation("c1")
        poller.refresh_conversations()

        assert poller.conversations[0]["unread_count"] == 0
    finally:
        poller.stop()


def test_conversations_are_polled_in_the_background():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=60, conversation_interval=0.05)
    try:
        poller.start()
        assert _wait_for(lambda: client.calls.count(("list_conversations",)) >= 3)
    finally:
        poller.stop()

    calls_after_stop = client.calls.count(("list_conversations",))
    time.sleep(0.2)
    assert client.calls.count(("list_conversations",)) == calls_after_stop


def test_messages_poll_only_while_selected():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=0.05, conversation_interval=60)
    try:
        poller.select_conversation("c1")
        assert _wait_for(lambda: client.calls.count(("get_messages", "c1")) >= 3)

        poller.clear_selection()
        polls = client.calls.count(("get_messages", "c1"))
        time.sleep(0.2)
        assert client.calls.count(("get_messages", "c1")) == polls
        assert poller.messages == []
    finally:
        poller.stop()


def test_blank_message_or_no_selection_sends_nothing():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=60, conversation_interval=60)
    try:
        assert poller.send_message("hello") is None
        poller.select_conversation("c1")
        assert poller.send_message("   ") is None
        assert not any(call[0] == "send_message" for call in client.calls)
    finally:
        poller.stop()


def test_sent_message_is_appended_and_list_refreshed():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=60, conversation_interval=60)
    try:
        poller.select_conversation("c1")
        client.calls.clear()

        message = poller.send_message("hello there")

        assert poller.messages[-1] == message
        assert client.calls[0] == ("send_message", "c1", "hello there")
        assert ("list_conversations",) in client.calls
    finally:
        poller.stop()


def test_failed_poll_keeps_previous_state():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=60, conversation_interval=60)
    poller.refresh_conversations()
    before = poller.conversations

    client.fail_next = True
    assert poller.refresh_conversations() is False
    assert poller.conversations == before


def test_response_for_previous_selection_is_discarded():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=60, conversation_interval=60)
    original = client.get_messages
    switched = Event()

    def get_messages_then_switch(conversation_id):
        # The user picks another conversation while this request is in flight
        if conversation_id == "c1" and not switched.is_set():
            switched.set()
            poller.select_conversation("c2")
        return original(conversation_id)

    try:
        poller.select_conversation("c1")
        client.get_messages = get_messages_then_switch

        assert poller.refresh_messages() is False
        assert poller.selected_id == "c2"
        assert poller.messages == [{"id": "m2", "content": "yo"}]
    finally:
        poller.stop()


def test_poll_in_flight_during_send_keeps_the_sent_message():
    client = FakeClient()
    poller = MessagePoller(client, message_interval=60, conversation_interval=60)
    original = client.get_messages
    fetched, release = Event(), Event()

    def slow_get_messages(conversation_id):
        snapshot = original(conversation_id)
        fetched.set()
        release.wait(2)
        return snapshot

    try:
        poller.select_conversation("c1")
        client.get_messages = slow_get_messages

        results = []
        worker = Thread(target=lambda: results.append(poller.refresh_messages()))
        worker.start()
        assert fetched.wait(2)

        sent = poller.send_message("hello")
        release.set()
        worker.join(2)

        assert results == [False]
        assert poller.messages == [{"id": "m1", "content": "hi"}, sent]
    finally:
        release.set()
        poller.stop()
