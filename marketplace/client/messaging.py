"""Polling chat view state.

``MessagePoller`` keeps a conversation list and the selected conversation's
messages fresh by polling: conversations every 5 s for as long as the poller
runs, messages every 3 s while a conversation is selected.

Each ticker is a daemon thread waiting on its own ``Event``, so stopping or
switching the selection cancels it at once. Every fetch remembers which
selection (or which request number) it was made for; a response that comes
back after something newer was applied is dropped.
"""

from threading import Event, Lock, Thread
from typing import Callable, List, Optional

from marketplace.client.api_client import ApiError, MarketplaceClient
from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger

logger = get_logger(__name__)


class _Ticker:
    """Call ``func`` every ``interval`` seconds on a daemon thread until stopped."""

    def __init__(self, interval: float, func: Callable[[], None]):
        self._interval = interval
        self._func = func
        self._stop_event = Event()
        self._thread = Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join(timeout=self._interval + 1)

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            self._func()


class MessagePoller:
    def __init__(
        self,
        client: MarketplaceClient,
        message_interval: Optional[float] = None,
        conversation_interval: Optional[float] = None,
    ):
        settings = get_settings()
        self.client = client
        self.message_interval = message_interval or settings.message_poll_seconds
        self.conversation_interval = conversation_interval or settings.conversation_poll_seconds

        self._lock = Lock()
        self._conversations: List[dict] = []
        self._messages: List[dict] = []
        self._selected_id: Optional[str] = None
        self._selection_generation = 0
        self._conversation_requests = 0
        self._conversation_applied = 0
        self._message_requests = 0
        self._message_applied = 0
        self._conversation_ticker: Optional[_Ticker] = None
        self._message_ticker: Optional[_Ticker] = None

    # ------------------------------------------------------------
    # State snapshots
    # ------------------------------------------------------------

    @property
    def conversations(self) -> List[dict]:
        with self._lock:
            return list(self._conversations)

    @property
    def messages(self) -> List[dict]:
        with self._lock:
            return list(self._messages)

    @property
    def selected_id(self) -> Optional[str]:
        with self._lock:
            return self._selected_id

    @property
    def running(self) -> bool:
        return self._conversation_ticker is not None

    # ------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------

    def start(self) -> None:
        """Load conversations now and keep polling them."""
        if self._conversation_ticker is not None:
            return
        self.refresh_conversations()
        self._conversation_ticker = _Ticker(self.conversation_interval, self.refresh_conversations)
        self._conversation_ticker.start()

    def stop(self) -> None:
        self._stop_message_ticker()
        if self._conversation_ticker is not None:
            self._conversation_ticker.stop()
            self._conversation_ticker = None

    def select_conversation(self, conversation_id: str) -> None:
        """Show ``conversation_id``: fetch and mark read now, then poll its messages."""
        self._stop_message_ticker()
        with self._lock:
            self._selected_id = conversation_id
            self._selection_generation += 1
            self._messages = []

        self.refresh_messages()
        try:
            self.client.mark_read(conversation_id)
        except ApiError as e:
            logger.error("Error marking conversation %s as read: %s", conversation_id, e.message)

        self._message_ticker = _Ticker(self.message_interval, self.refresh_messages)
        self._message_ticker.start()

    def clear_selection(self) -> None:
        self._stop_message_ticker()
        with self._lock:
            self._selected_id = None
            self._selection_generation += 1
            self._messages = []

    def _stop_message_ticker(self) -> None:
        if self._message_ticker is not None:
            self._message_ticker.stop()
            self._message_ticker = None

    # ------------------------------------------------------------
    # Fetches
    # ------------------------------------------------------------

    def refresh_conversations(self) -> bool:
        """Fetch the conversation list. Returns False when the result was an error or stale."""
        with self._lock:
            self._conversation_requests += 1
            request_number = self._conversation_requests

        try:
            conversations = self.client.list_conversations()
        except ApiError as e:
            logger.error("Error fetching conversations: %s", e.message)
            return False

        with self._lock:
            if request_number < self._conversation_applied:
                return False
            self._conversation_applied = request_number
            self._conversations = conversations
        return True

    def refresh_messages(self) -> bool:
        """
        Fetch the selected conversation's messages.

        The result is dropped when the selection changed meanwhile, or when a newer
        fetch or a sent message was applied after this request went out.
        """
        with self._lock:
            conversation_id = self._selected_id
            generation = self._selection_generation
            if conversation_id is None:
                return False
            self._message_requests += 1
            request_number = self._message_requests

        try:
            messages = self.client.get_messages(conversation_id)
        except ApiError as e:
            logger.error("Error fetching messages for %s: %s", conversation_id, e.message)
            return False

        with self._lock:
            if generation != self._selection_generation or request_number <= self._message_applied:
                return False
            self._message_applied = request_number
            self._messages = messages
        return True

    def send_message(self, content: str) -> Optional[dict]:
        """
        Post ``content`` to the selected conversation.

        Blank content or no selection sends nothing. The server's copy of the
        message is appended locally and the conversation list is refreshed.
        """
        with self._lock:
            conversation_id = self._selected_id
            generation = self._selection_generation
        if not content or not content.strip() or conversation_id is None:
            return None

        try:
            message = self.client.send_message(conversation_id, content)
        except ApiError as e:
            logger.error("Error sending message: %s", e.message)
            return None

        with self._lock:
            if generation == self._selection_generation:
                self._messages = [*self._messages, message]
                # Fetches issued before this point may not include the new message
                self._message_applied = self._message_requests

        self.refresh_conversations()
        return message
