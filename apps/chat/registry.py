"""
Per-process registry of live unread listeners.

One listener is mounted per user and shared by all of that user's sessions
in this process. Each session holds a reference: logging in adds one,
logging out drops it, and the listener is unmounted when the last session
is gone. Sessions that stop making requests (expired cookies, closed
tabs) are evicted after CHAT_LISTENER_IDLE_SECONDS without activity.
Disabled with CHAT_LIVE_LISTENERS=False.
"""

import logging
import threading
import time

from django.conf import settings

from .feeds import SignalChangeFeed
from .listener import UnreadMessageListener
from .services import UnreadCounter
from apps.notifications.notifier import NoticeNotifier

logger = logging.getLogger(__name__)

# How often mount/counter_for look for idle sessions
SWEEP_INTERVAL_S = 60


class ListenerRegistry:
    """Maps user ids to their mounted UnreadMessageListener and live sessions."""

    def __init__(self, feed_factory=SignalChangeFeed, notifier_factory=NoticeNotifier,
                 idle_seconds=None, clock=time.monotonic):
        self._feed_factory = feed_factory
        self._notifier_factory = notifier_factory
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._listeners = {}
        self._sessions = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._listeners)

    @property
    def idle_seconds(self):
        if self._idle_seconds is not None:
            return self._idle_seconds
        return settings.CHAT_LISTENER_IDLE_SECONDS

    def get(self, user_id):
        return self._listeners.get(user_id)

    def sessions_for(self, user_id):
        return set(self._sessions.get(user_id, ()))

    def mount(self, user_id, session_key=None):
        """Return the user's listener, mounting a new one if needed."""
        self._maybe_sweep()
        with self._lock:
            listener = self._listeners.get(user_id)
            if listener is None:
                listener = UnreadMessageListener(
                    feed=self._feed_factory(),
                    notifier=self._notifier_factory(user_id),
                )
                self._listeners[user_id] = listener
            self._sessions.setdefault(user_id, {})[session_key] = self._clock()
        listener.mount(user_id)
        return listener

    def unmount(self, user_id, session_key=None):
        """
        Drop one session of the user, or all of them when no key is given.

        Returns:
            bool: True if the listener itself was unmounted
        """
        with self._lock:
            sessions = self._sessions.get(user_id, {})
            if session_key is not None:
                sessions.pop(session_key, None)
            if session_key is not None and sessions:
                return False
            self._sessions.pop(user_id, None)
            listener = self._listeners.pop(user_id, None)
        if listener is not None:
            listener.unmount()
        return listener is not None

    def unmount_all(self):
        with self._lock:
            listeners, self._listeners = list(self._listeners.values()), {}
            self._sessions = {}
        for listener in listeners:
            listener.unmount()

    def touch(self, user_id, session_key=None):
        """Record activity for a mounted session."""
        with self._lock:
            sessions = self._sessions.get(user_id)
            if sessions is not None and session_key in sessions:
                sessions[session_key] = self._clock()

    def evict_idle(self):
        """
        Drop sessions idle for longer than idle_seconds and unmount
        listeners left without sessions.

        Returns:
            int: Number of listeners unmounted
        """
        now = self._clock()
        cutoff = now - self.idle_seconds
        evicted = []
        with self._lock:
            self._last_sweep = now
            for user_id in list(self._sessions):
                sessions = self._sessions[user_id]
                for key, last_seen in list(sessions.items()):
                    if last_seen < cutoff:
                        del sessions[key]
                if not sessions:
                    del self._sessions[user_id]
                    listener = self._listeners.pop(user_id, None)
                    if listener is not None:
                        evicted.append((user_id, listener))

        for user_id, listener in evicted:
            listener.unmount()
            logger.info(f'Evicted idle unread listener for user {user_id}')
        return len(evicted)

    def counter_for(self, user_id, session_key=None):
        """The mounted listener's counter, or a fresh one for this request."""
        self._maybe_sweep()
        self.touch(user_id, session_key)
        listener = self.get(user_id)
        if listener is not None and listener.counter is not None:
            return listener.counter
        return UnreadCounter(user_id)

    def _maybe_sweep(self):
        if self._clock() - self._last_sweep >= SWEEP_INTERVAL_S:
            self.evict_idle()


registry = ListenerRegistry()


def _session_key(request):
    session = getattr(request, 'session', None)
    return session.session_key if session is not None else None


def mount_on_login(sender, request, user, **kwargs):
    if settings.CHAT_LIVE_LISTENERS:
        registry.mount(user.pk, _session_key(request))


def unmount_on_logout(sender, request, user, **kwargs):
    if user is not None:
        registry.unmount(user.pk, _session_key(request))
