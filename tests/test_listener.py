"""Tests for apps.chat.listener.UnreadMessageListener."""

import pytest
from django.db import DatabaseError

from apps.chat.feeds import SignalChangeFeed
from apps.chat.listener import UnreadMessageListener
from apps.chat.models import Message
from apps.chat.services import mark_chat_read
from apps.notifications.models import Notice
from apps.notifications.notifier import NoticeNotifier


class FakeNotifier:
    def __init__(self, cue_error=None):
        self.notices = []
        self.cues = 0
        self.cue_error = cue_error

    def notify(self, title, body, duration_ms):
        self.notices.append((title, body, duration_ms))

    def play_cue(self):
        if self.cue_error:
            raise self.cue_error
        self.cues += 1


class FailingNotifier(FakeNotifier):
    def notify(self, title, body, duration_ms):
        raise DatabaseError('notices table is locked')


class FakeCounter:
    def __init__(self, user_id):
        self.user_id = user_id
        self.count = 0
        self.refreshes = 0

    def refresh(self):
        self.refreshes += 1
        return self.count


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def mounted(user, notifier):
    """A listener mounted for `user` with fake notifier and counter."""
    listener = UnreadMessageListener(
        feed=SignalChangeFeed(),
        notifier=notifier,
        counter=FakeCounter(user.pk),
        notice_duration_ms=5000,
    )
    listener.mount(user.pk)
    yield listener
    listener.unmount()


@pytest.mark.django_db
class TestMounting:
    def test_mount_subscribes_and_refreshes(self, mounted, user):
        assert mounted.is_subscribed
        assert mounted.user_id == user.pk
        assert mounted.counter.refreshes == 1

    def test_mount_same_user_twice_keeps_subscriptions(self, mounted, user):
        subscriptions = list(mounted._subscriptions)

        mounted.mount(user.pk)

        assert mounted._subscriptions == subscriptions
        assert mounted.counter.refreshes == 1

    def test_unmount_closes_both_subscriptions(self, mounted):
        subscriptions = list(mounted._subscriptions)

        mounted.unmount()
        mounted.unmount()

        assert len(subscriptions) == 2
        assert all(subscription.closed for subscription in subscriptions)
        assert not mounted.is_subscribed
        assert mounted.user_id is None

    def test_set_user_none_unmounts(self, mounted):
        mounted.set_user(None)

        assert not mounted.is_subscribed

    def test_mount_without_user_stays_unsubscribed(self, notifier):
        listener = UnreadMessageListener(SignalChangeFeed(), notifier, notice_duration_ms=5000)

        listener.mount(None)

        assert not listener.is_subscribed
        assert listener.counter is None

    def test_unmounted_listener_ignores_messages(self, mounted, notifier, user, other_user,
                                                 make_chat, django_capture_on_commit_callbacks):
        chat = make_chat(user, other_user)
        mounted.unmount()

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=other_user, content='hi')

        assert notifier.notices == []
        assert notifier.cues == 0


@pytest.mark.django_db
class TestNewMessage:
    def test_member_message_notifies_and_refreshes(self, mounted, notifier, user, other_user,
                                                   make_chat, django_capture_on_commit_callbacks):
        chat = make_chat(user, other_user, name='Team')

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=other_user, content='Привет')

        assert notifier.cues == 1
        assert notifier.notices == [('Новое сообщение', 'Anna Petrova: Привет', 5000)]
        assert mounted.counter.refreshes == 2

    def test_file_message_uses_placeholder(self, mounted, notifier, user, other_user,
                                           make_chat, django_capture_on_commit_callbacks):
        chat = make_chat(user, other_user)

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=other_user, file_name='plan.xlsx',
                                   message_type=Message.MessageType.FILE)

        assert notifier.notices[0][1] == 'Anna Petrova: [file]'

    def test_own_message_is_ignored(self, mounted, notifier, user, other_user,
                                    make_chat, django_capture_on_commit_callbacks):
        chat = make_chat(user, other_user)

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=user, content='mine')

        assert notifier.notices == []
        assert notifier.cues == 0
        assert mounted.counter.refreshes == 1

    def test_message_in_foreign_chat_is_ignored(self, mounted, notifier, make_user, other_user,
                                                make_chat, django_capture_on_commit_callbacks):
        chat = make_chat(other_user, make_user())

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=other_user, content='not for you')

        assert notifier.notices == []
        assert notifier.cues == 0
        assert mounted.counter.refreshes == 1

    def test_cue_failure_still_notifies(self, user, other_user, make_chat,
                                        django_capture_on_commit_callbacks):
        notifier = FakeNotifier(cue_error=RuntimeError('no audio device'))
        listener = UnreadMessageListener(SignalChangeFeed(), notifier,
                                         counter=FakeCounter(user.pk), notice_duration_ms=5000)
        listener.mount(user.pk)
        chat = make_chat(user, other_user)

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=other_user, content='hi')
        listener.unmount()

        assert len(notifier.notices) == 1
        assert listener.counter.refreshes == 2

    def test_notice_failure_still_refreshes(self, user, other_user, make_chat,
                                            django_capture_on_commit_callbacks):
        notifier = FailingNotifier()
        listener = UnreadMessageListener(SignalChangeFeed(), notifier,
                                         counter=FakeCounter(user.pk), notice_duration_ms=5000)
        listener.mount(user.pk)
        chat = make_chat(user, other_user)

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=other_user, content='hi')
        listener.unmount()

        assert listener.counter.refreshes == 2

    def test_real_counter_tracks_unread(self, user, other_user, make_chat, notifier,
                                        django_capture_on_commit_callbacks):
        listener = UnreadMessageListener(SignalChangeFeed(), notifier, notice_duration_ms=5000)
        chat = make_chat(user, other_user)
        listener.mount(user.pk)

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=other_user, content='one')
            Message.objects.create(chat=chat, sender=other_user, content='two')
        listener.unmount()

        assert listener.counter.count == 2

    def test_notice_notifier_stores_toast_and_cue(self, user, other_user, make_chat,
                                                  django_capture_on_commit_callbacks):
        listener = UnreadMessageListener(SignalChangeFeed(), NoticeNotifier(user.pk),
                                         notice_duration_ms=5000)
        chat = make_chat(user, other_user)
        listener.mount(user.pk)

        with django_capture_on_commit_callbacks(execute=True):
            Message.objects.create(chat=chat, sender=other_user, content='hi')
        listener.unmount()

        kinds = set(Notice.objects.filter(user=user).values_list('kind', flat=True))
        assert kinds == {Notice.Kind.TOAST, Notice.Kind.CUE}


@pytest.mark.django_db
class TestMembershipUpdate:
    def test_own_read_marker_refreshes(self, mounted, user, other_user, make_chat,
                                       django_capture_on_commit_callbacks):
        chat = make_chat(user, other_user)

        with django_capture_on_commit_callbacks(execute=True):
            mark_chat_read(chat, user)

        assert mounted.counter.refreshes == 2

    def test_other_members_read_marker_is_ignored(self, mounted, user, other_user, make_chat,
                                                  django_capture_on_commit_callbacks):
        chat = make_chat(user, other_user)

        with django_capture_on_commit_callbacks(execute=True):
            mark_chat_read(chat, other_user)

        assert mounted.counter.refreshes == 1

    def test_new_membership_is_not_an_update(self, mounted, user, make_chat,
                                             django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            make_chat(user)

        assert mounted.counter.refreshes == 1
