"""
Context processors for chat app.

Provides the unread message count for the navigation badge.
"""


def unread_messages(request):
    """
    Context processor to provide the unread message badge count.

    Uses the count already held by the user's live listener and never
    queries; the badge partial polls /chat/unread/ for a fresh value.

    Returns:
        dict with unread_message_count (0 for anonymous users)
    """
    context = {
        'unread_message_count': 0,
    }

    if not request.user.is_authenticated:
        return context

    from .registry import registry

    listener = registry.get(request.user.pk)
    if listener is not None and listener.counter is not None:
        context['unread_message_count'] = listener.counter.count
    return context
