"""
Views for chat app.

Includes:
- Unread message count (JSON, or the badge partial for HTMX)
- Chat list with per-chat unread counts
- Send message
- Mark chat as read
"""

import json

from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied, ValidationError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, render
from django.views.decorators.http import require_GET, require_POST

from .models import Chat, ChatMembership
from .registry import registry
from .services import mark_chat_read, send_message, unread_counts_by_chat


def _message_to_dict(message):
    return {
        'id': message.pk,
        'chat_id': message.chat_id,
        'sender_id': message.sender_id,
        'content': message.content,
        'file_name': message.file_name,
        'message_type': message.message_type,
        'created_at': message.created_at.isoformat(),
    }


@login_required
@require_GET
def unread_count(request):
    """Return the unread message count for the navigation badge."""
    count = registry.counter_for(request.user.pk, request.session.session_key).refresh()

    if request.htmx:
        return render(request, 'chat/partials/unread_badge.html', {
            'unread_count': count,
        })

    return JsonResponse({'unread_count': count})


@login_required
@require_GET
def chat_list(request):
    """List the current user's chats with their unread counts."""
    memberships = ChatMembership.objects.filter(
        user=request.user,
        chat__archived=False,
    ).select_related('chat').order_by('-chat__updated_at')
    unread = unread_counts_by_chat(request.user.pk)

    return JsonResponse({
        'chats': [
            {
                'id': membership.chat_id,
                'name': membership.chat.name,
                'type': membership.chat.type,
                'last_read_at': membership.last_read_at.isoformat() if membership.last_read_at else None,
                'unread_count': unread.get(membership.chat_id, 0),
            }
            for membership in memberships
        ],
    })


@login_required
@require_POST
def message_create(request, pk):
    """Post a message to a chat. Accepts form data or a JSON body."""
    chat = get_object_or_404(Chat, pk=pk)

    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except ValueError:
            return JsonResponse({'error': 'Invalid JSON body.'}, status=400)
    else:
        data = request.POST

    try:
        message = send_message(
            chat,
            request.user,
            content=data.get('content', ''),
            file_name=data.get('file_name') or None,
        )
    except PermissionDenied as e:
        return JsonResponse({'error': str(e)}, status=403)
    except ValidationError as e:
        return JsonResponse({'error': ' '.join(e.messages)}, status=400)

    return JsonResponse({'message': _message_to_dict(message)}, status=201)


@login_required
@require_POST
def mark_read(request, pk):
    """Mark a chat as read for the current user."""
    membership = get_object_or_404(ChatMembership, chat_id=pk, user=request.user)
    membership = mark_chat_read(membership.chat, request.user)

    return JsonResponse({
        'chat_id': membership.chat_id,
        'last_read_at': membership.last_read_at.isoformat(),
        'unread_count': registry.counter_for(request.user.pk, request.session.session_key).refresh(),
    })
