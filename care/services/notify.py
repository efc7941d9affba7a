"""
Realtime queue events pushed to a hospital's channel group.

Delivery is best-effort: the request has already been stored by the
time an event is pushed, and clients that miss one still poll the queue.
"""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def queue_group(hospital_id) -> str:
    return f"queue.{hospital_id}"


def push_queue_event(hospital_id, event_type: str, payload: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(queue_group(hospital_id), {"type": event_type, **payload})
    except Exception:
        logger.exception('Queue event %s for hospital %s was not delivered', event_type, hospital_id)
