# chat/views/throttles.py

from rest_framework.throttling import UserRateThrottle


class ChatPollThrottle(UserRateThrottle):
    """
    Status/message polling (every few seconds per open chat window).
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['chat_poll'].
    """

    scope = "chat_poll"


class ChatWriteThrottle(UserRateThrottle):
    scope = "chat_write"
