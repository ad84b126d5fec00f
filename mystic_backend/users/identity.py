# users/identity.py
"""
The account email is the identity that keys wallets and chat sessions
(Wallet.customer_id, ChatSession.customer_id / accepted_by / ended_by).
"""

MAX_IDENTITY_LENGTH = 254


def canonical_email(value) -> str:
    return str(value or "").strip().lower()
