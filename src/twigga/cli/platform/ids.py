"""Document ID generation."""

import os

ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
ID_LENGTH = 20


def generate_document_id() -> str:
    """Generate a 20-character lowercase alphanumeric document ID.

    Each random byte is reduced modulo 36.
    """
    raw = os.urandom(ID_LENGTH)
    return "".join(ID_ALPHABET[b % len(ID_ALPHABET)] for b in raw)
