import secrets

# 16 random bytes -> 128 bits of entropy, 22 url-safe characters
CODE_BYTES = 16


def generate_code(nbytes: int = CODE_BYTES) -> str:
    """Return an unguessable url-safe token for attendance links."""
    return secrets.token_urlsafe(nbytes)
