import hashlib

import numpy as np

HASH_DIGEST_SIZE = 8  # bytes, i.e. a 64-bit fingerprint


def content_hash(text: str) -> int:
    """Compute a fixed-width 64-bit fingerprint of a string.

    Stable across processes, unlike the builtin ``hash()``. Any ``str`` is
    accepted, including lone surrogates decoded from JSON escapes.

    Args:
        text: The raw input string.

    Returns:
        The blake2b digest as an unsigned integer.
    """
    data = text.encode("utf-8", "surrogatepass")
    digest = hashlib.blake2b(data, digest_size=HASH_DIGEST_SIZE).digest()
    return int.from_bytes(digest, "big")


def normalize(vector: np.ndarray) -> np.ndarray:
    """Scale a vector to unit L2 norm as float32.

    A zero vector is returned unchanged; it scores 0 against everything.
    """
    vector = np.asarray(vector, dtype=np.float32).ravel()
    norm = float(np.linalg.norm(vector))
    if norm == 0.0:
        return vector
    return vector / norm
