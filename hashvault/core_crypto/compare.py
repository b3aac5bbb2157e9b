"""
Constant-Time Comparison

Equality check for digests and MAC tags whose running time does not depend
on the position of the first differing byte. The length of the inputs is not
treated as secret.
"""

from .encoding import Data, to_bytes


def constant_time_equal(a: Data, b: Data) -> bool:
    """
    Compare two byte sequences in constant time.

    Text arguments are UTF-8 encoded first.

    Args:
        a: First value
        b: Second value

    Returns:
        True if both sequences are identical, False otherwise
        (including when their lengths differ)
    """
    a = to_bytes(a)
    b = to_bytes(b)
    if len(a) != len(b):
        return False

    result = 0
    for x, y in zip(a, b):
        result |= x ^ y
    return result == 0
