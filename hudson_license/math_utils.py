"""
Integer helpers for raw signature verification.

Functions:
    bytes_to_long(byte_array):
        Converts a big-endian byte string to an integer.

    long_to_bytes(n, blocksize=0):
        Converts an integer to a big-endian byte string.

    inverse(a, m):
        Modular multiplicative inverse using the extended Euclidean algorithm.

    truncate_hash(digest, order):
        Reduces a digest to the bit length of a curve order, as ECDSA requires.
"""


def bytes_to_long(byte_array):
    return int.from_bytes(byte_array, byteorder='big')


def long_to_bytes(n, blocksize=0):
    """
    Convert an integer to a byte string.

    Args:
        n (int): Integer to convert
        blocksize (int, optional): Minimum size of the resulting byte string,
            the result is left padded with zero bytes up to it

    Returns:
        bytes: Big-endian representation of n
    """
    byte_length = max((n.bit_length() + 7) // 8, blocksize)
    return n.to_bytes(byte_length, byteorder='big')


def inverse(a, m):
    """
    Calculate the modular multiplicative inverse of 'a' modulo 'm'.

    Raises:
        ValueError: If the modular inverse doesn't exist
    """
    if m == 1:
        return 0

    old_r, r = a % m, m
    old_x, x = 1, 0
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x

    if old_r != 1:
        raise ValueError("Modular inverse does not exist")
    return old_x % m


def truncate_hash(digest, order):
    """Leftmost bits of digest, as many as the bit length of order."""
    e = bytes_to_long(digest)
    excess = len(digest) * 8 - order.bit_length()
    if excess > 0:
        e >>= excess
    return e
