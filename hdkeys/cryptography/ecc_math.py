"""
Helper functions for the mathematics of elliptic curves over prime fields
"""

__all__ = ["is_quadratic_residue", "tonelli_shanks"]


def is_quadratic_residue(n: int, p: int) -> bool:
    """
    Euler's criterion. Returns True if n is a square mod p (0 included).
    """
    n %= p
    if n == 0:
        return True
    return pow(n, (p - 1) >> 1, p) == 1


def tonelli_shanks(n: int, p: int) -> int:
    """
    Returns r such that r^2 = n (mod p). Raises ValueError if n is not a quadratic residue.
    """
    n %= p
    if n == 0:
        return 0
    if not is_quadratic_residue(n, p):
        raise ValueError("Tonelli Shanks called on quadratic non-residue")

    # p = 3 (mod 4), which covers secp256k1
    if p & 3 == 3:
        return pow(n, (p + 1) >> 2, p)

    # p - 1 = 2^s * q with q odd
    q, s = p - 1, 0
    while q & 1 == 0:
        q >>= 1
        s += 1

    z = 2
    while is_quadratic_residue(z, p):
        z += 1

    m, c, t, r = s, pow(z, q, p), pow(n, q, p), pow(n, (q + 1) >> 1, p)
    while t != 1:
        # least i with t^(2^i) = 1
        i, t2 = 1, (t * t) % p
        while t2 != 1:
            i += 1
            t2 = (t2 * t2) % p

        b = pow(c, 1 << (m - i - 1), p)
        m, c = i, (b * b) % p
        t, r = (t * c) % p, (r * b) % p

    return r
