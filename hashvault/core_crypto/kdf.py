"""
PBKDF2 Key Derivation (RFC 8018, section 5.2)

DK = T_1 || T_2 || ... || T_l   (last block truncated to r bytes)
T_i = U_1 ^ U_2 ^ ... ^ U_c
U_1 = PRF(P, S || INT_32_BE(i)),  U_j = PRF(P, U_{j-1})

with PRF = HMAC over the chosen hash.
"""

from .algorithms import AlgorithmLike, get_algorithm
from .encoding import Data, to_bytes
from .engine import MASK_32, AlgorithmSpec, HashEngine
from .mac import HMAC, EngineFactory


def _check_positive_int(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, not {type(value).__name__}")
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")


def check_pbkdf2_parameters(iterations: int, dk_len: int, spec: AlgorithmSpec) -> None:
    """
    Validate PBKDF2 parameters.

    Raises:
        TypeError: If iterations or dk_len is not an integer
        ValueError: If either is below 1, or dk_len exceeds (2^32 - 1) * hLen
    """
    _check_positive_int(iterations, 'iterations')
    _check_positive_int(dk_len, 'dk_len')
    if dk_len > MASK_32 * spec.digest_size:
        raise ValueError("Derived key too long")


def pbkdf2(
    password: Data,
    salt: Data,
    iterations: int,
    dk_len: int,
    algorithm: AlgorithmLike = 'sha256',
    engine_factory: EngineFactory = HashEngine
) -> bytes:
    """
    Derive a key from a password with PBKDF2-HMAC.

    Args:
        password: Password (text is UTF-8 encoded)
        salt: Salt (text is UTF-8 encoded)
        iterations: Iteration count, at least 1
        dk_len: Derived key length in bytes, at least 1
        algorithm: Hash underlying the HMAC PRF
        engine_factory: Callable creating an engine for a descriptor

    Returns:
        Derived key of exactly dk_len bytes

    Raises:
        TypeError: If an argument has the wrong type
        ValueError: If iterations or dk_len is not positive, or dk_len
            exceeds (2^32 - 1) * hLen
        UnsupportedAlgorithmError: If the algorithm is not supported

    Example:
        >>> pbkdf2(b"password", b"salt", 1, 20, 'sha1').hex()
        '0c60c80f961f0e71f3a9b524af6012062fe037a6'
    """
    spec = get_algorithm(algorithm)
    check_pbkdf2_parameters(iterations, dk_len, spec)
    password = to_bytes(password)
    salt = to_bytes(salt)

    h_len = spec.digest_size

    block_count = -(-dk_len // h_len)
    last_len = dk_len - (block_count - 1) * h_len

    # Keyed once; every PRF call starts from a copy
    prf = HMAC(password, spec, engine_factory=engine_factory)

    blocks = []
    for i in range(1, block_count + 1):
        u = prf.copy().update(salt + i.to_bytes(4, byteorder='big')).digest()
        t = int.from_bytes(u, byteorder='big')
        for _ in range(iterations - 1):
            u = prf.copy().update(u).digest()
            t ^= int.from_bytes(u, byteorder='big')
        block = t.to_bytes(h_len, byteorder='big')
        blocks.append(block if i < block_count else block[:last_len])

    return b''.join(blocks)
