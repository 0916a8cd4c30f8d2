from __future__ import annotations

CEP_LENGTH = 8
_ASCII_DIGITS = frozenset("0123456789")


def is_valid_cep(value: str) -> bool:
    # str.isdigit() also accepts non-ASCII digits such as "٣" or "²".
    return len(value) == CEP_LENGTH and all(char in _ASCII_DIGITS for char in value)
