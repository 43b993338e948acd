"""
Terminal prompts for credentials and OTP codes.

These are the only interactive pieces; the session manager receives
prompt_otp_code (or any other zero-argument callable) as its OTP provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
import getpass


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


def prompt_credentials(
    *,
    read_line: Callable[[str], str] = input,
    read_secret: Callable[[str], str] = getpass.getpass,
) -> Credentials:
    username = read_line("Email: ").strip()
    password = read_secret("Password: ")
    if not username or not password:
        raise ValueError("Email and password are both required.")
    return Credentials(username=username, password=password)


def prompt_otp_code(read_line: Callable[[str], str] = input) -> str:
    return read_line("2FA code: ").strip()
