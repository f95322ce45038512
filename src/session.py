"""Telegram client construction and login for abmeldung.

The bot can run either as a bot account (BOT_TOKEN) or as a user account
logged in once via QR code or phone code. Running this module directly
performs the login and stores the .session file.
"""

from __future__ import annotations

import asyncio
import logging
import os
from getpass import getpass

import qrcode
from dotenv import load_dotenv
from telethon import TelegramClient, errors

LOGGER = logging.getLogger(__name__)


def build_client() -> TelegramClient:
    """Create a Telethon client from API_ID/API_HASH/SESSION_NAME in .env."""

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")

    LOGGER.info("Initializing Telegram client")
    return TelegramClient(os.getenv("SESSION_NAME", "abmeldung"), int(api_id), api_hash)


def _print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _second_factor() -> str:
    return os.getenv("2FA") or getpass("2FA password: ")


async def _login_with_qr(client: TelegramClient) -> None:
    login = await client.qr_login()
    _print_qr(login.url)
    await login.wait(timeout=120)


async def _login_with_phone(client: TelegramClient) -> None:
    phone = os.getenv("PHONE") or input("Phone number (international format): ").strip()
    await client.send_code_request(phone)
    code = input("Login code: ").strip()
    await client.sign_in(phone=phone, code=code)


def _login_method() -> str:
    method = (os.getenv("LOGIN_METHOD") or "").strip().lower()
    if method in {"qr", "phone"}:
        return method
    while True:
        print("")
        print("Login methods:")
        print("[1] QR code")
        print("[2] Phone code")
        print("[3] Exit")
        choice = input("abmeldung > ").strip()
        if choice == "1":
            return "qr"
        if choice == "2":
            return "phone"
        if choice == "3":
            raise SystemExit(0)
        print("Invalid option. Please choose 1, 2, or 3.")


async def authorize(client: TelegramClient) -> None:
    """Make sure the client is logged in, as bot or as user."""

    if await client.is_user_authorized():
        return

    bot_token = os.getenv("BOT_TOKEN")
    if bot_token:
        await client.sign_in(bot_token=bot_token)
        return

    try:
        if _login_method() == "phone":
            await _login_with_phone(client)
        else:
            await _login_with_qr(client)
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=_second_factor())


async def main() -> None:
    client = build_client()
    await client.connect()
    await authorize(client)

    me = await client.get_me()
    LOGGER.info("Logged in as: %s", getattr(me, "username", None) or me.first_name)

    await client.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
