#!/usr/bin/env python3
"""Example: Quickstart

Mints the three blindnet token kinds with a freshly generated application
key and inspects their claims. No network call is made.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install blindnet-sdk
"""
from __future__ import annotations

import blindnet
from blindnet import AppKey, TokenClient, decode_token, verify_token


def main() -> None:
    print(f"blindnet-sdk version: {blindnet.__version__}")

    # Step 1: Create a client (use the key and ID from your blindnet dashboard)
    app_key = AppKey.generate()
    client = TokenClient.init(app_key.to_base64(), "quickstart-app")

    # Step 2: Mint user tokens
    sender = client.create_temp_user_token("group-1")
    receiver = client.create_user_token("user-1", "group-1")

    for label, token in (("client", client.client_token), ("sender", sender), ("receiver", receiver)):
        decoded = decode_token(token)
        print(f"{label}: typ={decoded.token_type.value} claims={decoded.claims}")
        print(f"  expires {decoded.expires_at.isoformat()}, valid signature: "
              f"{verify_token(token, client.public_key)}")

    print("\nQuickstart complete.")


if __name__ == "__main__":
    main()
