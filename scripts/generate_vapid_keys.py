#!/usr/bin/env python3
"""
Generate a VAPID key pair for Web Push.

Prints the base64url public key (the browser's applicationServerKey) and the
base64url raw private scalar, ready to paste into .env.
"""

from cryptography.hazmat.primitives.asymmetric import ec

from nerdiversary.notifications.webpush import private_key_to_b64url, vapid_public_key


def main():
    print("🔐 Nerdiversary VAPID Key Generator")
    print("=" * 40)

    private_key = ec.generate_private_key(ec.SECP256R1())

    print("\n📝 Environment Configuration:")
    print("-" * 30)
    print(f"PUSH_VAPID_PUBLIC_KEY={vapid_public_key(private_key)}")
    print(f"PUSH_VAPID_PRIVATE_KEY={private_key_to_b64url(private_key)}")
    print("PUSH_VAPID_SUBJECT=mailto:you@example.com")

    print("\n⚠️  Keep the private key secret. Changing it invalidates every existing subscription.")


if __name__ == "__main__":
    main()
