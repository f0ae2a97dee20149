"""
Generate operator wallets
Creates a Flare signing key and an XRPL operator seed and appends them to .env
"""
from pathlib import Path

from eth_account import Account
from xrpl.wallet import Wallet

ENV_PATH = Path(".env")
FLARE_KEY_VAR = "FLARE__OPERATOR_PRIVATE_KEY"
XRPL_SEED_VAR = "XRPL__OPERATOR_SEED"


def generate_wallets(env_path: Path = ENV_PATH) -> None:
    env_content = env_path.read_text(encoding="utf-8") if env_path.exists() else ""
    lines: list[str] = []

    print("=" * 50)
    print("Generating wallets")
    print("=" * 50)

    if f"{FLARE_KEY_VAR}=0x" not in env_content:
        account = Account.create()
        key = "0x" + account.key.hex().removeprefix("0x")
        lines.append(f"# Flare operator (generated)\n{FLARE_KEY_VAR}={key}")
        print("\nFlare operator wallet:")
        print(f"  Address: {account.address}")
        print("  Fund it with C2FLR: https://faucet.flare.network")
    else:
        print("\nFlare operator already configured")

    if f"{XRPL_SEED_VAR}=" not in env_content:
        wallet = Wallet.create()
        lines.append(f"# XRPL operator (generated)\n{XRPL_SEED_VAR}={wallet.seed}")
        print("\nXRPL operator wallet:")
        print(f"  Address: {wallet.classic_address}")
        print("  Fund it from the XRPL testnet faucet before use")
    else:
        print("\nXRPL operator already configured")

    if lines:
        with env_path.open("a", encoding="utf-8") as handle:
            handle.write("\n" + "\n".join(lines) + "\n")
        print(f"\nWritten to {env_path}")
    print("=" * 50)


if __name__ == "__main__":
    generate_wallets()
