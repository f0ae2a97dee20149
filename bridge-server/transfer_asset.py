"""
Transfer the bridged asset from the operator to a recipient
Usage: python transfer_asset.py <recipient> <amount>
"""
import asyncio
import sys
from decimal import Decimal

from xrpfi.core.config import get_settings
from xrpfi.modules.chain import ChainClient
from xrpfi.modules.gateway import DestinationGateway


async def transfer(recipient: str, amount: Decimal) -> None:
    settings = get_settings()
    chain = ChainClient.from_settings(settings.flare)
    gateway = DestinationGateway(chain, settings.assets)
    try:
        tx_hash = await gateway.transfer_asset(recipient, amount)
    finally:
        await chain.close()
    print(f"Sent {amount} {settings.assets.symbol} to {recipient}")
    print(f"{settings.flare.explorer_url}/tx/{tx_hash}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)
    asyncio.run(transfer(sys.argv[1], Decimal(sys.argv[2])))
