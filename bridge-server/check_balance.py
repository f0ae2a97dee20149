"""
Check balances of a destination-chain address
Usage: python check_balance.py <0x address | XRPL address>
"""
import asyncio
import sys

from xrpfi.core.config import get_settings
from xrpfi.modules.addresses import derive_destination_address, is_valid_xrpl_address
from xrpfi.modules.chain import ChainClient
from xrpfi.modules.gateway import DestinationGateway


async def check_balance(address: str) -> None:
    settings = get_settings()
    if is_valid_xrpl_address(address):
        address = derive_destination_address(address)

    chain = ChainClient.from_settings(settings.flare)
    gateway = DestinationGateway(chain, settings.assets)
    try:
        native = await chain.get_native_balance(address)
        holdings = await gateway.get_holdings(address)
    finally:
        await chain.close()

    print("=" * 60)
    print(f"Wallet: {address}")
    print(f"Explorer: {settings.flare.explorer_url}/address/{address}")
    print(f"Native: {native / 10**18:.6f}")
    if gateway.asset_configured:
        print(f"{settings.assets.symbol}: {holdings.asset_balance:.6f}")
    else:
        print(f"{settings.assets.symbol}: token address not configured")
    for key, position in holdings.positions.items():
        print(f"{key}: {position.shares:.6f} shares = {position.assets_value:.6f} {settings.assets.symbol}")
    print("=" * 60)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(check_balance(sys.argv[1]))
