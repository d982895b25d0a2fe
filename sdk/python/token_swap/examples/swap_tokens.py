import argparse
import asyncio
import json

from solana.rpc.async_api import AsyncClient
from solders.pubkey import Pubkey
from token_swap.client import FeeRelayerClient
from token_swap.constants import SWAP_CONFIGS
from token_swap.helpers import configure_logger, load_keypair
from token_swap.models.base import TokenSwapClientException
from token_swap.svm.token_swap_client import TokenSwapClient


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--private-key",
        type=str,
        help="Private key of the wallet in base58 format",
    )
    group.add_argument(
        "--private-key-json-file",
        type=str,
        help="Path to a json file containing the private key of the wallet in array of bytes format",
    )
    parser.add_argument(
        "--network",
        type=str,
        default="mainnet-beta",
        choices=SWAP_CONFIGS.keys(),
        help="Network whose token swap program to use",
    )
    parser.add_argument(
        "--endpoint-svm",
        type=str,
        required=True,
        help="RPC endpoint to read accounts from and send transactions to",
    )
    parser.add_argument(
        "--endpoint-fee-relayer",
        type=str,
        required=False,
        help="Fee relayer endpoint paying the transaction fees, if any",
    )
    parser.add_argument(
        "--list-pools",
        action="store_true",
        help="Print the pools of the token swap program and exit",
    )
    parser.add_argument(
        "--source", type=str, help="Token account or wallet to spend from"
    )
    parser.add_argument("--source-mint", type=str, help="Mint of the token to sell")
    parser.add_argument(
        "--destination-mint", type=str, help="Mint of the token to buy"
    )
    parser.add_argument(
        "--destination",
        type=str,
        required=False,
        help="Token account to receive into, defaults to the associated token account",
    )
    parser.add_argument(
        "--pool",
        type=str,
        required=False,
        help="Address of the pool to swap through",
    )
    parser.add_argument(
        "--amount",
        type=int,
        help="Amount of source token to swap, in base units",
    )
    parser.add_argument(
        "--slippage",
        type=float,
        default=0.01,
        help="Tolerated fraction of the expected output to lose",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Simulate the transaction instead of sending it",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


async def main():
    parser = get_parser()
    args = parser.parse_args()
    logger = configure_logger(args.verbose)

    keypair = load_keypair(args.private_key, args.private_key_json_file)
    logger.info("Using wallet pubkey: %s", keypair.pubkey())

    rpc_client = AsyncClient(args.endpoint_svm)
    client = TokenSwapClient(rpc_client, args.network, keypair)

    if args.list_pools:
        for pool in await client.get_swap_pools():
            print(
                json.dumps(
                    {"address": str(pool.address), **pool.swap_data.to_json()},
                    indent=2,
                )
            )
        return

    if (
        args.source is None
        or args.source_mint is None
        or args.destination_mint is None
        or args.amount is None
    ):
        parser.error(
            "--source, --source-mint, --destination-mint and --amount are required to swap"
        )

    pool = None
    if args.pool:
        pool = await client.get_pool(Pubkey.from_string(args.pool))

    proxy = None
    if args.endpoint_fee_relayer:
        proxy = FeeRelayerClient(args.endpoint_fee_relayer)

    try:
        response = await client.swap(
            source=Pubkey.from_string(args.source),
            source_mint=Pubkey.from_string(args.source_mint),
            destination_mint=Pubkey.from_string(args.destination_mint),
            slippage=args.slippage,
            amount=args.amount,
            pool=pool,
            destination=(
                Pubkey.from_string(args.destination) if args.destination else None
            ),
            is_simulation=args.simulate,
            custom_proxy=proxy,
        )
    except TokenSwapClientException as e:
        logger.error("Swap failed: %s", e)
        raise SystemExit(1)

    logger.info("Swap transaction: %s", response.transaction_id)
    if response.new_wallet_pubkey:
        logger.info("Created token account %s", response.new_wallet_pubkey)


if __name__ == "__main__":
    asyncio.run(main())
