from typing import Dict, TypedDict

from solders.pubkey import Pubkey

SWAP_PROGRAM_ID = Pubkey.from_string("SwaPpA9LAaLfeLi3a68M4DjnLqgtticKg6CnyNwgAC8")


class SwapProgramConfig(TypedDict):
    swap_program: Pubkey


SWAP_CONFIGS: Dict[str, SwapProgramConfig] = {
    "local-solana": {
        "swap_program": SWAP_PROGRAM_ID,
    },
    "devnet": {
        "swap_program": SWAP_PROGRAM_ID,
    },
    "testnet": {
        "swap_program": SWAP_PROGRAM_ID,
    },
    "mainnet-beta": {
        "swap_program": SWAP_PROGRAM_ID,
    },
}

# slippage the fee relayer accepts on its compensation swap
RELAY_SLIPPAGE = 0.01
# extra signatures paid by the relayer: its own and the user authority
RELAY_SIGNATURE_ALLOWANCE = 2
