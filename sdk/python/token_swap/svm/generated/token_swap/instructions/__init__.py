from .swap import swap, decode_swap_data, SwapArgs, SwapAccounts
