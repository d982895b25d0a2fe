from .token_swap import TokenSwap
