import math
from dataclasses import dataclass, replace
from fractions import Fraction
from typing import List, Optional

from solders.pubkey import Pubkey
from token_swap.models.svm import SwapPoolSvm
from token_swap.svm.generated.token_swap.accounts import TokenSwap

MAX_U64 = 2**64 - 1


@dataclass(frozen=True)
class Pool:
    """
    Attributes:
        address: The address of the token swap state account.
        swap_program: The token swap program which owns the pool.
        swap_data: The decoded pool state, oriented so that side A is the input side.
        authority: The pool authority, None if it could not be derived.
        token_a_balance: The reserve of the input side, None until loaded.
        token_b_balance: The reserve of the output side, None until loaded.
    """

    address: Pubkey
    swap_program: Pubkey
    swap_data: TokenSwap
    authority: Optional[Pubkey] = None
    token_a_balance: Optional[int] = None
    token_b_balance: Optional[int] = None

    def reversed(self) -> "Pool":
        return replace(
            self,
            swap_data=self.swap_data.reversed(),
            token_a_balance=self.token_b_balance,
            token_b_balance=self.token_a_balance,
        )

    def with_balances(self, token_a_balance: int, token_b_balance: int) -> "Pool":
        return replace(
            self, token_a_balance=token_a_balance, token_b_balance=token_b_balance
        )

    def to_svm_model(self) -> SwapPoolSvm:
        if self.authority is None:
            raise ValueError("Pool authority is not available")
        return SwapPoolSvm(
            address=self.address,
            swap_program=self.swap_program,
            authority=self.authority,
            token_account_a=self.swap_data.token_account_a,
            token_account_b=self.swap_data.token_account_b,
            mint_a=self.swap_data.mint_a,
            mint_b=self.swap_data.mint_b,
            pool_mint=self.swap_data.token_pool,
            fee_account=self.swap_data.fee_account,
        )


def get_pool_authority(
    pool_address: Pubkey, bump_seed: int, swap_program: Pubkey
) -> Optional[Pubkey]:
    try:
        return Pubkey.create_program_address(
            [bytes(pool_address), bytes([bump_seed])], swap_program
        )
    except ValueError:
        # the bump seed puts the address on the curve
        return None


def matched_pool(
    pools: List[Pool], source_mint: Pubkey, destination_mint: Pubkey
) -> Optional[Pool]:
    """
    Finds the pool trading a mint pair, in either orientation.

    Args:
        pools: The candidate pools.
        source_mint: The mint the user sells.
        destination_mint: The mint the user buys.
    Returns:
        The first matching pool, oriented so that side A is the source mint.
    """
    for pool in pools:
        swap_data = pool.swap_data
        if swap_data.mint_a == source_mint and swap_data.mint_b == destination_mint:
            return pool
        if swap_data.mint_b == source_mint and swap_data.mint_a == destination_mint:
            return pool.reversed()
    return None


def estimated_amount(
    pool: Pool, input_amount: int, include_fees: bool
) -> Optional[int]:
    """
    Expected output of the constant product curve for an input amount.

    Args:
        pool: The pool, with reserve balances loaded.
        input_amount: The amount of side A token to swap.
        include_fees: Whether to deduct the trade fee from the output.
    Returns:
        The expected amount of side B token, None if the pool cannot quote.
    """
    if not pool.token_a_balance or not pool.token_b_balance:
        return None
    fees = pool.swap_data.fees
    denominator_fee = fees.trade_fee_denominator
    if denominator_fee == 0:
        return None
    numerator_fee = fees.trade_fee_numerator if include_fees else 0

    numerator = pool.token_b_balance * input_amount * (denominator_fee - numerator_fee)
    denominator = (pool.token_a_balance + input_amount) * denominator_fee
    if denominator == 0:
        return None
    return numerator // denominator


def minimum_receive_amount(
    pool: Pool, input_amount: int, slippage: float, include_fees: bool
) -> Optional[int]:
    """
    Minimum output to accept for a swap given a slippage tolerance.

    Args:
        pool: The pool, with reserve balances loaded.
        input_amount: The amount of side A token to swap.
        slippage: The tolerated fraction of the expected output to lose, e.g. 0.01.
        include_fees: Whether to deduct the trade fee from the expected output.
    Returns:
        floor(expected * (1 - slippage)), None if the pool is not usable or the
        amount does not fit a u64.
    """
    if pool.authority is None:
        return None
    expected = estimated_amount(pool, input_amount, include_fees)
    if expected is None:
        return None
    minimum = math.floor(expected * (1 - Fraction(str(slippage))))
    if minimum < 0 or minimum > MAX_U64:
        return None
    return minimum


def required_input_amount(
    pool: Pool, output_amount: int, include_fees: bool
) -> Optional[int]:
    """
    Smallest input whose expected output, before rounding, reaches output_amount.

    Args:
        pool: The pool, with reserve balances loaded.
        output_amount: The amount of side B token to receive.
        include_fees: Whether the trade fee is deducted from the output.
    Returns:
        The amount of side A token to swap, None if the pool cannot deliver
        output_amount or the input does not fit a u64.
    """
    if not pool.token_a_balance or not pool.token_b_balance:
        return None
    fees = pool.swap_data.fees
    denominator_fee = fees.trade_fee_denominator
    if denominator_fee == 0:
        return None
    numerator_fee = fees.trade_fee_numerator if include_fees else 0

    # b * i * (d - n) >= out * (a + i) * d
    denominator = (
        pool.token_b_balance * (denominator_fee - numerator_fee)
        - output_amount * denominator_fee
    )
    if denominator <= 0:
        return None
    numerator = output_amount * pool.token_a_balance * denominator_fee
    required = -(-numerator // denominator)
    if required > MAX_U64:
        return None
    return required
