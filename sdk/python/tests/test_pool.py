import pytest
from solders.pubkey import Pubkey
from token_swap.svm.pool import (
    MAX_U64,
    Pool,
    estimated_amount,
    get_pool_authority,
    matched_pool,
    minimum_receive_amount,
    required_input_amount,
)

from fakes import SWAP_PROGRAM_ID, make_swap_state


def make_pool(
    token_a_balance=1_000_000,
    token_b_balance=2_000_000,
    mint_a=None,
    mint_b=None,
    **kwargs,
) -> Pool:
    address = Pubkey.new_unique()
    authority, bump_seed = Pubkey.find_program_address(
        [bytes(address)], SWAP_PROGRAM_ID
    )
    return Pool(
        address=address,
        swap_program=SWAP_PROGRAM_ID,
        swap_data=make_swap_state(
            mint_a or Pubkey.new_unique(),
            mint_b or Pubkey.new_unique(),
            bump_seed,
            **kwargs,
        ),
        authority=authority,
        token_a_balance=token_a_balance,
        token_b_balance=token_b_balance,
    )


def test_estimated_amount_constant_product():
    pool = make_pool(1_000_000, 2_000_000)

    # 2_000_000 * 10_000 * 9_975 / (1_010_000 * 10_000)
    assert estimated_amount(pool, 10_000, include_fees=True) == 19752
    # 2_000_000 * 10_000 / 1_010_000
    assert estimated_amount(pool, 10_000, include_fees=False) == 19801


def test_minimum_receive_amount_applies_slippage():
    pool = make_pool(1_000_000, 2_000_000)

    assert minimum_receive_amount(pool, 10_000, 0.01, include_fees=True) == 19554
    assert minimum_receive_amount(pool, 10_000, 0, include_fees=True) == 19752


def test_minimum_receive_amount_is_non_increasing_in_slippage():
    pool = make_pool()

    amounts = [
        minimum_receive_amount(pool, 50_000, slippage, include_fees=True)
        for slippage in (0, 0.001, 0.01, 0.05, 0.5, 1)
    ]

    assert amounts == sorted(amounts, reverse=True)
    assert amounts[-1] == 0


def test_minimum_receive_amount_is_non_decreasing_in_input():
    pool = make_pool()

    amounts = [
        minimum_receive_amount(pool, amount, 0.01, include_fees=True)
        for amount in (0, 1, 100, 10_000, 1_000_000, 10**9)
    ]

    assert amounts == sorted(amounts)
    assert amounts[-1] < pool.token_b_balance


@pytest.mark.parametrize(
    "token_a_balance, token_b_balance", [(0, 100), (100, 0), (None, 100)]
)
def test_no_quote_without_reserves(token_a_balance, token_b_balance):
    pool = make_pool(token_a_balance, token_b_balance)

    assert estimated_amount(pool, 10, include_fees=True) is None
    assert minimum_receive_amount(pool, 10, 0.01, include_fees=True) is None


def test_no_quote_without_authority():
    pool = make_pool()
    pool = Pool(
        address=pool.address,
        swap_program=pool.swap_program,
        swap_data=pool.swap_data,
        token_a_balance=pool.token_a_balance,
        token_b_balance=pool.token_b_balance,
    )

    assert estimated_amount(pool, 10, include_fees=True) is not None
    assert minimum_receive_amount(pool, 10, 0.01, include_fees=True) is None


def test_no_quote_with_zero_fee_denominator():
    pool = make_pool(trade_fee_numerator=0, trade_fee_denominator=0)

    assert minimum_receive_amount(pool, 10, 0.01, include_fees=False) is None


def test_no_quote_above_u64():
    pool = make_pool(1, MAX_U64 * 4)

    assert minimum_receive_amount(pool, MAX_U64, 0, include_fees=False) is None


def test_minimum_receive_amount_is_exact_for_large_reserves():
    expected = 2**53 + 3
    pool = make_pool(1, 2 * expected, trade_fee_numerator=0)

    assert estimated_amount(pool, 1, include_fees=False) == expected
    assert minimum_receive_amount(pool, 1, 0.0, include_fees=False) == expected
    assert (
        minimum_receive_amount(pool, 1, 0.01, include_fees=False)
        == expected * 99 // 100
    )


@pytest.mark.parametrize("output_amount", [1, 19_752, 19_801, 500_000, 1_900_000])
def test_required_input_amount_is_smallest_sufficient_input(output_amount):
    pool = make_pool(1_000_000, 2_000_000)

    required = required_input_amount(pool, output_amount, include_fees=True)

    assert estimated_amount(pool, required, include_fees=True) >= output_amount
    assert estimated_amount(pool, required - 1, include_fees=True) < output_amount


def test_required_input_amount_without_fees():
    pool = make_pool(1_000_000, 2_000_000)

    # 19_801 * 1_000_000 / (2_000_000 - 19_801), rounded up
    assert required_input_amount(pool, 19_801, include_fees=False) == 10_000


@pytest.mark.parametrize("output_amount", [1_995_000, 2_000_000, 3_000_000])
def test_required_input_amount_beyond_reserve(output_amount):
    pool = make_pool(1_000_000, 2_000_000)

    assert required_input_amount(pool, output_amount, include_fees=True) is None


def test_required_input_amount_without_reserves():
    pool = make_pool(0, 2_000_000)

    assert required_input_amount(pool, 10, include_fees=True) is None


def test_pool_authority():
    address = Pubkey.new_unique()
    authority, bump_seed = Pubkey.find_program_address(
        [bytes(address)], SWAP_PROGRAM_ID
    )

    assert get_pool_authority(address, bump_seed, SWAP_PROGRAM_ID) == authority


def test_pool_authority_on_curve_is_none():
    address = Pubkey.new_unique()
    bumps = [
        get_pool_authority(address, bump_seed, SWAP_PROGRAM_ID)
        for bump_seed in range(256)
    ]

    # roughly half of the seeds land on the curve
    assert None in bumps


def test_matched_pool_orientation():
    mint_a, mint_b, mint_c = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()
    pool = make_pool(100, 200, mint_a=mint_a, mint_b=mint_b)

    forward = matched_pool([pool], mint_a, mint_b)
    backward = matched_pool([pool], mint_b, mint_a)

    assert forward == pool
    assert backward.swap_data.mint_a == mint_b
    assert backward.swap_data.token_account_a == pool.swap_data.token_account_b
    assert backward.token_a_balance == 200
    assert backward.token_b_balance == 100
    assert backward.authority == pool.authority
    assert matched_pool([pool], mint_a, mint_c) is None


def test_to_svm_model():
    pool = make_pool()

    model = pool.to_svm_model()

    assert model.address == pool.address
    assert model.authority == pool.authority
    assert model.pool_mint == pool.swap_data.token_pool
    assert model.model_dump(mode="json")["mint_a"] == str(pool.swap_data.mint_a)
