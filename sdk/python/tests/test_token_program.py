import pytest
from construct import ConstructError
from solana.constants import SYSTEM_PROGRAM_ID
from solders.pubkey import Pubkey
from solders.sysvar import RENT
from spl.token.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    WRAPPED_SOL_MINT,
)
from token_swap.svm import token_program
from token_swap.svm.token_utils import (
    TOKEN_ACCOUNT_LEN,
    create_associated_token_account,
    create_token_account,
    decode_token_account,
    get_ata,
)

from fakes import token_account_data


def roles(instruction):
    return [(m.pubkey, m.is_signer, m.is_writable) for m in instruction.accounts]


def test_initialize_mint_layout():
    mint, authority, freeze = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()

    ix = token_program.initialize_mint(mint, 6, authority, freeze)

    assert ix.program_id == TOKEN_PROGRAM_ID
    assert ix.data == bytes([0, 6]) + bytes(authority) + bytes([1]) + bytes(freeze)
    assert roles(ix) == [(mint, False, True), (RENT, False, False)]


def test_initialize_mint_without_freeze_authority_zero_fills():
    authority = Pubkey.new_unique()

    ix = token_program.initialize_mint(Pubkey.new_unique(), 9, authority)

    assert len(ix.data) == 67
    assert ix.data[34] == 0
    assert ix.data[35:] == bytes(32)


def test_initialize_account():
    account, mint, owner = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()

    ix = token_program.initialize_account(account, mint, owner)

    assert ix.data == bytes([1])
    assert roles(ix) == [
        (account, False, True),
        (mint, False, False),
        (owner, False, False),
        (RENT, False, False),
    ]


@pytest.mark.parametrize(
    "build, opcode",
    [
        (token_program.transfer, 3),
        (token_program.approve, 4),
        (token_program.mint_to, 7),
    ],
)
def test_amount_instructions(build, opcode):
    first, second, signer = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()

    ix = build(first, second, signer, 1_000_000_007)

    assert ix.data == bytes([opcode]) + (1_000_000_007).to_bytes(8, "little")
    assert roles(ix)[-1] == (signer, True, True)
    assert roles(ix)[0] == (first, False, True)


def test_approve_delegate_is_read_only():
    account, delegate, owner = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()

    ix = token_program.approve(account, delegate, owner, 10)

    assert roles(ix) == [
        (account, False, True),
        (delegate, False, False),
        (owner, True, True),
    ]


def test_close_account_owner_is_not_a_signer():
    account, destination, owner = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()

    ix = token_program.close_account(account, destination, owner)

    assert ix.data == bytes([9])
    assert roles(ix) == [
        (account, False, True),
        (destination, False, True),
        (owner, False, False),
    ]


def test_amount_out_of_range_is_rejected():
    with pytest.raises(ConstructError):
        token_program.transfer(
            Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique(), 2**64
        )


def test_decode_token_instruction():
    authority = Pubkey.new_unique()
    mint_ix = token_program.initialize_mint(Pubkey.new_unique(), 6, authority)
    approve_ix = token_program.approve(
        Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique(), 42
    )

    decoded_mint = token_program.decode_token_instruction(mint_ix.data)
    decoded_approve = token_program.decode_token_instruction(approve_ix.data)
    decoded_close = token_program.decode_token_instruction(bytes([9]))

    assert decoded_mint["instruction"] == token_program.Index.INITIALIZE_MINT
    assert decoded_mint["decimals"] == 6
    assert decoded_mint["mint_authority"] == authority
    assert decoded_mint["freeze_authority_option"] == 0
    assert decoded_approve == {"instruction": token_program.Index.APPROVE, "amount": 42}
    assert decoded_close == {"instruction": token_program.Index.CLOSE_ACCOUNT}


def test_decode_token_instruction_rejects_unknown_data():
    with pytest.raises(ValueError):
        token_program.decode_token_instruction(bytes([2]))
    with pytest.raises(ValueError):
        token_program.decode_token_instruction(bytes([3, 1, 2]))


def test_create_associated_token_account():
    payer, owner = Pubkey.new_unique(), Pubkey.new_unique()
    ata = get_ata(owner, WRAPPED_SOL_MINT)

    ix = create_associated_token_account(payer, owner, WRAPPED_SOL_MINT)
    idempotent_ix = create_associated_token_account(
        payer, owner, WRAPPED_SOL_MINT, idempotent=True
    )

    assert ix.program_id == ASSOCIATED_TOKEN_PROGRAM_ID
    assert ix.data == b""
    assert idempotent_ix.data == bytes([1])
    assert roles(ix) == [
        (payer, True, True),
        (ata, False, True),
        (owner, False, False),
        (WRAPPED_SOL_MINT, False, False),
        (SYSTEM_PROGRAM_ID, False, False),
        (TOKEN_PROGRAM_ID, False, False),
        (RENT, False, False),
    ]


def test_create_token_account():
    payer, new_account = Pubkey.new_unique(), Pubkey.new_unique()

    ix = create_token_account(payer, new_account, 5_000)

    assert TOKEN_ACCOUNT_LEN == 165
    assert ix.program_id == SYSTEM_PROGRAM_ID
    # system create_account: u32 index, u64 lamports, u64 space, owner
    assert ix.data[:4] == (0).to_bytes(4, "little")
    assert ix.data[4:12] == (5_000).to_bytes(8, "little")
    assert ix.data[12:20] == (165).to_bytes(8, "little")
    assert ix.data[20:] == bytes(TOKEN_PROGRAM_ID)
    assert roles(ix) == [(payer, True, True), (new_account, True, True)]


def test_decode_token_account():
    mint, owner = Pubkey.new_unique(), Pubkey.new_unique()

    state = decode_token_account(token_account_data(mint, owner, 77, is_native=True))

    assert state == {"mint": mint, "owner": owner, "amount": 77, "is_native": True}
    with pytest.raises(ValueError):
        decode_token_account(bytes(10))
