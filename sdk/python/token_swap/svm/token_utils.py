from typing import TypedDict

from solana.constants import SYSTEM_PROGRAM_ID
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from solders.sysvar import RENT
from spl.token._layouts import ACCOUNT_LAYOUT
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

TOKEN_ACCOUNT_LEN = ACCOUNT_LAYOUT.sizeof()


class TokenAccountState(TypedDict):
    mint: Pubkey
    owner: Pubkey
    amount: int
    is_native: bool


def get_ata(
    owner: Pubkey,
    token_mint_address: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Pubkey:
    ata, _ = Pubkey.find_program_address(
        seeds=[bytes(owner), bytes(token_program_id), bytes(token_mint_address)],
        program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    return ata


def create_associated_token_account(
    payer: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
    idempotent: bool = False,
) -> Instruction:
    """Creates a transaction instruction to create an associated token account.

    The plain version fails when the account already exists, the idempotent one
    leaves an existing account untouched.

    Returns:
        The instruction to create the associated token account.
    """
    associated_token_address = get_ata(owner, mint, token_program_id)
    return Instruction(
        accounts=[
            AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
            AccountMeta(
                pubkey=associated_token_address, is_signer=False, is_writable=True
            ),
            AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
            AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
            AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(pubkey=token_program_id, is_signer=False, is_writable=False),
            AccountMeta(pubkey=RENT, is_signer=False, is_writable=False),
        ],
        program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
        data=bytes([1]) if idempotent else bytes(),
    )


def create_token_account(
    from_pubkey: Pubkey,
    new_account: Pubkey,
    lamports: int,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Creates a transaction instruction allocating a token account owned by the token program.

    Returns:
        The system program instruction creating the account.
    """
    return create_account(
        CreateAccountParams(
            from_pubkey=from_pubkey,
            to_pubkey=new_account,
            lamports=lamports,
            space=TOKEN_ACCOUNT_LEN,
            owner=token_program_id,
        )
    )


def decode_token_account(data: bytes) -> TokenAccountState:
    if len(data) != TOKEN_ACCOUNT_LEN:
        raise ValueError("Invalid token account size")
    decoded = ACCOUNT_LAYOUT.parse(data)
    return {
        "mint": Pubkey.from_bytes(decoded.mint),
        "owner": Pubkey.from_bytes(decoded.owner),
        "amount": decoded.amount,
        "is_native": decoded.is_native_option == 1,
    }
