"""Token program instructions used around a swap.

Each instruction's data is the one-byte instruction index followed by its
fixed-width little-endian arguments. Optional keys are encoded as a one-byte
presence flag followed by 32 bytes, zero-filled when absent.
"""
from typing import Any, Dict

import borsh_construct as borsh
from anchorpy.borsh_extension import BorshPubkey
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.sysvar import RENT
from spl.token.constants import TOKEN_PROGRAM_ID


class Index:
    INITIALIZE_MINT = 0
    INITIALIZE_ACCOUNT = 1
    TRANSFER = 3
    APPROVE = 4
    MINT_TO = 7
    CLOSE_ACCOUNT = 9


INITIALIZE_MINT_LAYOUT = borsh.CStruct(
    "decimals" / borsh.U8,
    "mint_authority" / BorshPubkey,
    "freeze_authority_option" / borsh.U8,
    "freeze_authority" / BorshPubkey,
)
AMOUNT_LAYOUT = borsh.CStruct("amount" / borsh.U64)
NO_ARGS_LAYOUT = borsh.CStruct()

LAYOUTS = {
    Index.INITIALIZE_MINT: INITIALIZE_MINT_LAYOUT,
    Index.INITIALIZE_ACCOUNT: NO_ARGS_LAYOUT,
    Index.TRANSFER: AMOUNT_LAYOUT,
    Index.APPROVE: AMOUNT_LAYOUT,
    Index.MINT_TO: AMOUNT_LAYOUT,
    Index.CLOSE_ACCOUNT: NO_ARGS_LAYOUT,
}


def _encode(index: int, args: Dict[str, Any]) -> bytes:
    return bytes([index]) + LAYOUTS[index].build(args)


def initialize_mint(
    mint: Pubkey,
    decimals: int,
    authority: Pubkey,
    freeze_authority: Pubkey | None = None,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    data = _encode(
        Index.INITIALIZE_MINT,
        {
            "decimals": decimals,
            "mint_authority": authority,
            "freeze_authority_option": 0 if freeze_authority is None else 1,
            "freeze_authority": freeze_authority or Pubkey.default(),
        },
    )
    return Instruction(
        program_id,
        data,
        [
            AccountMeta(pubkey=mint, is_signer=False, is_writable=True),
            AccountMeta(pubkey=RENT, is_signer=False, is_writable=False),
        ],
    )


def initialize_account(
    account: Pubkey,
    mint: Pubkey,
    owner: Pubkey,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    return Instruction(
        program_id,
        _encode(Index.INITIALIZE_ACCOUNT, {}),
        [
            AccountMeta(pubkey=account, is_signer=False, is_writable=True),
            AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
            AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
            AccountMeta(pubkey=RENT, is_signer=False, is_writable=False),
        ],
    )


def transfer(
    source: Pubkey,
    destination: Pubkey,
    owner: Pubkey,
    amount: int,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    return Instruction(
        program_id,
        _encode(Index.TRANSFER, {"amount": amount}),
        [
            AccountMeta(pubkey=source, is_signer=False, is_writable=True),
            AccountMeta(pubkey=destination, is_signer=False, is_writable=True),
            AccountMeta(pubkey=owner, is_signer=True, is_writable=True),
        ],
    )


def approve(
    account: Pubkey,
    delegate: Pubkey,
    owner: Pubkey,
    amount: int,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    return Instruction(
        program_id,
        _encode(Index.APPROVE, {"amount": amount}),
        [
            AccountMeta(pubkey=account, is_signer=False, is_writable=True),
            AccountMeta(pubkey=delegate, is_signer=False, is_writable=False),
            AccountMeta(pubkey=owner, is_signer=True, is_writable=True),
        ],
    )


def mint_to(
    mint: Pubkey,
    destination: Pubkey,
    authority: Pubkey,
    amount: int,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    return Instruction(
        program_id,
        _encode(Index.MINT_TO, {"amount": amount}),
        [
            AccountMeta(pubkey=mint, is_signer=False, is_writable=True),
            AccountMeta(pubkey=destination, is_signer=False, is_writable=True),
            AccountMeta(pubkey=authority, is_signer=True, is_writable=True),
        ],
    )


def close_account(
    account: Pubkey,
    destination: Pubkey,
    owner: Pubkey,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    return Instruction(
        program_id,
        _encode(Index.CLOSE_ACCOUNT, {}),
        [
            AccountMeta(pubkey=account, is_signer=False, is_writable=True),
            AccountMeta(pubkey=destination, is_signer=False, is_writable=True),
            AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
        ],
    )


def decode_token_instruction(data: bytes) -> Dict[str, Any]:
    """
    Decodes the data of a token program instruction built by this module.

    Args:
        data: The instruction data, starting with the instruction index.
    Returns:
        The instruction index under "instruction" together with its decoded arguments.
    """
    if len(data) == 0 or data[0] not in LAYOUTS:
        raise ValueError("Unsupported token instruction")
    layout = LAYOUTS[data[0]]
    if len(data) != 1 + layout.sizeof():
        raise ValueError("Invalid token instruction data size")
    decoded = {
        key: value
        for key, value in layout.parse(data[1:]).items()
        if not key.startswith("_")
    }
    return {"instruction": data[0], **decoded}
