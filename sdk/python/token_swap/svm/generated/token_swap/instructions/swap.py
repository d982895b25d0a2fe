from __future__ import annotations
import typing
from solders.pubkey import Pubkey
from solders.instruction import Instruction, AccountMeta
from spl.token.constants import TOKEN_PROGRAM_ID
import borsh_construct as borsh
from ..program_id import PROGRAM_ID


class SwapArgs(typing.TypedDict):
    amount_in: int
    minimum_amount_out: int


layout = borsh.CStruct(
    "amount_in" / borsh.U64,
    "minimum_amount_out" / borsh.U64,
)


class SwapAccounts(typing.TypedDict):
    swap: Pubkey
    authority: Pubkey
    user_transfer_authority: Pubkey
    source: Pubkey
    swap_source: Pubkey
    swap_destination: Pubkey
    destination: Pubkey
    pool_mint: Pubkey
    pool_fee: Pubkey
    host_fee_account: typing.Optional[Pubkey]


identifier = b"\x01"


def swap(
    args: SwapArgs,
    accounts: SwapAccounts,
    program_id: Pubkey = PROGRAM_ID,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
    remaining_accounts: typing.Optional[typing.List[AccountMeta]] = None,
) -> Instruction:
    keys: list[AccountMeta] = [
        AccountMeta(pubkey=accounts["swap"], is_signer=False, is_writable=False),
        AccountMeta(pubkey=accounts["authority"], is_signer=False, is_writable=False),
        AccountMeta(
            pubkey=accounts["user_transfer_authority"],
            is_signer=True,
            is_writable=False,
        ),
        AccountMeta(pubkey=accounts["source"], is_signer=False, is_writable=True),
        AccountMeta(pubkey=accounts["swap_source"], is_signer=False, is_writable=True),
        AccountMeta(
            pubkey=accounts["swap_destination"], is_signer=False, is_writable=True
        ),
        AccountMeta(pubkey=accounts["destination"], is_signer=False, is_writable=True),
        AccountMeta(pubkey=accounts["pool_mint"], is_signer=False, is_writable=True),
        AccountMeta(pubkey=accounts["pool_fee"], is_signer=False, is_writable=True),
        AccountMeta(pubkey=token_program_id, is_signer=False, is_writable=False),
    ]
    if accounts["host_fee_account"] is not None:
        keys.append(
            AccountMeta(
                pubkey=accounts["host_fee_account"], is_signer=False, is_writable=True
            )
        )
    if remaining_accounts is not None:
        keys += remaining_accounts
    encoded_args = layout.build(
        {
            "amount_in": args["amount_in"],
            "minimum_amount_out": args["minimum_amount_out"],
        }
    )
    data = identifier + encoded_args
    return Instruction(program_id, data, keys)


def decode_swap_data(data: bytes) -> SwapArgs:
    if data[: len(identifier)] != identifier:
        raise ValueError("The identifier for this instruction is invalid")
    if len(data) != len(identifier) + layout.sizeof():
        raise ValueError("Invalid swap instruction data size")
    dec = layout.parse(data[len(identifier) :])
    return SwapArgs(
        amount_in=dec.amount_in,
        minimum_amount_out=dec.minimum_amount_out,
    )
