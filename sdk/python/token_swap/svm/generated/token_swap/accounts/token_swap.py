import typing
from dataclasses import dataclass, replace
from solders.pubkey import Pubkey
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
import borsh_construct as borsh
from anchorpy.borsh_extension import BorshPubkey
from ..program_id import PROGRAM_ID
from .. import types

SWAP_VERSION = 1


class TokenSwapJSON(typing.TypedDict):
    version: int
    is_initialized: bool
    bump_seed: int
    token_program_id: str
    token_account_a: str
    token_account_b: str
    token_pool: str
    mint_a: str
    mint_b: str
    fee_account: str
    fees: types.fees.FeesJSON
    swap_curve: types.swap_curve.SwapCurveJSON


@dataclass
class TokenSwap:
    layout: typing.ClassVar = borsh.CStruct(
        "version" / borsh.U8,
        "is_initialized" / borsh.Bool,
        "bump_seed" / borsh.U8,
        "token_program_id" / BorshPubkey,
        "token_account_a" / BorshPubkey,
        "token_account_b" / BorshPubkey,
        "token_pool" / BorshPubkey,
        "mint_a" / BorshPubkey,
        "mint_b" / BorshPubkey,
        "fee_account" / BorshPubkey,
        "fees" / types.fees.Fees.layout,
        "swap_curve" / types.swap_curve.SwapCurve.layout,
    )
    version: int
    is_initialized: bool
    bump_seed: int
    token_program_id: Pubkey
    token_account_a: Pubkey
    token_account_b: Pubkey
    token_pool: Pubkey
    mint_a: Pubkey
    mint_b: Pubkey
    fee_account: Pubkey
    fees: types.fees.Fees
    swap_curve: types.swap_curve.SwapCurve

    @classmethod
    def size(cls) -> int:
        return cls.layout.sizeof()

    @classmethod
    async def fetch(
        cls,
        conn: AsyncClient,
        address: Pubkey,
        commitment: typing.Optional[Commitment] = None,
        program_id: Pubkey = PROGRAM_ID,
    ) -> typing.Optional["TokenSwap"]:
        resp = await conn.get_account_info(address, commitment=commitment)
        info = resp.value
        if info is None:
            return None
        if info.owner != program_id:
            raise ValueError("Account does not belong to this program")
        bytes_data = info.data
        return cls.decode(bytes_data)

    @classmethod
    def decode(cls, data: bytes) -> "TokenSwap":
        if len(data) != cls.size():
            raise ValueError("Invalid token swap account size")
        if data[0] != SWAP_VERSION:
            raise ValueError(f"Unsupported token swap version: {data[0]}")
        dec = TokenSwap.layout.parse(data)
        return cls(
            version=dec.version,
            is_initialized=dec.is_initialized,
            bump_seed=dec.bump_seed,
            token_program_id=dec.token_program_id,
            token_account_a=dec.token_account_a,
            token_account_b=dec.token_account_b,
            token_pool=dec.token_pool,
            mint_a=dec.mint_a,
            mint_b=dec.mint_b,
            fee_account=dec.fee_account,
            fees=types.fees.Fees.from_decoded(dec.fees),
            swap_curve=types.swap_curve.SwapCurve.from_decoded(dec.swap_curve),
        )

    def encode(self) -> bytes:
        return self.layout.build(
            {
                "version": self.version,
                "is_initialized": self.is_initialized,
                "bump_seed": self.bump_seed,
                "token_program_id": self.token_program_id,
                "token_account_a": self.token_account_a,
                "token_account_b": self.token_account_b,
                "token_pool": self.token_pool,
                "mint_a": self.mint_a,
                "mint_b": self.mint_b,
                "fee_account": self.fee_account,
                "fees": self.fees.to_encodable(),
                "swap_curve": self.swap_curve.to_encodable(),
            }
        )

    def reversed(self) -> "TokenSwap":
        """Returns the same pool state seen from the opposite trade direction."""
        return replace(
            self,
            token_account_a=self.token_account_b,
            token_account_b=self.token_account_a,
            mint_a=self.mint_b,
            mint_b=self.mint_a,
        )

    def to_json(self) -> TokenSwapJSON:
        return {
            "version": self.version,
            "is_initialized": self.is_initialized,
            "bump_seed": self.bump_seed,
            "token_program_id": str(self.token_program_id),
            "token_account_a": str(self.token_account_a),
            "token_account_b": str(self.token_account_b),
            "token_pool": str(self.token_pool),
            "mint_a": str(self.mint_a),
            "mint_b": str(self.mint_b),
            "fee_account": str(self.fee_account),
            "fees": self.fees.to_json(),
            "swap_curve": self.swap_curve.to_json(),
        }

    @classmethod
    def from_json(cls, obj: TokenSwapJSON) -> "TokenSwap":
        return cls(
            version=obj["version"],
            is_initialized=obj["is_initialized"],
            bump_seed=obj["bump_seed"],
            token_program_id=Pubkey.from_string(obj["token_program_id"]),
            token_account_a=Pubkey.from_string(obj["token_account_a"]),
            token_account_b=Pubkey.from_string(obj["token_account_b"]),
            token_pool=Pubkey.from_string(obj["token_pool"]),
            mint_a=Pubkey.from_string(obj["mint_a"]),
            mint_b=Pubkey.from_string(obj["mint_b"]),
            fee_account=Pubkey.from_string(obj["fee_account"]),
            fees=types.fees.Fees.from_json(obj["fees"]),
            swap_curve=types.swap_curve.SwapCurve.from_json(obj["swap_curve"]),
        )
