from __future__ import annotations
import typing
from dataclasses import dataclass
from construct import Container
import borsh_construct as borsh


class FeesJSON(typing.TypedDict):
    trade_fee_numerator: int
    trade_fee_denominator: int
    owner_trade_fee_numerator: int
    owner_trade_fee_denominator: int
    owner_withdraw_fee_numerator: int
    owner_withdraw_fee_denominator: int
    host_fee_numerator: int
    host_fee_denominator: int


@dataclass
class Fees:
    layout: typing.ClassVar = borsh.CStruct(
        "trade_fee_numerator" / borsh.U64,
        "trade_fee_denominator" / borsh.U64,
        "owner_trade_fee_numerator" / borsh.U64,
        "owner_trade_fee_denominator" / borsh.U64,
        "owner_withdraw_fee_numerator" / borsh.U64,
        "owner_withdraw_fee_denominator" / borsh.U64,
        "host_fee_numerator" / borsh.U64,
        "host_fee_denominator" / borsh.U64,
    )
    trade_fee_numerator: int
    trade_fee_denominator: int
    owner_trade_fee_numerator: int
    owner_trade_fee_denominator: int
    owner_withdraw_fee_numerator: int
    owner_withdraw_fee_denominator: int
    host_fee_numerator: int
    host_fee_denominator: int

    @classmethod
    def from_decoded(cls, obj: Container) -> "Fees":
        return cls(
            trade_fee_numerator=obj.trade_fee_numerator,
            trade_fee_denominator=obj.trade_fee_denominator,
            owner_trade_fee_numerator=obj.owner_trade_fee_numerator,
            owner_trade_fee_denominator=obj.owner_trade_fee_denominator,
            owner_withdraw_fee_numerator=obj.owner_withdraw_fee_numerator,
            owner_withdraw_fee_denominator=obj.owner_withdraw_fee_denominator,
            host_fee_numerator=obj.host_fee_numerator,
            host_fee_denominator=obj.host_fee_denominator,
        )

    def to_encodable(self) -> dict[str, typing.Any]:
        return {
            "trade_fee_numerator": self.trade_fee_numerator,
            "trade_fee_denominator": self.trade_fee_denominator,
            "owner_trade_fee_numerator": self.owner_trade_fee_numerator,
            "owner_trade_fee_denominator": self.owner_trade_fee_denominator,
            "owner_withdraw_fee_numerator": self.owner_withdraw_fee_numerator,
            "owner_withdraw_fee_denominator": self.owner_withdraw_fee_denominator,
            "host_fee_numerator": self.host_fee_numerator,
            "host_fee_denominator": self.host_fee_denominator,
        }

    def to_json(self) -> FeesJSON:
        return {
            "trade_fee_numerator": self.trade_fee_numerator,
            "trade_fee_denominator": self.trade_fee_denominator,
            "owner_trade_fee_numerator": self.owner_trade_fee_numerator,
            "owner_trade_fee_denominator": self.owner_trade_fee_denominator,
            "owner_withdraw_fee_numerator": self.owner_withdraw_fee_numerator,
            "owner_withdraw_fee_denominator": self.owner_withdraw_fee_denominator,
            "host_fee_numerator": self.host_fee_numerator,
            "host_fee_denominator": self.host_fee_denominator,
        }

    @classmethod
    def from_json(cls, obj: FeesJSON) -> "Fees":
        return cls(
            trade_fee_numerator=obj["trade_fee_numerator"],
            trade_fee_denominator=obj["trade_fee_denominator"],
            owner_trade_fee_numerator=obj["owner_trade_fee_numerator"],
            owner_trade_fee_denominator=obj["owner_trade_fee_denominator"],
            owner_withdraw_fee_numerator=obj["owner_withdraw_fee_numerator"],
            owner_withdraw_fee_denominator=obj["owner_withdraw_fee_denominator"],
            host_fee_numerator=obj["host_fee_numerator"],
            host_fee_denominator=obj["host_fee_denominator"],
        )
