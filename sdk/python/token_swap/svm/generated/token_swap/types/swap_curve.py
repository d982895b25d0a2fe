from __future__ import annotations
import typing
from dataclasses import dataclass
from construct import Container
import borsh_construct as borsh

CONSTANT_PRODUCT = 0
CONSTANT_PRICE = 1
STABLE = 2
OFFSET = 3


class SwapCurveJSON(typing.TypedDict):
    curve_type: int
    calculator: list[int]


@dataclass
class SwapCurve:
    layout: typing.ClassVar = borsh.CStruct(
        "curve_type" / borsh.U8,
        "calculator" / borsh.U8[32],
    )
    curve_type: int
    calculator: list[int]

    @classmethod
    def from_decoded(cls, obj: Container) -> "SwapCurve":
        return cls(curve_type=obj.curve_type, calculator=list(obj.calculator))

    def to_encodable(self) -> dict[str, typing.Any]:
        return {"curve_type": self.curve_type, "calculator": self.calculator}

    def to_json(self) -> SwapCurveJSON:
        return {"curve_type": self.curve_type, "calculator": self.calculator}

    @classmethod
    def from_json(cls, obj: SwapCurveJSON) -> "SwapCurve":
        return cls(curve_type=obj["curve_type"], calculator=obj["calculator"])
