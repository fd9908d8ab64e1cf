from dataclasses import dataclass
from enum import Enum


class BlockKind(Enum):
    """Main block kind; decides which region a click on the block resolves."""
    BASIC = "basic"
    BOMB = "bomb"
    STRIPE = "stripe"


class BlockColor(Enum):
    """Secondary tag compared between Basic blocks. Special blocks carry NONE."""
    NONE = 0
    COLOR_1 = 1
    COLOR_2 = 2
    COLOR_3 = 3
    COLOR_4 = 4
    COLOR_5 = 5
    COLOR_6 = 6

    @classmethod
    def basic_colors(cls) -> list["BlockColor"]:
        return [color for color in cls if color is not cls.NONE]


@dataclass(frozen=True, slots=True)
class Block:
    """Per-cell block value.

    Blocks are never mutated; refilling a cell swaps in a new Block component.
    Two blocks are the same type when both kind and color are equal.
    """
    kind: BlockKind
    color: BlockColor = BlockColor.NONE

    def __post_init__(self) -> None:
        if self.kind is BlockKind.BASIC and self.color is BlockColor.NONE:
            raise ValueError("Basic blocks need a color")
        if self.kind is not BlockKind.BASIC and self.color is not BlockColor.NONE:
            raise ValueError(f"{self.kind.name.title()} blocks cannot carry a color")

    @property
    def is_basic(self) -> bool:
        return self.kind is BlockKind.BASIC

    def same_type(self, other: "Block") -> bool:
        return self.kind is other.kind and self.color is other.color

    @classmethod
    def basic(cls, color: BlockColor | int) -> "Block":
        return cls(BlockKind.BASIC, BlockColor(color))

    @classmethod
    def bomb(cls) -> "Block":
        return cls(BlockKind.BOMB)

    @classmethod
    def stripe(cls) -> "Block":
        return cls(BlockKind.STRIPE)
