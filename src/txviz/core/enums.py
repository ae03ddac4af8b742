from enum import Enum


class HashType(str, Enum):
    DATA = "data"
    DATA1 = "data1"
    DATA2 = "data2"
    TYPE = "type"


class NodeKind(str, Enum):
    TX = "tx"
    CELL = "cell"


class Side(str, Enum):
    """Which half of the illustration a tree is drawn on."""

    INPUTS = "inputs"
    OUTPUTS = "outputs"
