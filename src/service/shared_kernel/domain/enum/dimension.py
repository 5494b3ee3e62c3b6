from enum import StrEnum


class Dimension(StrEnum):
    OVERWORLD = 'overworld'
    NETHER = 'nether'
    END = 'end'
