from enum import auto

from courtside.utils.types import EnumAutoStr


class UserAccountType(EnumAutoStr):
    PLAYER = auto()
    COACH = auto()
    ADMIN = auto()
