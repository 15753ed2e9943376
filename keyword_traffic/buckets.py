"""
Rank position classes.

Modeling buckets drive CTR lookup and projection targets. Reporting ranges
are coarser labels used only for the position distribution summary.
"""

from enum import Enum


class Bucket(Enum):
    TOP_3 = (1, 3)
    POS_4_6 = (4, 6)
    POS_7_10 = (7, 10)
    POS_11_20 = (11, 20)
    POS_21_PLUS = (21, None)

    @property
    def first(self) -> int:
        return self.value[0]

    @property
    def last(self):
        return self.value[1]

    def contains(self, position: int) -> bool:
        if position < self.first:
            return False
        return self.last is None or position <= self.last


BUCKET_LABELS = {
    Bucket.TOP_3: "Pos 1-3",
    Bucket.POS_4_6: "Pos 4-6",
    Bucket.POS_7_10: "Pos 7-10",
    Bucket.POS_11_20: "Pos 11-20",
    Bucket.POS_21_PLUS: "Pos 21+",
}

# Pos 21+ is never a projection target
TARGET_BUCKETS = (Bucket.TOP_3, Bucket.POS_4_6, Bucket.POS_7_10, Bucket.POS_11_20)

REPORTING_RANGES = ("1-3", "4-10", "11-20", "21-50", "50+")


# --- Position -> Bucket ---
def bucket_of(position: int) -> Bucket:
    if position <= 3:
        return Bucket.TOP_3
    elif position <= 6:
        return Bucket.POS_4_6
    elif position <= 10:
        return Bucket.POS_7_10
    elif position <= 20:
        return Bucket.POS_11_20
    else:
        return Bucket.POS_21_PLUS


# --- Position -> Reporting Range ---
def reporting_range(position: int) -> str:
    if position <= 3:
        return "1-3"
    elif position <= 10:
        return "4-10"
    elif position <= 20:
        return "11-20"
    elif position <= 50:
        return "21-50"
    else:
        return "50+"
