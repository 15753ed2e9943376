"""
Click-through-rate tables.

Two interchangeable variants are supported:

- ``BucketCtrTable`` holds one CTR per position bucket (the default model).
- ``PositionCtrTable`` holds one CTR per discrete position 1-20; anything
  beyond 20 is treated as the "21+" value.

All CTR values are percentages (28.5 means 28.5%). Tables are immutable;
``with_ctr`` returns an updated copy.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Union

from .buckets import Bucket, bucket_of

# Empirical organic CTR by position (percent)
POSITION_CTR_SERIES = {
    1: 28.5,
    2: 15.7,
    3: 11.0,
    4: 8.0,
    5: 6.1,
    6: 4.8,
    7: 3.8,
    8: 3.0,
    9: 2.5,
    10: 2.1,
    11: 1.8,
    12: 1.5,
    13: 1.3,
    14: 1.1,
    15: 1.0,
    16: 0.9,
    17: 0.8,
    18: 0.7,
    19: 0.6,
    20: 0.5,
}

BEYOND_20_CTR = 0.1


def _mean(values):
    values = list(values)
    return sum(values) / len(values)


DEFAULT_BUCKET_CTR: Dict[Bucket, float] = {
    Bucket.TOP_3: _mean(POSITION_CTR_SERIES[p] for p in range(1, 4)),
    Bucket.POS_4_6: _mean(POSITION_CTR_SERIES[p] for p in range(4, 7)),
    Bucket.POS_7_10: _mean(POSITION_CTR_SERIES[p] for p in range(7, 11)),
    Bucket.POS_11_20: _mean(POSITION_CTR_SERIES[p] for p in range(11, 21)),
    Bucket.POS_21_PLUS: BEYOND_20_CTR,
}


@dataclass(frozen=True)
class BucketCtrTable:
    values: Mapping[Bucket, float] = field(default_factory=lambda: dict(DEFAULT_BUCKET_CTR))

    def base_ctr(self, target: Union[Bucket, int]) -> float:
        bucket = target if isinstance(target, Bucket) else bucket_of(target)
        if bucket in self.values:
            return self.values[bucket]
        return DEFAULT_BUCKET_CTR.get(bucket, BEYOND_20_CTR)

    def with_ctr(self, bucket: Bucket, value: float) -> "BucketCtrTable":
        values = dict(self.values)
        values[bucket] = value
        return BucketCtrTable(values)


@dataclass(frozen=True)
class PositionCtrTable:
    values: Mapping[int, float] = field(default_factory=lambda: dict(POSITION_CTR_SERIES))

    def position_ctr(self, position: int) -> float:
        """CTR for a discrete position, falling back to the bucket default then 21+."""
        if position in self.values:
            return self.values[position]
        return DEFAULT_BUCKET_CTR.get(bucket_of(position), BEYOND_20_CTR)

    def base_ctr(self, target: Union[Bucket, int]) -> float:
        if not isinstance(target, Bucket):
            return self.position_ctr(target)
        if target.last is None:
            return self.position_ctr(target.first)
        return _mean(self.position_ctr(p) for p in range(target.first, target.last + 1))

    def with_ctr(self, position: int, value: float) -> "PositionCtrTable":
        values = dict(self.values)
        values[position] = value
        return PositionCtrTable(values)


CtrTable = Union[BucketCtrTable, PositionCtrTable]


# --- Effective CTR with Uplift ---
def ctr_of(target: Union[Bucket, int], table: CtrTable, uplift_pct: float = 0.0) -> float:
    """
    Effective CTR (percent) for a bucket or a position.

    The uplift is applied multiplicatively and is not clamped, so a large
    negative uplift yields a negative CTR.
    """
    return table.base_ctr(target) * (1 + uplift_pct / 100)
