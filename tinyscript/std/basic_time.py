import time
from datetime import datetime


class BasicTime:
    """Host side of the ``time`` native object."""

    def time(self) -> str:
        return datetime.now().strftime('%Y-%m-%d %H:%M:%S')

    def timestamp(self) -> int:
        return time.time_ns() // 1_000_000
