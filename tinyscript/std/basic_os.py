import os


class BasicOS:
    """Host side of the ``os`` native object."""

    def num_cpu(self) -> int:
        return os.cpu_count() or 1

    def pwd(self) -> str:
        return os.getcwd()
