from typing import Optional, Tuple


class BasicIO:
    """Host side of the ``file`` native object.

    Both methods report failures through a trailing error value instead of
    raising, so the interpreter can turn them into runtime errors.
    """

    def read_file(self, filename: str) -> Tuple[str, Optional[Exception]]:
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                return f.read(), None
        except OSError as e:
            return '', e

    def write_file(self, filename: str, content: str, mode: str) -> Tuple[None, Optional[Exception]]:
        open_mode = 'a' if mode == 'append' else 'w'
        try:
            with open(filename, open_mode, encoding='utf-8') as f:
                f.write(content)
            return None, None
        except OSError as e:
            return None, e
