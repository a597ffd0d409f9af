from typing import Dict, Optional

from tinyscript.builtin_function import NativeFunction
from .basic_io import BasicIO
from .basic_os import BasicOS
from .basic_time import BasicTime


class NativeRegistry:
    """Host functions keyed by (object name, method name)."""
    def __init__(self):
        self.objects: Dict[str, Dict[str, NativeFunction]] = {}

    def register_native(self, obj: str, method: str, fn: NativeFunction):
        self.objects.setdefault(obj, {})[method] = fn

    def get_native_object(self, name: str) -> Optional[Dict[str, NativeFunction]]:
        return self.objects.get(name)


def populate_native_registry(registry: NativeRegistry) -> NativeRegistry:
    basic_io = BasicIO()
    basic_os = BasicOS()
    basic_time = BasicTime()

    registry.register_native('file', 'read_file', NativeFunction('read_file', ['filename'], True, basic_io.read_file))
    registry.register_native('file', 'write_file', NativeFunction('write_file', ['filename', 'content', 'mode'], True, basic_io.write_file))
    registry.register_native('os', 'num_cpu', NativeFunction('num_cpu', [], False, basic_os.num_cpu))
    registry.register_native('os', 'pwd', NativeFunction('pwd', [], False, basic_os.pwd))
    registry.register_native('time', 'time', NativeFunction('time', [], False, basic_time.time))
    registry.register_native('time', 'timestamp', NativeFunction('timestamp', [], False, basic_time.timestamp))
    return registry


def default_registry() -> NativeRegistry:
    return populate_native_registry(NativeRegistry())
