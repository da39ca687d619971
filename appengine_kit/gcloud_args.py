from __future__ import annotations

import os
from typing import Iterable, List, Optional, Union

FlagValue = Union[str, bool, int, "os.PathLike[str]"]


def _render(value: FlagValue) -> str:
    # bool 은 int 하위 타입이므로 먼저 검사
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    return str(value)


def flag(name: str, value: Optional[FlagValue]) -> List[str]:
    """
    `--<name> <value>` 두 토큰을 만든다. 값이 None 이면 빈 리스트.
    """
    if value is None:
        return []
    return [f"--{name}", _render(value)]


def flags_each(name: str, values: Optional[Iterable[FlagValue]]) -> List[str]:
    """
    값마다 `--<name> <value>` 쌍을 순서대로 만든다.
    """
    if values is None:
        return []
    args: List[str] = []
    for value in values:
        args.extend(flag(name, value))
    return args
