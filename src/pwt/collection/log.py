"""
Collection 的日志适配器.

库只写 DEBUG 日志, 不安装任何处理器, 输出由应用自行配置.

- `log`: `%` 占位符格式(默认 logging 行为)
- `logf`: `{}` 格式化, 关键字参数同时作为记录上的字段
"""

from __future__ import annotations

import logging
from typing import Any


def get_logger_adapter(name: str | None = None, **extra: Any) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), **extra)


class LoggerAdapter:
    """
    日志适配器, 封装标准库 `logging.Logger`.

    构造时传入的 `extra` 会合并到每条日志记录上.
    `logf` 在级别启用时才格式化消息, 格式化后的文本即记录的 `msg`,
    因此任何标准格式化器都能直接输出.
    """

    def __init__(self, logger: logging.Logger, **extra: Any) -> None:
        self.logger = logger
        self.extra = extra

    def debug(self, msg: str, *args: Any) -> None:
        self.log(logging.DEBUG, msg, *args)

    def log(self, level: int, msg: str, *args: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, msg, *args, extra=dict(self.extra))

    def debugf(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logf(logging.DEBUG, msg, *args, **kwargs)

    def logf(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        以 `str.format` 风格写日志.

        Args:
            level: 日志级别.
            msg: 消息模板, 可引用 `extra` 与关键字参数.
            *args: 位置参数.
            **kwargs: 关键字参数, 同时写入记录的字段.
        """
        if not self.logger.isEnabledFor(level):
            return
        fields = {**self.extra, **kwargs}
        try:
            text = msg.format(*args, **fields)
        except (IndexError, KeyError, ValueError):
            text = msg
        self.logger.log(level, text, extra=fields)
