import logging
from abc import ABC
from abc import abstractmethod
from enum import Enum
from enum import auto
from typing import Final
from typing import final

logger: Final = logging.getLogger(__name__)


@final
class NotificationKind(Enum):
    INFO = auto()
    ERROR = auto()
    WARNING = auto()
    NONE = auto()


class Notifier(ABC):
    @abstractmethod
    def notify(self, title: str, message: str, kind: NotificationKind = NotificationKind.INFO) -> None: ...


@final
class LoggingNotifier(Notifier):
    _LEVELS: Final = {
        NotificationKind.INFO: logging.INFO,
        NotificationKind.ERROR: logging.ERROR,
        NotificationKind.WARNING: logging.WARNING,
        NotificationKind.NONE: logging.DEBUG,
    }

    def notify(self, title: str, message: str, kind: NotificationKind = NotificationKind.INFO) -> None:
        logger.log(LoggingNotifier._LEVELS[kind], f"{title}: {message}")

