import json
from datetime import datetime, timezone
from logging import Formatter, LogRecord

# Attributes every LogRecord has; anything else on a record arrived through `extra=`
STANDARD_RECORD_ATTRIBUTES = frozenset(vars(LogRecord('', 0, '', 0, '', None, None)).keys()) | {'message', 'asctime'}


class JsonLogFormatter(Formatter):
    def __init__(self, service: str = 'ecs-deployer'):
        super().__init__()
        self.__service = service

    def format(self, record: LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "service": self.__service,
            "logger": record.name
        }

        log_entry.update(
            (key, value) for key, value in vars(record).items() if key not in STANDARD_RECORD_ATTRIBUTES
        )

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)
