import logging
import sys

import orjson
from pythonjsonlogger.json import JsonFormatter


class OrJsonEncoder:
    def __init__(self, *args, **kwargs):
        del args
        del kwargs


def logger_json_serializer(log_record, default=None, cls=None, indent=None, ensure_ascii=False) -> str:
    assert default is None and cls is OrJsonEncoder and indent is None and ensure_ascii is False, (
        default,
        cls,
        indent,
        ensure_ascii,
    )
    return orjson.dumps(log_record, default=str).decode('utf-8')


class CustomJsonFormatter(JsonFormatter):
    def __init__(self, format_string):
        super().__init__(
            format_string, json_encoder=OrJsonEncoder, json_serializer=logger_json_serializer, json_ensure_ascii=False
        )

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        # GCP Logging expects `severity` but jsonlogger uses `levelname`
        log_record['severity'] = record.levelname
        log_record['funcNameAndLine'] = f"{record.funcName}:{record.lineno}"


def configure_logging(level=logging.INFO, stream=None):
    fmt = CustomJsonFormatter('%(severity)s %(levelname)s %(asctime)s %(filename)s %(funcNameAndLine)s %(message)s')

    stream_handler = logging.StreamHandler(stream=stream or sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(fmt)

    logging.basicConfig(handlers=[stream_handler], level=level, force=True)
