"""Logging for the friction reporter service.

``LOG_FORMAT=json`` writes one JSON object per line, anything else writes plain
text. Extras passed as ``psc_<name>`` end up under ``context`` in JSON output.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone

SERVICE_NAME = "friction-reporter"
CONTEXT_PREFIX = "psc_"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ServiceJSONFormatter(logging.Formatter):
	def format(self, record: logging.LogRecord) -> str:
		entry = {
			"ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
			"service": SERVICE_NAME,
			"level": record.levelname,
			"logger": record.name,
			"message": record.getMessage(),
		}
		context = {
			key[len(CONTEXT_PREFIX):]: value
			for key, value in vars(record).items()
			if key.startswith(CONTEXT_PREFIX)
		}
		if context:
			entry["context"] = context
		if record.exc_info:
			entry["error"] = self.formatException(record.exc_info)
		return json.dumps(entry, default=str)


def logging_config(log_format: str, level: str) -> dict:
	formatter = "json" if log_format == "json" else "text"
	return {
		"version": 1,
		"disable_existing_loggers": False,
		"formatters": {
			"text": {"format": TEXT_FORMAT},
			"json": {"()": ServiceJSONFormatter},
		},
		"handlers": {
			"stderr": {"class": "logging.StreamHandler", "stream": "ext://sys.stderr", "formatter": formatter},
		},
		"root": {"level": level.upper(), "handlers": ["stderr"]},
		"loggers": {
			# Route the server's own loggers through the same handler
			"uvicorn": {"handlers": [], "propagate": True},
			"uvicorn.access": {"handlers": [], "propagate": True},
			"uvicorn.error": {"handlers": [], "propagate": True},
			# One line per REST store request is noise at INFO
			"httpx": {"level": "WARNING"},
		},
	}


def setup_logging(log_format: str, level: str = "INFO") -> None:
	logging.config.dictConfig(logging_config(log_format, level))
