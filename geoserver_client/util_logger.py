# ============================================================================
# CLAUDE CONTEXT - LOGGING
# ============================================================================
# STATUS: Shared - used by the client and the application settings
# PURPOSE: JSON structured logging with key-value custom dimensions
# EXPORTS: ComponentType, LogLevel, LogContext, JSONFormatter, LoggerFactory
# INTERFACES: Dataclass models, enums, factory, JSON formatter
# DEPENDENCIES: enum, dataclasses, typing, datetime, logging, json (stdlib only!)
# PATTERNS: JSON-only output, key-value dimensions via extra['custom_dimensions']
# ENTRY_POINTS: LoggerFactory.create_logger()
# INDEX: ComponentType:44, LogLevel:56, LogContext:81, JSONFormatter:118, LoggerFactory:161
# ============================================================================

"""
Unified Logger System

Every log call carries its key-value pairs in ``extra['custom_dimensions']``,
which the JSON formatter emits as ``customDimensions``. Loggers created by the
factory also stamp the component type/name onto each record.

Create factory loggers once, at module level:

    logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "RestGeoserverClient")
    logger.debug(
        "Querying Geoserver for workspaces",
        extra={'custom_dimensions': {'url': url}}
    )
"""

from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import os
import sys
import json


# ============================================================================
# COMPONENT TYPES
# ============================================================================

class ComponentType(Enum):
    """
    Component types for the client library.
    """
    ADAPTER = "adapter"        # External integration layer (REST clients)
    CONFIG = "config"          # Configuration loading and validation


# ============================================================================
# LOG LEVELS - Standard Python levels with enum safety
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Create from string, case-insensitive."""
        return cls[level.upper()]


# ============================================================================
# LOG CONTEXT - Correlation across calls against one server
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """
    Per-client fields added to every event the client logs.

    Lets one process tell apart events from several GeoServer instances,
    or from batches of calls tagged with a caller correlation ID.
    """
    geoserver_url: Optional[str] = None   # Base URL of the target server
    correlation_id: Optional[str] = None  # Caller-supplied correlation ID

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            k: v for k, v in {
                'geoserver_url': self.geoserver_url,
                'correlation_id': self.correlation_id
            }.items() if v is not None
        }


# ============================================================================
# COMPONENT CONFIGURATION
# ============================================================================

@dataclass
class ComponentConfig:
    """
    Configuration for component-specific logging.
    """
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO


# ============================================================================
# JSON FORMATTER
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    One JSON object per line, custom dimensions nested under customDimensions.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# LOGGER FACTORY
# ============================================================================

class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    Calling create_logger() again for the same component and name returns
    the same logger with its level and handler reset.

    Example:
        logger = LoggerFactory.create_logger(
            ComponentType.ADAPTER,
            "RestGeoserverClient"
        )
        logger.info("Workspace created")
    """

    # DEBUG_LOGGING=true lowers every component to DEBUG
    default_level = LogLevel.DEBUG if os.getenv('DEBUG_LOGGING', '').lower() == 'true' else LogLevel.INFO

    DEFAULT_CONFIGS = {
        ComponentType.ADAPTER: ComponentConfig(
            component_type=ComponentType.ADAPTER,
            log_level=default_level
        ),
        ComponentType.CONFIG: ComponentConfig(
            component_type=ComponentType.CONFIG,
            log_level=default_level
        )
    }

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        config: Optional[ComponentConfig] = None
    ) -> logging.Logger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "RestGeoserverClient")
            config: Optional custom configuration

        Returns:
            Configured Python logger
        """
        if config is None:
            config = cls.DEFAULT_CONFIGS.get(
                component_type,
                ComponentConfig(component_type=component_type)
            )

        logger_name = f"{component_type.value}.{name}"
        logger = logging.getLogger(logger_name)

        if isinstance(config.log_level, str):
            log_level = LogLevel.from_string(config.log_level).to_python_level()
        else:
            log_level = config.log_level.to_python_level()
        logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

        logger.propagate = True

        # Loggers are process-wide: patch _log once, never wrap a wrapper
        if not hasattr(logger, '_component_original_log'):
            logger._component_original_log = logger._log
        original_log = logger._component_original_log

        def log_with_component(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
            """Wrapper to inject the component as custom dimensions."""
            if extra is None:
                extra = {}

            custom_dims = {
                'component_type': component_type.value,
                'component_name': name
            }

            if 'custom_dimensions' in extra:
                custom_dims.update(extra['custom_dimensions'])

            extra['custom_dimensions'] = custom_dims

            original_log(level, msg, args, exc_info=exc_info, extra=extra,
                         stack_info=stack_info, stacklevel=stacklevel)

        logger._log = log_with_component

        return logger
