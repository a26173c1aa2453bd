from .config import GrantConfig, LogLevel, load_grant_config_from_env
from .exceptions import (
    AccessDeniedError,
    ConfigurationError,
    ErrorRegistry,
    GrantError,
    InvalidArgumentError,
    MaskFormatError,
    error_registry,
    register_error,
)
from .grant import CheckResult, Grant
from .interfaces import ErrorReporter, GrantResolver, RaisingErrorReporter
from .logging import (
    GrantLogFormatter,
    GrantLoggerAdapter,
    get_grant_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .masks import (
    ALLOW,
    DENY,
    Allow,
    Deny,
    FieldMap,
    Mask,
    NumericRange,
    check_path,
    combine,
    combine_masks,
    masked_out_fields,
    normalize_numbers,
    parse_mask,
    path_reachable,
    resolve_path,
    to_raw,
    union,
)
from .resolution import build_grant

__all__ = [
    'ALLOW',
    'DENY',
    'AccessDeniedError',
    'Allow',
    'CheckResult',
    'ConfigurationError',
    'Deny',
    'ErrorRegistry',
    'ErrorReporter',
    'FieldMap',
    'Grant',
    'GrantConfig',
    'GrantError',
    'GrantLogFormatter',
    'GrantLoggerAdapter',
    'GrantResolver',
    'InvalidArgumentError',
    'LogLevel',
    'Mask',
    'MaskFormatError',
    'NumericRange',
    'RaisingErrorReporter',
    'build_grant',
    'check_path',
    'combine',
    'combine_masks',
    'error_registry',
    'get_grant_logger',
    'load_grant_config_from_env',
    'masked_out_fields',
    'normalize_numbers',
    'parse_mask',
    'path_reachable',
    'redact_secrets',
    'register_error',
    'resolve_path',
    'safe_log_value',
    'safe_preview',
    'setup_logging',
    'to_raw',
    'union',
]
