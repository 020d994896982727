from file_logger.common.logging import SanitizingFilter, sanitize_log_message, setup_logging

__all__ = ["SanitizingFilter", "sanitize_log_message", "setup_logging"]
