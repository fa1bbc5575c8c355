from video_digest.logging_core.logger import get_logger, log_event, release_logger, set_level

__all__ = ["get_logger", "log_event", "release_logger", "set_level"]
