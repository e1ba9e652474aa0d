import logging

from hostpricing.settings import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """루트 로거를 설정합니다. 이미 핸들러가 있으면 레벨만 갱신됩니다."""
    logging.basicConfig(
        level=level or settings.log_level,
        format=LOG_FORMAT,
    )
    logging.getLogger().setLevel(level or settings.log_level)
