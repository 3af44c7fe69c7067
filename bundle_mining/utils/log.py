import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO):
    """Configure root logging for experiment scripts."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger('bundle_mining').setLevel(level)
