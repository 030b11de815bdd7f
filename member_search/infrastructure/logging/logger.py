import logging
from typing import Optional, Union

DEFAULT_NOISY_LIBS = {"sqlalchemy.engine": logging.WARNING, "testcontainers": logging.WARNING}


def setup_logging(level: Union[str, int] = logging.INFO, noisy_libs: Optional[dict[str, int]] = None) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    logging.basicConfig(
        level=level.upper() if isinstance(level, str) else level,
        handlers=[handler],
        force=True,
    )

    for lib, lib_level in (noisy_libs if noisy_libs is not None else DEFAULT_NOISY_LIBS).items():
        logging.getLogger(lib).setLevel(lib_level)
