import logging, sys

def setup_logging(level: str = "INFO"):
    root = logging.getLogger()
    if root.handlers:
        # deja configurat (uvicorn/pytest) -> doar aliniem nivelul
        root.setLevel(level.upper())
        return
    root.setLevel(level.upper())
    h = logging.StreamHandler(sys.stdout)
    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    h.setFormatter(fmt)
    root.addHandler(h)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level.upper())
