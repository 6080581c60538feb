from datetime import datetime
from pathlib import Path

from helmetwatch.settings import PROJECT_ROOT

LOG_DIR = PROJECT_ROOT / "logs"


def append_log(log_path: Path, msg: str) -> str:
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    line = f"{ts} | {msg}"
    print(line, flush=True)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as f:
        f.write(line + "\n")
    return line


def worker_logger(name: str):
    log_path = LOG_DIR / f"{name}.log"

    def log(msg: str) -> None:
        append_log(log_path, msg)

    return log
