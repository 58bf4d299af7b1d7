# python -m gateway
import uvicorn

from gateway.core import config


def main() -> None:
    uvicorn.run("gateway.main:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
