import uvicorn

from selfmanager.server.shared import config


def main() -> None:
    uvicorn.run(
        'selfmanager.server.app:app',
        host=config.host,
        port=config.port,
        log_level='info',
    )


if __name__ == '__main__':
    main()
