from fastapi import FastAPI

from selfmanager import get_version


def add_health_endpoints(app: FastAPI) -> None:
    @app.get('/alive')
    async def alive():
        return {'status': 'ok'}

    @app.get('/health')
    async def health() -> dict[str, str]:
        return {'status': 'ok', 'version': get_version()}
