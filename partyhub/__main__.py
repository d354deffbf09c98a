"""Run the server: ``python -m partyhub`` (honors HOST and PORT)."""

import uvicorn

from partyhub.config import settings

if __name__ == "__main__":
    uvicorn.run("partyhub.main:app", host=settings.host, port=settings.port)
