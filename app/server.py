import logging
import uvicorn

from app.configuration.settings import Configuration


def run():
    configuration = Configuration()
    logging.info(f"SISTEMA >>> Servidor rodando na porta {configuration.port}")
    uvicorn.run("app:create_app", factory=True, host="0.0.0.0", port=configuration.port)


if __name__ == "__main__":
    run()
