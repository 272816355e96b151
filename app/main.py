import uvicorn
from dotenv import load_dotenv

from server import server

load_dotenv()

server_app = server.handler


def main():
    """Run the form relay with uvicorn."""
    settings = server.settings
    uvicorn.run(
        "main:server_app",
        host="0.0.0.0",
        port=settings.server.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
