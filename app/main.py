from dotenv import load_dotenv

load_dotenv()

# Application imports happen after load_dotenv() so settings see the .env values.
from server import server  # noqa: E402

server_app = server.handler
