from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

from pocketbook import create_app  # noqa: E402

app = create_app(os.getenv("CONFIG_CLASS", "pocketbook.config.DevelopmentConfig"))

if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))  # Default to 8000 if not in .env
    app.run(host="0.0.0.0", port=port, debug=app.config.get("FLASK_DEBUG", False))
