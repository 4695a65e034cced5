#!/usr/bin/env python3
from dotenv import load_dotenv

load_dotenv()

from pocketbook import create_app  # noqa: E402

# Procfile: `web: gunicorn wsgi:app`
app = create_app()
