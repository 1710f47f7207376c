# polyhomes_app/wsgi.py
from polyhomes_app import create_app

app = create_app()
